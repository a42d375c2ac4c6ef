"""Worker task lifecycle routes (start, complete)."""

from flask import request, jsonify
from civic_api import db
from civic_api.constants import (
    ROLE_WORKER,
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
    WORKER_AVAILABLE,
    WORKER_BUSY,
)
from civic_api.services.issues import post_system_message
from civic_api.utils import role_required
from civic_api.utils.geo import parse_coordinate
from civic_api.routes.worker import worker_bp
from civic_api.routes.worker.helpers import get_worker_task
from civic_api.services.locations import record_worker_location
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


@worker_bp.route('/tasks/<int:task_id>/start', methods=['POST'])
@role_required(ROLE_WORKER)
def start_task(current_user, task_id):
    """Worker starts a pending task."""
    try:
        task, error, code = get_worker_task(current_user, task_id)
        if error:
            return jsonify({'error': error}), code
        
        if task.status != STATUS_PENDING:
            return jsonify({'error': 'Only pending tasks can be started'}), 400
        
        task.status = STATUS_IN_PROGRESS
        task.updated_at = datetime.utcnow()
        current_user.status = WORKER_BUSY
        post_system_message(task, 'Task status changed to In Progress')
        db.session.commit()
        
        logger.info(f'Worker {current_user.id} started task {task.issue_number}')
        
        return jsonify({
            'message': 'Task started',
            'task': task.to_dict()
        }), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error starting task {task_id}: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500


@worker_bp.route('/tasks/<int:task_id>/complete', methods=['POST'])
@role_required(ROLE_WORKER)
def complete_task(current_user, task_id):
    """Worker completes an in-progress task with photo and location evidence.

    Body: {"photo_url": str, "latitude": float, "longitude": float}
    """
    task, error, code = get_worker_task(current_user, task_id)
    if error:
        return jsonify({'error': error}), code
    
    if task.status != STATUS_IN_PROGRESS:
        return jsonify({'error': 'Only in-progress tasks can be completed'}), 400
    
    data = request.get_json(silent=True) or {}
    photo_url = (data.get('photo_url') or '').strip()
    if not photo_url:
        return jsonify({'error': 'A photo is required to complete the task'}), 400
    
    if data.get('latitude') is None or data.get('longitude') is None:
        return jsonify({'error': 'Current location is required to complete the task'}), 400
    location = parse_coordinate(data['latitude'], data['longitude'])
    
    try:
        now = datetime.utcnow()
        task.status = STATUS_COMPLETED
        task.completion_photo = photo_url
        task.completed_at = now
        task.completion_notes = (
            f'Task completed at location: {location.latitude}, {location.longitude}'
        )
        task.updated_at = now
        
        current_user.status = WORKER_AVAILABLE
        post_system_message(task, 'Task status changed to Completed')
        db.session.commit()
        
        # Open sockets get distances from the completion spot, without this task
        record_worker_location(current_user, location)
        
        logger.info(f'Worker {current_user.id} completed task {task.issue_number}')
        
        return jsonify({
            'message': 'Task completed successfully',
            'task': task.to_dict()
        }), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error completing task {task_id}: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500
