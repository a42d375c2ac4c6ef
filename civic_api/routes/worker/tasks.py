"""Worker task list, navigation and location routes."""

from flask import request, jsonify
from civic_api import db
from civic_api.constants import ROLE_WORKER, STATUSES
from civic_api.services.issues import assigned_tasks
from civic_api.services.tracking import compute_proximities
from civic_api.utils import role_required
from civic_api.utils.geo import (
    estimate_distance_km,
    estimate_eta_minutes,
    format_eta,
    map_region,
    parse_coordinate,
)
from civic_api.routes.worker import worker_bp
from civic_api.routes.worker.helpers import request_origin, get_worker_task
from civic_api.services.locations import record_worker_location
import logging

logger = logging.getLogger(__name__)


@worker_bp.route('/tasks', methods=['GET'])
@role_required(ROLE_WORKER)
def get_worker_tasks(current_user):
    """Get tasks assigned to the current worker.

    Query params:
        - latitude, longitude: Worker location (defaults to the last stored one)
        - status: Optional status filter

    With a location, each task includes distance (km, 1 decimal),
    eta_minutes and duration, and tasks are sorted nearest first.
    Without one, tasks are newest first and distance is null.
    """
    origin = request_origin(current_user)
    status = request.args.get('status')
    if status and status not in STATUSES:
        return jsonify({'error': f"Invalid status. Must be one of: {', '.join(STATUSES)}"}), 400
    
    try:
        tasks = assigned_tasks(current_user.id)
        counts = {s: 0 for s in STATUSES}
        for task in tasks:
            counts[task.status] = counts.get(task.status, 0) + 1
        
        if status:
            tasks = [task for task in tasks if task.status == status]
        
        tasks_by_id = {task.id: task.to_dict() for task in tasks}
        
        if origin is not None:
            results = []
            for proximity in compute_proximities(origin, tasks):
                task_dict = tasks_by_id[proximity.task_id]
                task_dict['distance'] = proximity.distance_km
                task_dict['eta_minutes'] = proximity.eta_minutes
                task_dict['duration'] = proximity.duration
                results.append(task_dict)
        else:
            results = list(tasks_by_id.values())
            for task_dict in results:
                task_dict['distance'] = None
                task_dict['eta_minutes'] = None
                task_dict['duration'] = None
        
        return jsonify({
            'tasks': results,
            'total': len(results),
            'counts': counts,
            'origin': origin.to_dict() if origin else None
        }), 200
    except Exception as e:
        logger.error(f'Error in get_worker_tasks: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500


@worker_bp.route('/tasks/<int:task_id>/navigation', methods=['GET'])
@role_required(ROLE_WORKER)
def get_task_navigation(current_user, task_id):
    """Distance, ETA and map region from the worker to one task.

    Query params:
        - latitude, longitude: Worker location (defaults to the last stored one)
    """
    task, error, code = get_worker_task(current_user, task_id)
    if error:
        return jsonify({'error': error}), code
    
    origin = request_origin(current_user)
    if origin is None:
        return jsonify({'error': 'Current location is required for navigation'}), 400
    
    target = task.coordinate()
    km = estimate_distance_km(origin, target)
    eta = estimate_eta_minutes(km)
    
    return jsonify({
        'task': task.to_dict(),
        'origin': origin.to_dict(),
        'destination': target.to_dict(),
        'distance_km': round(km, 2),
        'eta_minutes': eta,
        'duration': format_eta(eta),
        'region': map_region(origin, target)
    }), 200


@worker_bp.route('/location', methods=['POST'])
@role_required(ROLE_WORKER)
def update_location(current_user):
    """Store the worker's current location and recompute task distances.

    Body: {"latitude": float, "longitude": float}

    Subscribers on the worker's location channel (open sockets) receive
    the same update.
    """
    data = request.get_json(silent=True) or {}
    coordinate = parse_coordinate(data.get('latitude'), data.get('longitude'))
    
    try:
        update = record_worker_location(current_user, coordinate)
        
        logger.debug(f'Worker {current_user.id} location updated: {coordinate.latitude}, {coordinate.longitude}')
        
        return jsonify({
            'message': 'Location updated',
            'location': coordinate.to_dict(),
            'proximities': [p.to_dict() for p in update.proximities]
        }), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error updating worker location: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500
