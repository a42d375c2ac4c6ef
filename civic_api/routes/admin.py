"""Administrator routes: assigning reported issues to municipal workers."""

from flask import Blueprint, request, jsonify
from civic_api import db
from civic_api.constants import ROLE_ADMIN, STATUS_COMPLETED
from civic_api.models import Issue, User
from civic_api.services.issues import post_system_message
from civic_api.services.locations import refresh_tracker_tasks
from civic_api.utils import role_required, get_display_name
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/issues/<int:issue_id>/assign', methods=['POST'])
@role_required(ROLE_ADMIN)
def assign_issue(current_user, issue_id):
    """Assign (or reassign) an issue to a worker.

    Body: {"worker_id": int}
    """
    try:
        issue = db.session.get(Issue, issue_id)
        if not issue:
            return jsonify({'error': 'Issue not found'}), 404

        if issue.status == STATUS_COMPLETED:
            return jsonify({'error': 'Completed issues cannot be reassigned'}), 400

        data = request.get_json(silent=True) or {}
        worker_id = data.get('worker_id')
        if not worker_id:
            return jsonify({'error': 'worker_id is required'}), 400

        worker = db.session.get(User, worker_id)
        if not worker or not worker.is_worker:
            return jsonify({'error': 'Worker not found'}), 404

        previous_worker_id = issue.assigned_to_id
        issue.assigned_to_id = worker.id
        issue.assigned_at = datetime.utcnow()
        issue.updated_at = datetime.utcnow()
        post_system_message(issue, f'Task assigned to {get_display_name(worker)}')
        db.session.commit()
        refresh_tracker_tasks(worker.id)
        if previous_worker_id and previous_worker_id != worker.id:
            refresh_tracker_tasks(previous_worker_id)

        logger.info(f'Issue {issue.issue_number} assigned to worker {worker.id} by admin {current_user.id}')

        return jsonify({
            'message': 'Issue assigned successfully',
            'issue': issue.to_dict()
        }), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error assigning issue {issue_id}: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500
