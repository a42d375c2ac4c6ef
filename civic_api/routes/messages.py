"""Task chat routes between the assigned worker and municipal staff."""

from flask import Blueprint, request, jsonify
from civic_api import db, socketio
from civic_api.constants import ROLE_ADMIN, ROLE_WORKER
from civic_api.models import Issue, User, TaskMessage
from civic_api.services.issues import can_chat_on_issue
from civic_api.socket_events import emit_task_message
from civic_api.utils import token_required
from civic_api.utils.validation import sanitize_text
import logging

logger = logging.getLogger(__name__)

messages_bp = Blueprint('messages', __name__)

MAX_MESSAGE_LENGTH = 2000


def _load_chat(current_user_id, issue_id):
    """Return (user, issue, error_response)."""
    issue = db.session.get(Issue, issue_id)
    if not issue:
        return None, None, (jsonify({'error': 'Task not found'}), 404)
    
    user = db.session.get(User, current_user_id)
    if not user or not can_chat_on_issue(user, issue):
        return None, None, (jsonify({'error': 'Access denied'}), 403)
    
    return user, issue, None


@messages_bp.route('/<int:issue_id>/messages', methods=['GET'])
@token_required
def get_task_messages(current_user_id, issue_id):
    """Get the chat thread for a task, oldest first."""
    try:
        user, issue, error = _load_chat(current_user_id, issue_id)
        if error:
            return error
        
        messages = issue.messages.all()
        
        return jsonify({
            'messages': [m.to_dict() for m in messages],
            'total': len(messages)
        }), 200
    except Exception as e:
        logger.error(f'Error fetching messages for task {issue_id}: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500


@messages_bp.route('/<int:issue_id>/messages', methods=['POST'])
@token_required
def send_task_message(current_user_id, issue_id):
    """Post a message to a task's chat.

    Body: {"content": str}
    """
    try:
        user, issue, error = _load_chat(current_user_id, issue_id)
        if error:
            return error
        
        data = request.get_json(silent=True) or {}
        content = sanitize_text(data.get('content') or '')
        if not content:
            return jsonify({'error': 'Message content is required'}), 400
        if len(content) > MAX_MESSAGE_LENGTH:
            return jsonify({'error': f'Message cannot exceed {MAX_MESSAGE_LENGTH} characters'}), 400
        
        message = TaskMessage(
            issue_id=issue.id,
            sender_id=user.id,
            sender_role=ROLE_ADMIN if user.role == ROLE_ADMIN else ROLE_WORKER,
            content=content
        )
        db.session.add(message)
        db.session.commit()
        
        message_dict = message.to_dict()
        emit_task_message(socketio, issue.id, message_dict)
        
        return jsonify({
            'message': message_dict
        }), 201
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error sending message on task {issue_id}: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500
