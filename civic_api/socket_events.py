"""WebSocket events for live worker location and task chat."""

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
import jwt
import logging

from civic_api import db
from civic_api.models import Issue, User
from civic_api.services.issues import can_chat_on_issue
from civic_api.services.locations import get_trackers, record_worker_location
from civic_api.utils.auth import decode_user_id
from civic_api.utils.geo import InvalidCoordinateError, parse_coordinate

logger = logging.getLogger(__name__)


def get_user_from_token(token):
    """Extract user ID from JWT token."""
    if not token:
        return None
    try:
        return decode_user_id(token)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Token decode error: {e}")
        return None


def worker_room(worker_id):
    return f'worker_{worker_id}'


def task_room(issue_id):
    return f'task_{issue_id}'


def _socket_users():
    """sid -> user_id for the sockets connected to this app."""
    return current_app.extensions.setdefault('socket_users', {})


def register_socket_events(socketio):
    """Register all Socket.IO event handlers."""
    
    @socketio.on('connect')
    def handle_connect(auth=None):
        """Authenticate the socket; workers also subscribe to their location channel."""
        token = None
        if auth and isinstance(auth, dict):
            token = auth.get('token')
        elif request.args.get('token'):
            token = request.args.get('token')
        
        user_id = get_user_from_token(token)
        if not user_id:
            logger.warning('Socket connection without a valid token')
            return False
        
        user = db.session.get(User, user_id)
        if not user:
            logger.warning(f'Socket connection for unknown user {user_id}')
            return False
        
        _socket_users()[request.sid] = user.id
        
        if user.is_worker:
            room = worker_room(user.id)
            join_room(room)
            
            def push_distances(update, room=room):
                socketio.emit('task_distances', update.to_dict(), to=room)
            
            get_trackers().bind_session(request.sid, user.id, push_distances)
        
        logger.info(f'User {user.id} connected: {request.sid}')
        emit('connected', {'user_id': user.id, 'role': user.role})
        return True
    
    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Forget the socket and release its location subscription."""
        user_id = _socket_users().pop(request.sid, None)
        get_trackers().release_session(request.sid)
        if user_id:
            logger.info(f'User {user_id} disconnected: {request.sid}')
    
    @socketio.on('location_update')
    def handle_location_update(data):
        """Worker device reports a new position.
        
        Payload: {"latitude": float, "longitude": float}
        Recomputed distances go out as 'task_distances' to the worker's room.
        """
        user_id = _socket_users().get(request.sid)
        user = db.session.get(User, user_id) if user_id else None
        if not user or not user.is_worker:
            emit('error', {'message': 'Only workers can share location'})
            return
        
        data = data if isinstance(data, dict) else {}
        try:
            coordinate = parse_coordinate(data.get('latitude'), data.get('longitude'))
        except InvalidCoordinateError as e:
            emit('error', {'message': str(e)})
            return
        
        try:
            record_worker_location(user, coordinate)
        except Exception as e:
            db.session.rollback()
            logger.error(f'Location update error for worker {user.id}: {e}', exc_info=True)
            emit('error', {'message': 'Failed to update location'})
    
    @socketio.on('join_task')
    def handle_join_task(data):
        """Join a task chat room."""
        issue_id = data.get('task_id') if isinstance(data, dict) else None
        user_id = _socket_users().get(request.sid)
        if not issue_id or not user_id:
            emit('error', {'message': 'Missing task_id'})
            return
        
        issue = db.session.get(Issue, issue_id)
        user = db.session.get(User, user_id)
        if not issue or not user or not can_chat_on_issue(user, issue):
            emit('error', {'message': 'Access denied'})
            return
        
        join_room(task_room(issue_id))
        emit('joined_task', {'task_id': issue_id})
    
    @socketio.on('leave_task')
    def handle_leave_task(data):
        """Leave a task chat room."""
        issue_id = data.get('task_id') if isinstance(data, dict) else None
        if not issue_id:
            return
        leave_room(task_room(issue_id))
        emit('left_task', {'task_id': issue_id})


def emit_task_message(socketio, issue_id, message_dict):
    """Emit a new chat message to everyone in the task room."""
    try:
        socketio.emit('new_task_message', {
            'message': message_dict,
            'task_id': issue_id
        }, to=task_room(issue_id))
    except Exception as e:
        logger.error(f'Emit message error: {e}')
