"""Shared authentication utilities.

Tokens are issued by the external identity provider; this backend only
verifies them. The payload must carry a ``user_id`` claim and be signed
with ``JWT_SECRET_KEY`` (HS256).
"""

from functools import wraps
from flask import request, jsonify, current_app
import jwt
import logging

logger = logging.getLogger(__name__)


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def decode_user_id(token):
    """Return the user_id from a token, accepting 'Bearer <token>' or a raw token.

    Raises jwt.InvalidTokenError (or a subclass) if the token is invalid.
    """
    if token.startswith('Bearer '):
        token = token.split(' ', 1)[1]
    payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
    if 'user_id' not in payload:
        raise jwt.InvalidTokenError('Token has no user_id claim')
    return payload['user_id']


def token_required(f):
    """
    Decorator to require valid JWT token.
    
    Extracts user_id from JWT token and passes it as the first argument
    to the decorated function.
    
    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        
        if not auth_header:
            return jsonify({'error': 'Token is missing'}), 401
        
        try:
            current_user_id = decode_user_id(auth_header)
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except jwt.InvalidTokenError as e:
            logger.debug(f'Rejected token: {e}')
            return jsonify({'error': 'Token is invalid'}), 401
        
        return f(current_user_id, *args, **kwargs)
    return decorated


def role_required(*roles):
    """
    Decorator to require a valid JWT token for a user holding one of ``roles``.
    
    Loads the user and passes the full User object as the first argument.
    Must not be stacked with token_required.
    
    Usage:
        @bp.route('/tasks')
        @role_required('worker')
        def worker_tasks(current_user):
            return jsonify({'id': current_user.id})
    """
    def decorator(f):
        @wraps(f)
        @token_required
        def decorated(current_user_id, *args, **kwargs):
            # Import here to avoid circular imports
            from civic_api import db
            from civic_api.models import User
            
            user = db.session.get(User, current_user_id)
            if not user:
                return jsonify({'error': 'User not found'}), 401
            if user.role not in roles:
                return jsonify({'error': f"This action requires role: {', '.join(roles)}"}), 403
            
            return f(user, *args, **kwargs)
        return decorated
    return decorator
