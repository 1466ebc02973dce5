from functools import wraps
from flask import request, jsonify, g, current_app
from user.jwt_utils import decode_access_token, get_token_from_header
from user.exceptions import InvalidTokenException


def _unauthorized(message, error_code):
    return jsonify({
        'error': message,
        'error_code': error_code,
        'login_url': current_app.config.get('AUTH_LOGIN_URL', '/auth')
    }), 401


def jwt_required(f):
    """JWT authentication decorator for access tokens"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_token_from_header(request)
        if not token:
            return _unauthorized('Access token missing', 'TOKEN_MISSING')

        payload = decode_access_token(token)
        if not payload:
            return _unauthorized('Invalid or expired access token', 'TOKEN_INVALID')

        # Owner id is the only authorization scope
        g.current_user = {
            'owner_id': payload['sub'],
            'token_id': payload.get('jti')
        }

        return f(*args, **kwargs)
    return decorated_function


def get_current_user():
    """Get current user from JWT token"""
    return getattr(g, 'current_user', None)


def get_current_owner_id():
    current_user = get_current_user()
    if not current_user:
        raise InvalidTokenException("No authenticated owner in request context")
    return current_user['owner_id']
