import jwt
from datetime import datetime, timedelta, timezone
from flask import current_app
import secrets


def _settings():
    config = current_app.config
    return config["JWT_SECRET_KEY"], config.get("JWT_ALGORITHM", "HS256")


def generate_access_token(owner_id, expires_in_hours=None):
    """Issue an access token for owner_id (auth provider side, also used by tests)."""
    secret, algorithm = _settings()
    hours = expires_in_hours or current_app.config.get("JWT_EXPIRATION_HOURS", 24)
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(owner_id),
        'token_type': 'access',
        'exp': now + timedelta(hours=hours),
        'iat': now,
        'jti': secrets.token_hex(16)
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token):
    """Decode and validate access token, None when invalid or expired"""
    secret, algorithm = _settings()
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
    if payload.get('token_type') != 'access' or not payload.get('sub'):
        return None
    return payload


def get_token_from_header(request):
    """Extract token from Authorization header"""
    auth_header = request.headers.get('Authorization')
    if auth_header and auth_header.startswith('Bearer '):
        return auth_header.split(' ', 1)[1].strip()
    return None
