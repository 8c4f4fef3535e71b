from functools import wraps
from flask import request, g
from app.errors import AuthError
from app.extensions import db
from app.models import User
from app.services.auth import verify_token, authorize


def _bearer_token():
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header[7:].strip()
    return None


def require_auth(f):
    """Resolve the bearer token to a User and expose it as ``g.user``."""
    @wraps(f)
    def decorated(*args, **kwargs):
        user_id = verify_token(_bearer_token())

        user = db.session.get(User, user_id)
        if user is None:
            # Token outlived its account
            raise AuthError('Invalid token')

        g.user_id = user.id
        g.user = user

        return f(*args, **kwargs)
    return decorated


def require_role(*roles):
    """Gate a view on the caller's role. Stack beneath ``require_auth``:

        @require_auth
        @require_role('ADMIN')
        def view(): ...
    """
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            authorize(g.user, roles)
            return f(*args, **kwargs)
        return decorated
    return decorator
