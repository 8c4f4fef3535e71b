"""Registration, login and bearer-token handling."""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash

from app.errors import AuthError, ConflictError, ForbiddenError, ValidationError
from app.extensions import db
from app.models import User, Role

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'

# Compared against when the email is unknown so both login failures cost a hash check
_dummy_hash = None


def _normalize_email(email):
    return (email or '').strip().lower()


def hash_password(password: str) -> str:
    return generate_password_hash(
        password, method=current_app.config['PASSWORD_HASH_METHOD']
    )


def register(email: str, password: str, name: str) -> User:
    email = _normalize_email(email)
    name = (name or '').strip()
    if not email or not password or not name:
        raise ValidationError('Please provide email, password, and name')

    if User.query.filter_by(email=email).first():
        raise ConflictError('User with this email already exists')

    user = User(
        email=email,
        password=hash_password(password),
        name=name,
        role=Role.STUDENT,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Concurrent registration won the unique index
        db.session.rollback()
        raise ConflictError('User with this email already exists')

    logger.info('Registered user %s', user.id)
    return user


def login(email: str, password: str):
    """Return ``(user, token)``; any credential mismatch raises the same AuthError."""
    global _dummy_hash
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationError('Please provide email and password')

    user = User.query.filter_by(email=email).first()
    if user is None:
        if _dummy_hash is None:
            _dummy_hash = hash_password('not-a-real-password')
        check_password_hash(_dummy_hash, password)
        logger.warning('Failed login attempt')
        raise AuthError(INVALID_CREDENTIALS)

    if not check_password_hash(user.password, password):
        logger.warning('Failed login attempt')
        raise AuthError(INVALID_CREDENTIALS)

    logger.info('User %s logged in', user.id)
    return user, issue_token(user.id)


def issue_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': user_id,
        # Older tokens carry only userId
        'userId': user_id,
        'iat': now,
        'exp': now + timedelta(days=current_app.config['JWT_EXPIRES_DAYS']),
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def verify_token(token: str) -> str:
    """Decode a bearer token and return the user id it carries."""
    if not token:
        raise AuthError('Missing authorization token')

    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except jwt.ExpiredSignatureError:
        raise AuthError('Token expired')
    except jwt.InvalidTokenError:
        raise AuthError('Invalid token')

    user_id = payload.get('sub') or payload.get('userId')
    if not user_id:
        raise AuthError('Invalid token payload')
    return user_id


def authorize(user: User, allowed_roles) -> None:
    """Raise ForbiddenError unless ``user`` holds one of ``allowed_roles``.

    An empty ``allowed_roles`` lets any authenticated user through.
    """
    allowed = {Role.parse(r) for r in allowed_roles}
    if allowed and user.role not in allowed:
        raise ForbiddenError('You do not have permission to perform this action')


def set_role(email: str, role) -> User:
    user = User.query.filter_by(email=_normalize_email(email)).first()
    if user is None:
        raise ValidationError(f'No user with email {email}')
    user.role = Role.parse(role)
    db.session.commit()
    logger.info('User %s role set to %s', user.id, user.role.value)
    return user


def user_to_dict(user):
    """Serialize a User; the password hash is never included."""
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name,
        'role': user.role.value,
        'created_at': user.created_at.isoformat() if user.created_at else None,
    }
