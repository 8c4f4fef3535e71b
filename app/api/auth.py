from flask import Blueprint, jsonify, g, current_app
from app.middleware.auth import require_auth, require_role
from app.schemas import LoginRequest, RegisterRequest, parse_body
from app.services import auth as auth_service
from app.services.auth import user_to_dict

bp = Blueprint('auth', __name__)


def _token_response(user, token, status):
    """Body and headers shared by register and login."""
    days = current_app.config['JWT_EXPIRES_DAYS']
    resp = jsonify({
        'user': user_to_dict(user),
        'token': token,
        'token_type': 'Bearer',
        'expires_in': f'{days} days',
    })
    # Deprecated: older clients read the token from this header
    resp.headers['Authorization'] = f'Bearer {token}'
    return resp, status


@bp.route('/register', methods=['POST'])
def register():
    """Create a STUDENT account and sign it in."""
    data = parse_body(RegisterRequest)
    user = auth_service.register(data.email, data.password, data.name)
    return _token_response(user, auth_service.issue_token(user.id), 201)


@bp.route('/login', methods=['POST'])
def login():
    data = parse_body(LoginRequest)
    user, token = auth_service.login(data.email, data.password)
    return _token_response(user, token, 200)


@bp.route('/api/profile', methods=['GET'])
@require_auth
def get_profile():
    return jsonify({'profile': user_to_dict(g.user)})


@bp.route('/api/admin', methods=['GET'])
@require_auth
@require_role('ADMIN')
def admin_area():
    return jsonify({'message': 'Welcome, admin', 'user': user_to_dict(g.user)})
