from flask import Blueprint, jsonify
from app.middleware.auth import require_auth, require_role
from app.schemas import SubjectCreate, parse_body
from app.services import resources as resource_service
from app.services.resources import subject_to_dict

bp = Blueprint('subjects', __name__, url_prefix='/subjects')


@bp.route('', methods=['GET'])
def list_subjects():
    rows = resource_service.list_subjects()
    return jsonify({
        'subjects': [subject_to_dict(s, resource_count=count or 0) for s, count in rows]
    })


@bp.route('', methods=['POST'])
@require_auth
@require_role('TEACHER', 'ADMIN')
def create_subject():
    data = parse_body(SubjectCreate)
    subject = resource_service.create_subject(data.name, data.description)
    return jsonify({'subject': subject_to_dict(subject)}), 201


@bp.route('/<subject_id>', methods=['DELETE'])
@require_auth
@require_role('ADMIN')
def delete_subject(subject_id):
    """Delete a subject; refused while any resource still uses it."""
    resource_service.delete_subject(subject_id)
    return jsonify({'ok': True})
