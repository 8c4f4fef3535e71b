from flask import Blueprint, jsonify
from app.middleware.auth import require_auth, require_role
from app.schemas import CatalogQuery, ResourceCreate, ResourceUpdate, parse_args, parse_body
from app.services import resources as resource_service
from app.services.resources import resource_to_dict

bp = Blueprint('resources', __name__, url_prefix='/resources')

EDITOR_ROLES = ('TEACHER', 'ADMIN')


@bp.route('/catalog', methods=['GET'])
def list_catalog():
    """Catalogued resources from the local store.

    Query params: keyword, subject, type, difficulty, page, limit
    """
    args = parse_args(CatalogQuery)
    resources, total = resource_service.list_catalog(
        keyword=args.keyword,
        subject=args.subject,
        type=args.type,
        difficulty=args.difficulty,
        page=args.page,
        page_size=args.limit,
    )
    return jsonify({
        'resources': [resource_to_dict(r) for r in resources],
        'pagination': {'page': args.page, 'limit': args.limit, 'total_results': total},
    })


@bp.route('/<resource_id>', methods=['GET'])
def get_resource(resource_id):
    resource = resource_service.get_resource(resource_id)
    return jsonify({'resource': resource_to_dict(resource)})


@bp.route('', methods=['POST'])
@require_auth
@require_role(*EDITOR_ROLES)
def create_resource():
    data = parse_body(ResourceCreate)
    resource = resource_service.create_resource(data)
    return jsonify({'resource': resource_to_dict(resource)}), 201


@bp.route('/<resource_id>', methods=['PUT'])
@require_auth
@require_role(*EDITOR_ROLES)
def update_resource(resource_id):
    data = parse_body(ResourceUpdate)
    resource = resource_service.update_resource(resource_id, data)
    return jsonify({'resource': resource_to_dict(resource)})


@bp.route('/<resource_id>', methods=['DELETE'])
@require_auth
@require_role(*EDITOR_ROLES)
def delete_resource(resource_id):
    """Delete a resource nobody has interacted with yet."""
    resource_service.delete_resource(resource_id)
    return jsonify({'ok': True})
