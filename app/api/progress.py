from flask import Blueprint, jsonify, g
from app.middleware.auth import require_auth
from app.schemas import ProgressUpdate, parse_body
from app.services import interactions
from app.services.interactions import progress_to_dict, bookmark_to_dict, review_to_dict
from app.services.resources import resource_to_dict

bp = Blueprint('progress', __name__)


@bp.route('/progress/<resource_id>', methods=['POST'])
@require_auth
def set_progress(resource_id):
    """Record how far the caller is through a resource.

    Accepts: { percentage } (or legacy { progress }), an integer 0-100.
    Status is derived: 0 NOT_STARTED, 1-99 IN_PROGRESS, 100 COMPLETED.
    """
    data = parse_body(ProgressUpdate)
    progress = interactions.set_progress(g.user_id, resource_id, data.percentage)
    return jsonify({'progress': progress_to_dict(progress)})


@bp.route('/api/progress', methods=['GET'])
@require_auth
def list_progress():
    records = interactions.list_progress(g.user_id)
    return jsonify({'progress': [progress_to_dict(p) for p in records]})


@bp.route('/api/dashboard', methods=['GET'])
@require_auth
def get_dashboard():
    """Bookmarks, in-progress and completed resources, and recent activity."""
    data = interactions.dashboard(g.user_id)

    def _with_resource(progress):
        item = progress_to_dict(progress)
        item['resource'] = resource_to_dict(progress.resource)
        return item

    serializers = {
        'progress': progress_to_dict,
        'bookmark': bookmark_to_dict,
        'review': review_to_dict,
    }
    recent = [
        {
            'kind': kind,
            'at': at.isoformat() if at else None,
            'resource': resource_to_dict(resource),
            'detail': serializers[kind](record),
        }
        for kind, at, resource, record in data['recent_activity']
    ]

    return jsonify({
        'dashboard': {
            'bookmarked_resources': [resource_to_dict(r) for r in data['bookmarked']],
            'in_progress_resources': [_with_resource(p) for p in data['in_progress']],
            'completed_resources': [_with_resource(p) for p in data['completed']],
            'recent_activity': recent,
        }
    })
