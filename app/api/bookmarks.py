from flask import Blueprint, jsonify, g
from app.middleware.auth import require_auth
from app.schemas import BookmarkCreate, parse_body
from app.services import interactions
from app.services.interactions import bookmark_to_dict
from app.services.resources import resource_to_dict

bp = Blueprint('bookmarks', __name__, url_prefix='/api/bookmarks')


@bp.route('', methods=['GET'])
@require_auth
def list_bookmarks():
    """List the caller's bookmarks, newest first."""
    bookmarks = interactions.list_bookmarks(g.user_id)
    return jsonify({
        'bookmarks': [bookmark_to_dict(b, resource_to_dict(b.resource)) for b in bookmarks]
    })


@bp.route('', methods=['POST'])
@require_auth
def create_bookmark():
    """Bookmark a resource.

    Accepts either { resource_id } for a catalogued resource, or
    { resource: {title, url, type, difficulty, ...} } for a discovery result.
    Side effect: the inline form creates the Resource row when no catalogued
    resource has that url; ``resource_created`` in the response says so.
    """
    data = parse_body(BookmarkCreate)
    bookmark, created = interactions.add_bookmark(
        g.user_id, resource_id=data.resource_id, resource_data=data.resource,
    )
    return jsonify({
        'bookmark': bookmark_to_dict(bookmark, resource_to_dict(bookmark.resource)),
        'resource_created': created,
    }), 201


@bp.route('/<resource_id>', methods=['DELETE'])
@require_auth
def delete_bookmark(resource_id):
    """Remove a bookmark."""
    interactions.remove_bookmark(g.user_id, resource_id)
    return jsonify({'ok': True})
