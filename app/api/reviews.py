from flask import Blueprint, jsonify, g
from app.middleware.auth import require_auth
from app.schemas import ReviewCreate, parse_body
from app.services import interactions
from app.services.interactions import review_to_dict

bp = Blueprint('reviews', __name__)


@bp.route('/reviews/<resource_id>', methods=['POST'])
@require_auth
def create_review(resource_id):
    """One review per user per resource; rating is 1-5."""
    data = parse_body(ReviewCreate)
    review = interactions.add_review(g.user_id, resource_id, data.rating, data.comment)
    return jsonify({'review': review_to_dict(review)}), 201


@bp.route('/resources/<resource_id>/reviews', methods=['GET'])
def list_reviews(resource_id):
    reviews, average, count = interactions.list_reviews(resource_id)
    return jsonify({
        'reviews': [review_to_dict(r) for r in reviews],
        'average_rating': average,
        'count': count,
    })
