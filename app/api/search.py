from flask import Blueprint, jsonify
from app.schemas import DiscoveryQuery, FilterSearchBody, RawSearchQuery, parse_args, parse_body
from app.services import search as search_service
from app.services.search import build_query

bp = Blueprint('search', __name__, url_prefix='/resources')


def _pagination(page, limit, total):
    return {'page': page, 'limit': limit, 'total_results': total}


@bp.route('', methods=['GET'])
def discover_resources():
    """Live discovery through the search provider.

    Query params: keyword, subject, type, difficulty, page, limit
    """
    args = parse_args(DiscoveryQuery)
    query = build_query(
        args.keyword,
        args.subject,
        args.type,
        f'{args.difficulty} level' if args.difficulty else None,
    )
    filters = {
        'keyword': args.keyword,
        'subject': args.subject,
        'type': args.type,
        'difficulty': args.difficulty,
    }
    items, total = search_service.search(
        query, args.page, args.limit,
        subject=args.subject, type=args.type, difficulty=args.difficulty,
    )
    return jsonify({
        'resources': items,
        'query': query,
        'filters': filters,
        'pagination': _pagination(args.page, args.limit, total),
    })


@bp.route('/search', methods=['GET'])
def search_by_query():
    args = parse_args(RawSearchQuery)
    query = build_query(args.query)
    items, total = search_service.search(query, args.page, args.limit)
    return jsonify({
        'resources': items,
        'query': query,
        'pagination': _pagination(args.page, args.limit, total),
    })


@bp.route('/search', methods=['POST'])
def search_by_filters():
    """Live discovery from a JSON body of subject, topic, difficulty, type."""
    body = parse_body(FilterSearchBody)
    query = build_query(body.subject, body.topic, body.difficulty, body.type)
    search_params = {
        'subject': body.subject,
        'topic': body.topic,
        'difficulty': body.difficulty,
        'type': body.type,
    }
    items, total = search_service.search(
        query, body.page, body.limit, search_params=search_params,
    )
    return jsonify({
        'resources': items,
        'query': query,
        'pagination': _pagination(body.page, body.limit, total),
    })
