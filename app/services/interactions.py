"""Per-user interactions with resources: progress, bookmarks and reviews."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from app.errors import ConflictError, NotFoundError, ValidationError
from app.extensions import db
from app.models import Bookmark, Progress, ProgressStatus, Resource, Review
from app.services.resources import build_resource, get_resource

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
RECENT_ACTIVITY_LIMIT = 10

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

def status_for(percentage: int) -> ProgressStatus:
    """0 is not started, 100 is completed, anything between is in progress."""
    if percentage <= 0:
        return ProgressStatus.NOT_STARTED
    if percentage >= 100:
        return ProgressStatus.COMPLETED
    return ProgressStatus.IN_PROGRESS


def set_progress(user_id, resource_id, percentage) -> Progress:
    """Insert or update the (user, resource) progress row in one statement."""
    if isinstance(percentage, bool) or not isinstance(percentage, int):
        raise ValidationError('percentage must be an integer')
    if not 0 <= percentage <= 100:
        raise ValidationError('percentage must be between 0 and 100')
    get_resource(resource_id)

    dialect = db.session.get_bind().dialect.name
    try:
        insert = _UPSERT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f'Progress upsert is not supported on {dialect}') from None

    now = datetime.now(timezone.utc)
    status = status_for(percentage)
    stmt = insert(Progress).values(
        user_id=user_id,
        resource_id=resource_id,
        percentage=percentage,
        status=status,
        last_accessed=now,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=['user_id', 'resource_id'],
        set_={
            'percentage': stmt.excluded.percentage,
            'status': stmt.excluded.status,
            'last_accessed': stmt.excluded.last_accessed,
            'updated_at': stmt.excluded.updated_at,
        },
    )
    db.session.execute(stmt)
    db.session.commit()

    return db.session.execute(
        select(Progress).filter_by(user_id=user_id, resource_id=resource_id)
        .execution_options(populate_existing=True)
    ).scalar_one()


def list_progress(user_id):
    return (
        Progress.query.filter_by(user_id=user_id)
        .order_by(Progress.last_accessed.desc())
        .all()
    )


# ---------------------------------------------------------------------------
# Bookmarks
# ---------------------------------------------------------------------------

def add_bookmark(user_id, resource_id=None, resource_data=None):
    """Bookmark a resource for ``user_id``.

    Returns ``(bookmark, resource_created)``. When ``resource_id`` is absent
    and ``resource_data`` is given, a catalogued resource with the same url
    is reused; otherwise a new Resource row is created in the same
    transaction as the bookmark.
    """
    created = False
    if resource_id:
        resource = get_resource(resource_id)
    elif resource_data is not None:
        resource = Resource.query.filter_by(url=resource_data.url).first()
        if resource is None:
            resource = build_resource(resource_data)
            db.session.flush()
            created = True
    else:
        raise ValidationError('resource_id or resource is required')

    bookmark = Bookmark(user_id=user_id, resource_id=resource.id)
    db.session.add(bookmark)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Resource already bookmarked')

    if created:
        logger.info('Created resource %s while bookmarking', resource.id)
    return bookmark, created


def remove_bookmark(user_id, resource_id) -> None:
    bookmark = Bookmark.query.filter_by(user_id=user_id, resource_id=resource_id).first()
    if bookmark is None:
        raise NotFoundError('Bookmark not found')
    db.session.delete(bookmark)
    db.session.commit()


def list_bookmarks(user_id):
    return (
        Bookmark.query.filter_by(user_id=user_id)
        .order_by(Bookmark.created_at.desc())
        .all()
    )


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

def add_review(user_id, resource_id, rating, comment=None) -> Review:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError('rating must be an integer')
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f'rating must be between {MIN_RATING} and {MAX_RATING}')
    get_resource(resource_id)

    review = Review(user_id=user_id, resource_id=resource_id, rating=rating, comment=comment)
    db.session.add(review)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('You have already reviewed this resource')
    return review


def list_reviews(resource_id):
    """Return ``(reviews, average_rating, count)`` for a resource."""
    get_resource(resource_id)
    reviews = (
        Review.query.filter_by(resource_id=resource_id)
        .order_by(Review.created_at.desc())
        .all()
    )
    average, count = db.session.query(
        func.avg(Review.rating), func.count(Review.id)
    ).filter(Review.resource_id == resource_id).one()
    return reviews, (round(float(average), 2) if average is not None else None), count


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def dashboard(user_id) -> dict:
    progress = list_progress(user_id)
    bookmarks = list_bookmarks(user_id)
    reviews = Review.query.filter_by(user_id=user_id).all()

    activity = (
        [('progress', p.last_accessed, p.resource, p) for p in progress]
        + [('bookmark', b.created_at, b.resource, b) for b in bookmarks]
        + [('review', r.created_at, r.resource, r) for r in reviews]
    )
    activity.sort(key=lambda a: a[1], reverse=True)

    return {
        'bookmarked': [b.resource for b in bookmarks],
        'in_progress': [p for p in progress if p.status == ProgressStatus.IN_PROGRESS],
        'completed': [p for p in progress if p.status == ProgressStatus.COMPLETED],
        'recent_activity': activity[:RECENT_ACTIVITY_LIMIT],
    }


def progress_to_dict(progress):
    return {
        'id': progress.id,
        'resource_id': progress.resource_id,
        'status': progress.status.value,
        'percentage': progress.percentage,
        'last_accessed': progress.last_accessed.isoformat() if progress.last_accessed else None,
        'created_at': progress.created_at.isoformat() if progress.created_at else None,
        'updated_at': progress.updated_at.isoformat() if progress.updated_at else None,
    }


def bookmark_to_dict(bookmark, resource=None):
    data = {
        'id': bookmark.id,
        'resource_id': bookmark.resource_id,
        'created_at': bookmark.created_at.isoformat() if bookmark.created_at else None,
    }
    if resource is not None:
        data['resource'] = resource
    return data


def review_to_dict(review):
    return {
        'id': review.id,
        'user_id': review.user_id,
        'user_name': review.user.name if review.user else None,
        'resource_id': review.resource_id,
        'rating': review.rating,
        'comment': review.comment,
        'created_at': review.created_at.isoformat() if review.created_at else None,
    }
