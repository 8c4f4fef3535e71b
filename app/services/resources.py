"""Catalogued resources and the subjects they belong to."""

import logging

from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError

from app.errors import ConflictError, NotFoundError
from app.extensions import db
from app.models import Bookmark, Progress, Resource, Review, Source, Subject
from app.services.search import extract_domain

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = 'General'

_SOURCE_DOMAINS = (
    ('coursera.org', Source.COURSERA),
    ('edx.org', Source.EDX),
    ('khanacademy.org', Source.KHAN_ACADEMY),
    ('youtube.com', Source.YOUTUBE),
    ('youtu.be', Source.YOUTUBE),
)


def infer_source(url) -> Source:
    host = extract_domain(url).lower()
    for domain, source in _SOURCE_DOMAINS:
        if host == domain or host.endswith('.' + domain):
            return source
    return Source.OTHER


# ---------------------------------------------------------------------------
# Subjects
# ---------------------------------------------------------------------------

def get_or_create_subject(name: str) -> Subject:
    """Return the subject called ``name``, creating it if needed.

    Runs in a savepoint so a concurrent creator tripping the unique index
    just means we read their row instead.
    """
    name = (name or '').strip() or DEFAULT_SUBJECT
    subject = Subject.query.filter_by(name=name).first()
    if subject:
        return subject

    try:
        with db.session.begin_nested():
            subject = Subject(name=name)
            db.session.add(subject)
    except IntegrityError:
        subject = Subject.query.filter_by(name=name).one()
    return subject


def create_subject(name, description=None) -> Subject:
    if Subject.query.filter_by(name=name).first():
        raise ConflictError('A subject with this name already exists')
    subject = Subject(name=name, description=description)
    db.session.add(subject)
    db.session.commit()
    return subject


def list_subjects():
    """All subjects with their resource counts, alphabetically."""
    count_subq = (
        db.session.query(
            Resource.subject_id,
            func.count(Resource.id).label('resource_count'),
        )
        .group_by(Resource.subject_id)
        .subquery()
    )
    return (
        db.session.query(Subject, count_subq.c.resource_count)
        .outerjoin(count_subq, Subject.id == count_subq.c.subject_id)
        .order_by(Subject.name.asc())
        .all()
    )


def delete_subject(subject_id):
    subject = db.session.get(Subject, subject_id)
    if subject is None:
        raise NotFoundError('Subject not found')
    if Resource.query.filter_by(subject_id=subject_id).first():
        raise ConflictError('Subject is still referenced by resources')
    db.session.delete(subject)
    db.session.commit()
    logger.info('Deleted subject %s', subject_id)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

def _escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def list_catalog(keyword=None, subject=None, type=None, difficulty=None,
                 page=1, page_size=10):
    """Filter the local catalogue; returns ``(resources, total)``."""
    query = Resource.query
    if subject:
        query = query.join(Subject).filter(func.lower(Subject.name) == subject.lower())
    if type:
        query = query.filter(Resource.type == type)
    if difficulty:
        query = query.filter(Resource.difficulty == difficulty)
    if keyword:
        pattern = f'%{_escape_like(keyword)}%'
        query = query.filter(or_(
            Resource.title.ilike(pattern, escape='\\'),
            Resource.description.ilike(pattern, escape='\\'),
        ))

    total = query.count()
    resources = (
        query.order_by(Resource.created_at.desc(), Resource.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return resources, total


def get_resource(resource_id) -> Resource:
    resource = db.session.get(Resource, resource_id)
    if resource is None:
        raise NotFoundError('Resource not found')
    return resource


def build_resource(data) -> Resource:
    """Stage a new Resource from a validated ``ResourceCreate`` without committing."""
    resource = Resource(
        title=data.title,
        description=data.description,
        url=data.url,
        source=data.source or infer_source(data.url),
        type=data.type,
        difficulty=data.difficulty,
        subject=get_or_create_subject(data.subject),
    )
    db.session.add(resource)
    return resource


def create_resource(data) -> Resource:
    resource = build_resource(data)
    db.session.commit()
    logger.info('Created resource %s', resource.id)
    return resource


def update_resource(resource_id, data) -> Resource:
    resource = get_resource(resource_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ('title', 'description', 'url', 'type', 'difficulty', 'source'):
        if field in changes and changes[field] is not None:
            setattr(resource, field, changes[field])
    if changes.get('subject'):
        resource.subject = get_or_create_subject(changes['subject'])

    db.session.commit()
    return resource


def delete_resource(resource_id) -> None:
    resource = get_resource(resource_id)
    for model in (Progress, Bookmark, Review):
        if model.query.filter_by(resource_id=resource_id).first():
            raise ConflictError(
                'Resource has progress, bookmarks or reviews and cannot be deleted'
            )
    db.session.delete(resource)
    db.session.commit()
    logger.info('Deleted resource %s', resource_id)


def resource_to_dict(resource):
    """Serialize a Resource to a dict."""
    return {
        'id': resource.id,
        'title': resource.title,
        'description': resource.description,
        'url': resource.url,
        'source': resource.source.value,
        'type': resource.type.value,
        'difficulty': resource.difficulty.value,
        'subject': resource.subject.name if resource.subject else None,
        'subject_id': resource.subject_id,
        'created_at': resource.created_at.isoformat() if resource.created_at else None,
        'updated_at': resource.updated_at.isoformat() if resource.updated_at else None,
    }


def subject_to_dict(subject, resource_count=None):
    data = {
        'id': subject.id,
        'name': subject.name,
        'description': subject.description,
    }
    if resource_count is not None:
        data['resource_count'] = resource_count
    return data
