import uuid
from datetime import datetime, timezone
from app.extensions import db
from app.models.enums import Source, ResourceType, Difficulty


class Resource(db.Model):
    __tablename__ = 'resources'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)
    url = db.Column(db.String(2000), nullable=False)
    source = db.Column(db.Enum(Source, name='source'), nullable=False, default=Source.OTHER)
    type = db.Column(db.Enum(ResourceType, name='resource_type'), nullable=False)
    subject_id = db.Column(db.String(36), db.ForeignKey('subjects.id', ondelete='RESTRICT'), nullable=False)
    difficulty = db.Column(db.Enum(Difficulty, name='difficulty'), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    bookmarks = db.relationship('Bookmark', backref='resource', lazy='dynamic', passive_deletes='all')
    progress_records = db.relationship('Progress', backref='resource', lazy='dynamic', passive_deletes='all')
    reviews = db.relationship('Review', backref='resource', lazy='dynamic', passive_deletes='all')

    __table_args__ = (
        db.Index('ix_resources_subject', 'subject_id'),
        db.Index('ix_resources_url', 'url'),
    )
