import uuid
from datetime import datetime, timezone
from app.extensions import db
from app.models.enums import Role


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), nullable=False, unique=True)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash, never serialized
    name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.Enum(Role, name='role'), nullable=False, default=Role.STUDENT)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    bookmarks = db.relationship('Bookmark', backref='user', lazy='dynamic', passive_deletes='all')
    progress_records = db.relationship('Progress', backref='user', lazy='dynamic', passive_deletes='all')
    reviews = db.relationship('Review', backref='user', lazy='dynamic', passive_deletes='all')
