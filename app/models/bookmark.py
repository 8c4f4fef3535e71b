import uuid
from datetime import datetime, timezone
from app.extensions import db


class Bookmark(db.Model):
    __tablename__ = 'bookmarks'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    resource_id = db.Column(db.String(36), db.ForeignKey('resources.id', ondelete='RESTRICT'), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('user_id', 'resource_id', name='uq_bookmark_user_resource'),
        db.Index('ix_bookmarks_user', 'user_id'),
    )
