import uuid
from datetime import datetime, timezone
from app.extensions import db
from app.models.enums import ProgressStatus


class Progress(db.Model):
    __tablename__ = 'progress'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    resource_id = db.Column(db.String(36), db.ForeignKey('resources.id', ondelete='RESTRICT'), nullable=False)
    status = db.Column(db.Enum(ProgressStatus, name='progress_status'), nullable=False, default=ProgressStatus.NOT_STARTED)
    percentage = db.Column(db.Integer, nullable=False, default=0)
    last_accessed = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('user_id', 'resource_id', name='uq_progress_user_resource'),
        db.CheckConstraint('percentage >= 0 AND percentage <= 100', name='ck_progress_percentage'),
    )
