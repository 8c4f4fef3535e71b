import uuid
from datetime import datetime, timezone
from app.extensions import db


class Review(db.Model):
    __tablename__ = 'reviews'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    resource_id = db.Column(db.String(36), db.ForeignKey('resources.id', ondelete='RESTRICT'), nullable=False)
    rating = db.Column(db.SmallInteger, nullable=False)  # 1-5, checked in the service layer
    comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('user_id', 'resource_id', name='uq_review_user_resource'),
        db.Index('ix_reviews_resource', 'resource_id'),
    )
