from app.models.enums import Role, Source, ResourceType, Difficulty, ProgressStatus
from app.models.user import User
from app.models.subject import Subject
from app.models.resource import Resource
from app.models.progress import Progress
from app.models.bookmark import Bookmark
from app.models.review import Review

__all__ = [
    'Role', 'Source', 'ResourceType', 'Difficulty', 'ProgressStatus',
    'User', 'Subject', 'Resource', 'Progress', 'Bookmark', 'Review',
]
