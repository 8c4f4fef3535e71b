import enum


class _NamedEnum(str, enum.Enum):
    """Enum whose value equals its name, parsed leniently from user input."""

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace(' ', '_').replace('-', '_')
        try:
            return cls[key]
        except KeyError:
            allowed = ', '.join(m.name for m in cls)
            raise ValueError(f'must be one of {allowed}') from None


class Role(_NamedEnum):
    STUDENT = 'STUDENT'
    TEACHER = 'TEACHER'
    ADMIN = 'ADMIN'


class Source(_NamedEnum):
    COURSERA = 'COURSERA'
    EDX = 'EDX'
    KHAN_ACADEMY = 'KHAN_ACADEMY'
    YOUTUBE = 'YOUTUBE'
    OTHER = 'OTHER'


class ResourceType(_NamedEnum):
    VIDEO = 'VIDEO'
    ARTICLE = 'ARTICLE'
    COURSE = 'COURSE'
    DOCUMENT = 'DOCUMENT'


class Difficulty(_NamedEnum):
    BEGINNER = 'BEGINNER'
    INTERMEDIATE = 'INTERMEDIATE'
    ADVANCED = 'ADVANCED'


class ProgressStatus(_NamedEnum):
    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
