"""Request schemas, validated before any handler touches the database."""

from typing import Optional

import pydantic
from flask import request
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.errors import ValidationError, from_pydantic
from app.models.enums import Source, ResourceType, Difficulty

MAX_CATALOG_PAGE = 10_000
MAX_CATALOG_LIMIT = 100


class _Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

# No whitespace stripping here: passwords are used as given
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class Pagination(_Schema):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)


class DiscoveryQuery(Pagination):
    """GET /resources query string."""
    keyword: Optional[str] = None
    subject: Optional[str] = None
    type: Optional[str] = None
    difficulty: Optional[str] = None

    @field_validator('keyword', 'subject', 'type', 'difficulty', mode='before')
    @classmethod
    def _blank(cls, v):
        return _blank_to_none(v)


class RawSearchQuery(Pagination):
    """GET /resources/search query string."""
    query: Optional[str] = None


class FilterSearchBody(Pagination):
    """POST /resources/search body. Null or blank fields are left out of the query."""
    subject: Optional[str] = None
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    type: Optional[str] = None

    @field_validator('subject', 'topic', 'difficulty', 'type', mode='before')
    @classmethod
    def _blank(cls, v):
        return _blank_to_none(v)


class CatalogQuery(Pagination):
    """GET /resources/catalog query string."""
    # Keeps OFFSET inside the database's integer range
    page: int = Field(1, ge=1, le=MAX_CATALOG_PAGE)
    limit: int = Field(10, ge=1, le=MAX_CATALOG_LIMIT)
    keyword: Optional[str] = None
    subject: Optional[str] = None
    type: Optional[ResourceType] = None
    difficulty: Optional[Difficulty] = None

    @field_validator('keyword', 'subject', mode='before')
    @classmethod
    def _blank(cls, v):
        return _blank_to_none(v)

    @field_validator('type', mode='before')
    @classmethod
    def _parse_type(cls, v):
        v = _blank_to_none(v)
        return None if v is None else ResourceType.parse(v)

    @field_validator('difficulty', mode='before')
    @classmethod
    def _parse_difficulty(cls, v):
        v = _blank_to_none(v)
        return None if v is None else Difficulty.parse(v)


# ---------------------------------------------------------------------------
# Resources and subjects
# ---------------------------------------------------------------------------

class ResourceCreate(_Schema):
    title: str = Field(min_length=1, max_length=500)
    url: str = Field(min_length=1, max_length=2000)
    type: ResourceType
    difficulty: Difficulty
    description: Optional[str] = None
    subject: Optional[str] = Field(None, max_length=100)
    source: Optional[Source] = None

    @field_validator('type', mode='before')
    @classmethod
    def _parse_type(cls, v):
        return ResourceType.parse(v)

    @field_validator('difficulty', mode='before')
    @classmethod
    def _parse_difficulty(cls, v):
        return Difficulty.parse(v)

    @field_validator('source', mode='before')
    @classmethod
    def _parse_source(cls, v):
        v = _blank_to_none(v)
        return None if v is None else Source.parse(v)


class ResourceUpdate(_Schema):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    url: Optional[str] = Field(None, min_length=1, max_length=2000)
    type: Optional[ResourceType] = None
    difficulty: Optional[Difficulty] = None
    description: Optional[str] = None
    subject: Optional[str] = Field(None, min_length=1, max_length=100)
    source: Optional[Source] = None

    @field_validator('type', mode='before')
    @classmethod
    def _parse_type(cls, v):
        return None if v is None else ResourceType.parse(v)

    @field_validator('difficulty', mode='before')
    @classmethod
    def _parse_difficulty(cls, v):
        return None if v is None else Difficulty.parse(v)

    @field_validator('source', mode='before')
    @classmethod
    def _parse_source(cls, v):
        return None if v is None else Source.parse(v)


class SubjectCreate(_Schema):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Interactions
# ---------------------------------------------------------------------------

class ProgressUpdate(_Schema):
    # Older clients send {"progress": n}
    percentage: int = Field(ge=0, le=100, strict=True, validation_alias=pydantic.AliasChoices('percentage', 'progress'))


class BookmarkCreate(_Schema):
    resource_id: Optional[str] = None
    resource: Optional[ResourceCreate] = None

    @pydantic.model_validator(mode='after')
    def _needs_target(self):
        if not self.resource_id and self.resource is None:
            raise ValueError('resource_id or resource is required')
        return self


class ReviewCreate(_Schema):
    rating: int = Field(ge=1, le=5, strict=True)
    comment: Optional[str] = Field(None, validation_alias=pydantic.AliasChoices('comment', 'review'))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def parse_body(schema):
    """Validate the JSON request body against ``schema``."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body is required')
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        raise from_pydantic(e) from e


def parse_args(schema):
    """Validate the query string against ``schema``."""
    try:
        return schema.model_validate(request.args.to_dict())
    except pydantic.ValidationError as e:
        raise from_pydantic(e) from e
