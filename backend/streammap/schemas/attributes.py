"""Validation models for raw project attributes and photo attachments"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic_core import PydanticCustomError

from streammap.config import settings
from streammap.services.coordinate_service import is_blank

TEXT_FIELDS = (
    "name",
    "stream_name",
    "primary_contact",
    "narrative",
    "structure_description",
    "watershed",
    "url",
)

REQUIRED_FIELDS = TEXT_FIELDS + ("implementation_date", "latitude", "longitude")

POSITIVE_INTEGER_FIELDS = ("length", "number_of_structures")

ALLOWED_PHOTO_CONTENT_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/bmp",
    "image/avif",
    "image/webp",
})

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

BLANK_MESSAGE = "can't be blank"
NOT_A_NUMBER_MESSAGE = "is not a number"
NOT_AN_INTEGER_MESSAGE = "must be an integer"
NOT_POSITIVE_MESSAGE = "must be greater than 0"
COORDINATE_MESSAGE = "must be in decimal notation"
DATE_FORMAT_MESSAGE = "must be in the following format: yyyy-mm-dd"
TOO_LONG_MESSAGE = "is too long (maximum is {max_length} characters)"
NOT_TEXT_MESSAGE = "must be text"
INVALID_ORGANIZATION_MESSAGE = "contains an invalid organization id"
PHOTO_CONTENT_TYPE_MESSAGE = "has an invalid content type"
PHOTO_COUNT_MESSAGE_TEMPLATE = "must have fewer than {limit} photos"
PHOTO_SIZE_MESSAGE_TEMPLATE = "must be below {limit} MB in size each"

# pydantic error type -> message, for errors not raised by our own validators
TYPE_MESSAGES = {
    "string_too_long": TOO_LONG_MESSAGE,
    "string_type": NOT_TEXT_MESSAGE,
    "uuid_parsing": INVALID_ORGANIZATION_MESSAGE,
    "uuid_type": INVALID_ORGANIZATION_MESSAGE,
}

DecimalAdapter = TypeAdapter(Decimal)
OrganizationIdList = TypeAdapter(List[UUID])


def field_errors(error: ValidationError, field_name: Optional[str] = None) -> List[dict]:
    """
    Flatten a pydantic ValidationError into ``{field, message}`` entries.

    Args:
        error: Error raised by one of the models in this module
        field_name: Report every entry under this field instead of its location

    Returns:
        Entries in the order pydantic reported them, without duplicates
    """
    entries = []
    for detail in error.errors(include_url=False):
        location = detail["loc"]
        name = field_name or (str(location[0]) if location else "base")
        template = TYPE_MESSAGES.get(detail["type"])
        message = template.format(**(detail.get("ctx") or {})) if template else detail["msg"]

        entry = {"field": name, "message": message}
        if entry not in entries:
            entries.append(entry)
    return entries


class ProjectAttributes(BaseModel):
    """
    Raw project attributes as submitted, checked before any derivation runs.

    Every field is validated, including absent ones, so one failed
    validation reports every rule a record breaks.
    """

    model_config = ConfigDict(validate_default=True, extra="ignore")

    name: Optional[str] = Field(None, max_length=255)
    stream_name: Optional[str] = Field(None, max_length=255)
    watershed: Optional[str] = Field(None, max_length=255)
    implementation_date: Optional[date] = None
    primary_contact: Optional[str] = Field(None, max_length=255)
    narrative: Optional[str] = None
    structure_description: Optional[str] = None
    url: Optional[str] = Field(None, max_length=500)
    length: Optional[int] = Field(None, gt=0)
    number_of_structures: Optional[int] = Field(None, gt=0)
    latitude: Optional[Decimal] = Field(None, gt=-90, lt=90)
    longitude: Optional[Decimal] = Field(None, gt=-180, lt=180)
    affiliation_legacy: Optional[str] = Field(None, max_length=255)

    @field_validator(*TEXT_FIELDS)
    @classmethod
    def check_present(cls, value: Optional[str]) -> str:
        if is_blank(value):
            raise PydanticCustomError("blank", BLANK_MESSAGE)
        return value

    @field_validator("implementation_date", mode="wrap")
    @classmethod
    def check_implementation_date(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> date:
        """Accept dates, or strings in exactly yyyy-mm-dd form naming a real day"""
        if is_blank(value):
            raise PydanticCustomError("blank", BLANK_MESSAGE)
        if isinstance(value, datetime):
            value = value.date()
        elif isinstance(value, str):
            value = value.strip()
            if not DATE_PATTERN.fullmatch(value):
                raise PydanticCustomError("date_format", DATE_FORMAT_MESSAGE)
        elif not isinstance(value, date):
            raise PydanticCustomError("date_format", DATE_FORMAT_MESSAGE)

        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError("date_format", DATE_FORMAT_MESSAGE)

    @field_validator(*POSITIVE_INTEGER_FIELDS, mode="wrap")
    @classmethod
    def check_positive_integer(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> int:
        if is_blank(value) or isinstance(value, bool):
            raise PydanticCustomError("not_a_number", NOT_A_NUMBER_MESSAGE)
        if isinstance(value, str):
            value = value.strip()

        try:
            return handler(value)
        except ValidationError as e:
            if e.errors()[0]["type"] == "greater_than":
                raise PydanticCustomError("greater_than", NOT_POSITIVE_MESSAGE)

        try:
            DecimalAdapter.validate_python(value)
        except ValidationError:
            raise PydanticCustomError("not_a_number", NOT_A_NUMBER_MESSAGE)
        raise PydanticCustomError("not_an_integer", NOT_AN_INTEGER_MESSAGE)

    @field_validator("latitude", "longitude", mode="wrap")
    @classmethod
    def check_coordinate(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Decimal:
        """Coordinates are finite decimals strictly inside their range"""
        if is_blank(value):
            raise PydanticCustomError("blank", BLANK_MESSAGE)
        if isinstance(value, bool):
            raise PydanticCustomError("coordinate", COORDINATE_MESSAGE)
        if isinstance(value, str):
            value = value.strip()
        elif isinstance(value, float):
            # shortest repr, not the binary expansion
            value = repr(value)

        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError("coordinate", COORDINATE_MESSAGE)


class PhotoSetAttributes(BaseModel):
    """
    The full set of attachments a project will carry after a save.

    Limits are read from the validation context (``max_photos``,
    ``max_photo_size_bytes``, ``allowed_content_types``) and fall back to
    the configured settings.
    """

    count: int = 0
    content_types: List[str] = Field(default_factory=list)
    byte_sizes: List[int] = Field(default_factory=list)

    @classmethod
    def validate_photos(cls, photos: Sequence[Any], context: Optional[dict] = None) -> "PhotoSetAttributes":
        """Validate attachments exposing ``content_type`` and ``byte_size``"""
        return cls.model_validate(
            {
                "count": len(photos),
                "content_types": [photo.content_type for photo in photos],
                "byte_sizes": [photo.byte_size for photo in photos],
            },
            context=context,
        )

    @field_validator("count")
    @classmethod
    def check_count(cls, value: int, info: ValidationInfo) -> int:
        limit = (info.context or {}).get("max_photos", settings.max_photos_per_project)
        if value > limit:
            raise PydanticCustomError("photo_count", PHOTO_COUNT_MESSAGE_TEMPLATE, {"limit": limit})
        return value

    @field_validator("content_types")
    @classmethod
    def check_content_types(cls, value: List[str], info: ValidationInfo) -> List[str]:
        allowed = (info.context or {}).get("allowed_content_types", ALLOWED_PHOTO_CONTENT_TYPES)
        if any(content_type not in allowed for content_type in value):
            raise PydanticCustomError("photo_content_type", PHOTO_CONTENT_TYPE_MESSAGE)
        return value

    @field_validator("byte_sizes")
    @classmethod
    def check_byte_sizes(cls, value: List[int], info: ValidationInfo) -> List[int]:
        limit = (info.context or {}).get("max_photo_size_bytes", settings.max_photo_size_bytes)
        if any(byte_size >= limit for byte_size in value):
            raise PydanticCustomError(
                "photo_size",
                PHOTO_SIZE_MESSAGE_TEMPLATE,
                {"limit": limit // (1024 * 1024)},
            )
        return value
