"""Validation of raw project attributes and photo attachments"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from streammap.config import settings
from streammap.schemas.attributes import (
    ALLOWED_PHOTO_CONTENT_TYPES,
    PhotoSetAttributes,
    ProjectAttributes,
    field_errors,
)


@dataclass
class ValidationResult:
    """Cleaned attribute values plus every rule violation found"""
    cleaned: Dict[str, Any] = field(default_factory=dict)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.append({"field": field_name, "message": message})


class ProjectValidator:
    """
    Validates raw project attributes before any derivation runs.

    Attributes go through ``ProjectAttributes`` and attachments through
    ``PhotoSetAttributes``; every violation from both is reported, so a
    single failed save reports everything that needs fixing.
    """

    def __init__(
        self,
        max_photo_size_bytes: int = settings.max_photo_size_bytes,
        max_photos: int = settings.max_photos_per_project,
        allowed_content_types: frozenset = ALLOWED_PHOTO_CONTENT_TYPES,
    ):
        self.max_photo_size_bytes = max_photo_size_bytes
        self.max_photos = max_photos
        self.allowed_content_types = allowed_content_types

    def validate(
        self,
        attributes: Dict[str, Any],
        photos: Sequence[Any] = (),
    ) -> ValidationResult:
        """
        Validate project attributes and the full set of photo attachments.

        Args:
            attributes: Raw attribute values keyed by field name
            photos: Every attachment the project will have after saving;
                each exposes content_type and byte_size

        Returns:
            ValidationResult with cleaned values and collected errors
        """
        result = ValidationResult(cleaned=dict(attributes))

        try:
            validated = ProjectAttributes.model_validate(attributes)
            result.cleaned.update(validated.model_dump())
        except ValidationError as e:
            result.errors.extend(field_errors(e))

        try:
            PhotoSetAttributes.validate_photos(photos, context=self._photo_limits())
        except ValidationError as e:
            result.errors.extend(field_errors(e, field_name="photos"))

        return result

    def _photo_limits(self) -> Dict[str, Any]:
        return {
            "max_photos": self.max_photos,
            "max_photo_size_bytes": self.max_photo_size_bytes,
            "allowed_content_types": self.allowed_content_types,
        }
