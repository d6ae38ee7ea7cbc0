"""
Validators and input sanitisation for domain operations.

Provides:
- Data sanitisation for free-text and tag fields
- Business rule validators raising the domain ``ValidationError``
- Progress-specific validators
"""

import re
from typing import Any

from .exceptions import ValidationError

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x84\x86-\x9f]")


class DataSanitizer:
    """Utilities for cleaning and sanitizing input data."""

    @staticmethod
    def sanitize_string(
        value: str,
        max_length: int | None = None,
        strip: bool = True,
        allow_empty: bool = True,
        field_name: str = "input",
    ) -> str:
        """
        Sanitize string input.

        Args:
            value: Input string
            max_length: Maximum allowed length
            strip: Whether to strip whitespace
            allow_empty: Whether to allow empty strings
            field_name: Field reported in validation errors

        Returns:
            Sanitized string

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, str):
            raise ValidationError(
                field_name, value, "Input must be a string", "INVALID_TYPE"
            )

        if strip:
            value = value.strip()

        if not allow_empty and not value:
            raise ValidationError(
                field_name, value, "Value cannot be empty", "EMPTY_VALUE"
            )

        if max_length and len(value) > max_length:
            raise ValidationError(
                field_name,
                value,
                f"Value exceeds maximum length of {max_length}",
                "TOO_LONG",
            )

        # Remove null bytes and control characters
        return _CONTROL_CHARS.sub("", value)

    @staticmethod
    def sanitize_tag(value: str) -> str:
        """
        Normalise an equipment tag (upper case, no surrounding whitespace).

        Raises:
            ValidationError: If the tag is empty or has invalid characters
        """
        value = DataSanitizer.sanitize_string(
            value, max_length=50, allow_empty=False, field_name="tag"
        ).upper()

        if not re.match(r"^[A-Z0-9][A-Z0-9._/-]*$", value):
            raise ValidationError(
                "tag",
                value,
                "Tag may only contain letters, digits, '.', '_', '/' and '-'",
                "INVALID_FORMAT",
            )
        return value


class BusinessRuleValidators:
    """Collection of business rule validation functions."""

    @staticmethod
    def validate_range(
        field_name: str,
        value: int | float,
        min_val: int | float | None = None,
        max_val: int | float | None = None,
    ) -> None:
        """Validate that value is within specified range."""
        if min_val is not None and value < min_val:
            raise ValidationError(
                field_name, value, f"Value must be at least {min_val}", "BELOW_MINIMUM"
            )

        if max_val is not None and value > max_val:
            raise ValidationError(
                field_name, value, f"Value must be at most {max_val}", "ABOVE_MAXIMUM"
            )


class ProgressValidators:
    """Validators specific to progress tracking."""

    @staticmethod
    def validate_progress(value: Any, field_name: str = "progress") -> int:
        """
        Validate a progress percentage.

        Progress must be an integer in [0, 100]. Booleans are rejected;
        integral floats such as ``50.0`` are accepted as ints.
        """
        if isinstance(value, bool) or value is None:
            raise ValidationError(
                field_name, value, "Progress must be an integer", "INVALID_TYPE"
            )
        if isinstance(value, float):
            if not value.is_integer():
                raise ValidationError(
                    field_name, value, "Progress must be an integer", "INVALID_TYPE"
                )
            value = int(value)
        if not isinstance(value, int):
            raise ValidationError(
                field_name, value, "Progress must be an integer", "INVALID_TYPE"
            )

        BusinessRuleValidators.validate_range(field_name, value, 0, 100)
        return value

    @staticmethod
    def validate_photos(photos: Any, max_count: int) -> tuple[Any, ...]:
        """Validate photo attachments; contents are opaque and never inspected."""
        if photos is None:
            return ()
        if isinstance(photos, (str, bytes)):
            photos = (photos,)
        photos = tuple(photos)
        if len(photos) > max_count:
            raise ValidationError(
                "photos",
                len(photos),
                f"At most {max_count} photos may be attached",
                "TOO_MANY_PHOTOS",
            )
        for photo in photos:
            if photo is None or (isinstance(photo, (str, bytes)) and not photo):
                raise ValidationError(
                    "photos", photo, "Empty photo attachment", "EMPTY_PHOTO"
                )
        return photos
