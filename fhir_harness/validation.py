"""
Input validation for the harness.

Provides validation for resource types and the cloud identifiers the harness
generates for datasets and FHIR stores.
"""

import re

# Validation patterns
RESOURCE_TYPE_PATTERN = re.compile(r"^[A-Z][A-Za-z]+$")
CLOUD_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-\.]{1,256}$")


class ValidationError(ValueError):
    """Validation error with details."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


def validate_resource_type(resource_type: str) -> str:
    """
    Validate FHIR resource type format.

    Args:
        resource_type: Resource type string to validate

    Returns:
        The validated resource type

    Raises:
        ValidationError: If format is invalid
    """
    if not resource_type:
        raise ValidationError("Resource type is required", field="resource_type")

    if not RESOURCE_TYPE_PATTERN.match(resource_type):
        raise ValidationError(
            f"Invalid resource type '{resource_type}'. "
            f"Must start with uppercase letter followed by letters only.",
            field="resource_type",
        )

    return resource_type


def validate_cloud_id(value: str, field: str = "id") -> str:
    """
    Validate a dataset or FHIR store identifier.

    The service accepts letters, numbers, underscores, hyphens and periods,
    up to 256 characters.

    Raises:
        ValidationError: If format is invalid
    """
    if not value:
        raise ValidationError(f"{field} is required", field=field)

    if not CLOUD_ID_PATTERN.match(value):
        raise ValidationError(f"Invalid {field} '{value}'", field=field)

    return value
