"""Validation of caller-supplied constants and schema documents.

The engine does no file or network I/O. Callers hand it already-parsed
documents, either as models or as plain dicts; this module turns dicts into
models and converts validation failures into ``ConfigurationError`` so a
broken document fails loudly at the boundary.
"""

from typing import Any, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models import AssignmentSchema, Constants

logger = structlog.get_logger()


def _first_error_location(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ""
    return ".".join(str(part) for part in errors[0].get("loc", ()))


def load_constants(document: Union[Constants, dict[str, Any]]) -> Constants:
    """Return a validated ``Constants`` value.

    Raises:
        ConfigurationError: If a required section or value is missing or
            malformed.
    """
    if isinstance(document, Constants):
        return document
    try:
        return Constants.model_validate(document)
    except PydanticValidationError as e:
        location = _first_error_location(e)
        logger.error("constants_document_invalid", location=location, errors=e.error_count())
        raise ConfigurationError(
            "Constants document failed validation",
            config_key=location or None,
            expected="Complete constants document",
            details={"errors": e.error_count()},
        ) from e


def load_schema(document: Union[AssignmentSchema, dict[str, Any]]) -> AssignmentSchema:
    """Return a validated ``AssignmentSchema`` value.

    Raises:
        ConfigurationError: If the schema document is malformed.
    """
    if isinstance(document, AssignmentSchema):
        return document
    try:
        return AssignmentSchema.model_validate(document)
    except PydanticValidationError as e:
        location = _first_error_location(e)
        logger.error("schema_document_invalid", location=location, errors=e.error_count())
        raise ConfigurationError(
            "Assignment schema failed validation",
            config_key=location or None,
            expected="Assignment schema with field and evidence definitions",
            details={"errors": e.error_count()},
        ) from e
