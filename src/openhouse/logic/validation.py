"""
Payload validation against the entity input models.

Pydantic errors are flattened into a single human-readable message, one clause
per failing field, so API clients get the same style of message whatever the
entity.
"""

from typing import Any, Dict, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from openhouse.handlers.utils.errors import ValidationError
from openhouse.models.input import EntityRequest

_MESSAGES = {
    'missing': 'is required',
    'extra_forbidden': 'is not allowed',
    'string_too_short': 'is not allowed to be empty',
    'string_type': 'must be a string',
    'bool_type': 'must be a boolean',
    'bool_parsing': 'must be a boolean',
    'int_type': 'must be an integer',
    'int_parsing': 'must be an integer',
    'int_from_float': 'must be an integer',
    'float_type': 'must be a number',
    'float_parsing': 'must be a number',
    'greater_than': 'must be greater than {gt}',
    'less_than': 'must be less than {lt}',
    'model_type': 'must be of type object',
    'model_attributes_type': 'must be of type object',
}


def _format_bound(value: Any) -> Any:
    # Bounds on float fields come back as floats; 90.0 is reported as 90
    if isinstance(value, float):
        return format(value, 'g')
    return value


def _reason(error: Dict[str, Any]) -> str:
    ctx = {key: _format_bound(value) for key, value in error.get('ctx', {}).items()}
    if error['type'] == 'greater_than' and ctx.get('gt') in (0, '0'):
        return 'must be a positive number'

    template = _MESSAGES.get(error['type'])
    return template.format(**ctx) if template else error['msg']


def _describe(error: Dict[str, Any]) -> str:
    field = '.'.join(str(part) for part in error['loc'])
    reason = _reason(error)
    return f'"{field}" {reason}' if field else reason


def format_validation_errors(exc: PydanticValidationError) -> str:
    """Join every field error of a pydantic ValidationError into one message."""
    return '; '.join(_describe(error) for error in exc.errors())


def batch_suffix(label: str, index: Optional[int]) -> str:
    """Positional context added to messages about one element of a batch."""
    return '' if index is None else f' for {label} with index {index}'


def validate_entity(
    model: Type[EntityRequest],
    payload: Any,
    label: str,
    index: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Validate a candidate payload and return the normalized record.

    Args:
        model: Input model for the entity
        payload: Decoded JSON value from the request body
        label: Lower-case entity name used in messages, e.g. ``open house``
        index: Position of the payload when validating one element of a batch

    Raises:
        ValidationError: If any field fails; the message names every failing field
    """
    if not isinstance(payload, dict):
        raise ValidationError(f'"value" must be of type object{batch_suffix(label, index)}')

    try:
        validated = model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc) + batch_suffix(label, index)) from exc

    return validated.model_dump(exclude_none=True)
