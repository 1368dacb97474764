"""
Input models for request validation using Pydantic.

One model per entity. Every model rejects unknown fields and is validated in
full on both create and update, since updates replace the whole record.

Coercion is limited to what JSON clients legitimately send: numbers may arrive
as numeric strings and booleans as ``"true"`` / ``"false"``, but a boolean is
never accepted as a number and nothing else is accepted as a boolean.
"""

import re
from typing import Annotated, Any, Callable

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StrictBool
from pydantic_core import PydanticCustomError

HEX_COLOR_PATTERN = re.compile(r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$')
TIME_OF_DAY_PATTERN = re.compile(r'^(0[0-9]|1[0-9]|2[0-3]|[0-9]):[0-5][0-9]$')
UUID_PATTERN = re.compile(r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')


def _matches(pattern: re.Pattern, pattern_name: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not pattern.match(value):
            raise PydanticCustomError(
                'pattern_mismatch',
                'with value "{value}" fails to match the {pattern_name} pattern',
                {'value': value, 'pattern_name': pattern_name},
            )
        return value
    return check


def _is_uuid(value: str) -> str:
    if not UUID_PATTERN.match(value):
        raise PydanticCustomError('uuid_format', 'must be a valid GUID')
    return value


def _not_bool(value: Any) -> Any:
    # bool is an int subclass, so lax int/float fields would take it as 0 or 1
    if isinstance(value, bool):
        raise PydanticCustomError('number_type', 'must be a number')
    return value


def _boolean_string(value: Any) -> Any:
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    return value


def _not_blank(value: str) -> str:
    # A whitespace-only room would collide with the stored form of an empty room
    if value and not value.strip():
        raise PydanticCustomError('string_blank', 'must not be blank')
    return value


NonEmptyStr = Annotated[str, Field(min_length=1)]
HexColor = Annotated[str, AfterValidator(_matches(HEX_COLOR_PATTERN, 'Hex Color Code'))]
TimeOfDay = Annotated[str, AfterValidator(_matches(TIME_OF_DAY_PATTERN, 'HH:mm'))]
UUIDStr = Annotated[str, AfterValidator(_is_uuid)]
Number = Annotated[float, BeforeValidator(_not_bool)]
Integer = Annotated[int, BeforeValidator(_not_bool)]
Boolean = Annotated[StrictBool, BeforeValidator(_boolean_string)]
RoomStr = Annotated[str, AfterValidator(_not_blank)]


class EntityRequest(BaseModel):
    """Base for entity payloads."""

    model_config = ConfigDict(extra='forbid')


class AreaRequest(EntityRequest):
    """Request model for creating or replacing an area."""

    name: Annotated[NonEmptyStr, Field(
        description='Display name of the area',
        examples=['Faculty of Engineering']
    )]

    color: Annotated[HexColor, Field(
        description='Hex colour code used to render the area',
        examples=['#000', '#1e90ff']
    )]


class Position(EntityRequest):
    """Geographic position of a building."""

    lat: Annotated[Number, Field(gt=-90, lt=90, description='Latitude')]
    lng: Annotated[Number, Field(gt=-180, lt=180, description='Longitude')]


class BuildingRequest(EntityRequest):
    """Request model for creating or replacing a building."""

    name: Annotated[NonEmptyStr, Field(
        description='Display name of the building',
        examples=['Engineering Hall']
    )]

    position: Position


class EateryRequest(EntityRequest):
    """Request model for creating or replacing an eatery."""

    name: NonEmptyStr
    openTime: TimeOfDay
    closeTime: TimeOfDay
    building: Annotated[UUIDStr, Field(description='UUID of the building housing the eatery')]


class EventRequest(EntityRequest):
    """Request model for creating or replacing an event."""

    name: NonEmptyStr

    # May be left out, but an explicit null is rejected
    description: Annotated[NonEmptyStr, Field(description='Optional free-text description')] = None

    area: UUIDStr
    building: UUIDStr

    # May be empty; events without a fixed room are common
    room: RoomStr

    openHouse: UUIDStr
    startTime: TimeOfDay
    endTime: TimeOfDay


class OpenHouseRequest(EntityRequest):
    """Request model for creating or replacing an open house."""

    name: NonEmptyStr

    date: Annotated[Integer, Field(
        gt=0,
        description='Date of the open house as an epoch timestamp',
        examples=[1572580800000]
    )]

    info: NonEmptyStr
    visible: Boolean
