"""
Business Logic Layer Module.

Validation, reference checks, cascades and the per-entity CRUD flows. Services
receive their table stores through the constructor and never build boto3
resources themselves.
"""

from openhouse.logic.attendees import AttendeeService
from openhouse.logic.entities import (
    AreaService,
    BuildingService,
    EateryService,
    EventService,
    OpenHouseService,
)
from openhouse.logic.entity_service import EntityService

__all__ = [
    "AreaService",
    "AttendeeService",
    "BuildingService",
    "EateryService",
    "EntityService",
    "EventService",
    "OpenHouseService",
]
