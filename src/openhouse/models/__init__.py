"""
Open House Models Package

Pydantic input models for the entities served by the open house API.
"""

from .input import (
    AreaRequest,
    BuildingRequest,
    EateryRequest,
    EntityRequest,
    EventRequest,
    OpenHouseRequest,
    Position,
)

__all__ = [
    "AreaRequest",
    "BuildingRequest",
    "EateryRequest",
    "EntityRequest",
    "EventRequest",
    "OpenHouseRequest",
    "Position",
]
