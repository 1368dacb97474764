"""
Entity services for areas, buildings, eateries, events and open houses.
"""

from typing import List

from openhouse.dal import CounterStore, TableStore
from openhouse.logic.cascade import cascade_delete
from openhouse.logic.entity_service import EntityService, Record
from openhouse.logic.references import Reference
from openhouse.models.input import (
    AreaRequest,
    BuildingRequest,
    EateryRequest,
    EventRequest,
    OpenHouseRequest,
)

# DynamoDB refuses empty strings in some attribute positions, so an empty room
# is stored as this placeholder and restored on read
EMPTY_ROOM_PLACEHOLDER = ' '


class AreaService(EntityService):
    model = AreaRequest
    label = 'area'
    resource_type = 'Area'

    def __init__(self, store: TableStore, events: TableStore, event_attendees: CounterStore):
        super().__init__(store)
        self.events = events
        self.event_attendees = event_attendees

    def cascade(self, uuid: str) -> None:
        cascade_delete(self.events, 'area', uuid, counters=self.event_attendees)


class BuildingService(EntityService):
    model = BuildingRequest
    label = 'building'
    resource_type = 'Building'

    def __init__(
        self,
        store: TableStore,
        events: TableStore,
        event_attendees: CounterStore,
        eateries: TableStore,
    ):
        super().__init__(store)
        self.events = events
        self.event_attendees = event_attendees
        self.eateries = eateries

    def cascade(self, uuid: str) -> None:
        cascade_delete(self.events, 'building', uuid, counters=self.event_attendees)
        cascade_delete(self.eateries, 'building', uuid)


class EateryService(EntityService):
    model = EateryRequest
    label = 'eatery'
    resource_type = 'Eatery'

    def __init__(self, store: TableStore, buildings: TableStore):
        super().__init__(store)
        self.buildings = buildings

    def references(self, record: Record) -> List[Reference]:
        return [('building', self.buildings, record['building'])]


class EventService(EntityService):
    model = EventRequest
    label = 'event'
    resource_type = 'Event'

    def __init__(
        self,
        store: TableStore,
        counters: CounterStore,
        open_houses: TableStore,
        areas: TableStore,
        buildings: TableStore,
    ):
        super().__init__(store, counters)
        self.open_houses = open_houses
        self.areas = areas
        self.buildings = buildings

    def references(self, record: Record) -> List[Reference]:
        return [
            ('open house', self.open_houses, record['openHouse']),
            ('area', self.areas, record['area']),
            ('building', self.buildings, record['building']),
        ]

    def to_item(self, record: Record) -> Record:
        if record.get('room') == '':
            return {**record, 'room': EMPTY_ROOM_PLACEHOLDER}
        return record

    def from_item(self, item: Record) -> Record:
        if item.get('room') == EMPTY_ROOM_PLACEHOLDER:
            return {**item, 'room': ''}
        return item


class OpenHouseService(EntityService):
    model = OpenHouseRequest
    label = 'open house'
    resource_type = 'Open House'

    def __init__(
        self,
        store: TableStore,
        counters: CounterStore,
        events: TableStore,
        event_attendees: CounterStore,
    ):
        super().__init__(store, counters)
        self.events = events
        self.event_attendees = event_attendees

    def cascade(self, uuid: str) -> None:
        cascade_delete(self.events, 'openHouse', uuid, counters=self.event_attendees)
