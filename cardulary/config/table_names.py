from enum import Enum


class TableNames(str, Enum):
    ORGANIZERS = "organizers"
    EVENTS = "events"
    GUESTS = "guests"
    ADDRESS_SUBMISSIONS = "address_submissions"
    DELIVERY_EVENTS = "delivery_events"
    EXPORTS = "exports"
    RATE_LIMIT_COUNTERS = "rate_limit_counters"
