"""Domain Enums"""
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class Role(str, Enum):
    GUEST = "GUEST"
    HOST = "HOST"
    ADMIN = "ADMIN"


class ListingUtility(str, Enum):
    WIFI = "WIFI"
    KITCHEN = "KITCHEN"
    PARKING = "PARKING"
    WASHER = "WASHER"
    DRYER = "DRYER"
    AIR_CONDITIONING = "AIR_CONDITIONING"
    HEATING = "HEATING"
    TV = "TV"
    POOL = "POOL"
    SAUNA = "SAUNA"
    PET_FRIENDLY = "PET_FRIENDLY"
    WHEELCHAIR_ACCESSIBLE = "WHEELCHAIR_ACCESSIBLE"


# Bookings in these states hold their nights against competing requests
ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED})
