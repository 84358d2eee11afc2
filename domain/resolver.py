"""Booking conflict and pricing rules.

Pure checks shared by booking creation and booking updates. Nothing here
mutates a listing or a booking; callers run every check before writing.
"""
from typing import Iterable, Optional
from uuid import UUID

from domain.entities import Booking, Listing
from domain.errors import CapacityExceededError, ConflictError, DateRangeUnavailableError
from domain.value_objects import DateRange, Money


class BookingResolver:
    """Validates a requested stay against a listing and prices it"""

    @staticmethod
    def check_capacity(listing: Listing, number_of_guests: int) -> None:
        if number_of_guests < 1 or number_of_guests > listing.capacity:
            raise CapacityExceededError(number_of_guests, listing.capacity)

    @staticmethod
    def check_availability(listing: Listing, booking_dates: DateRange) -> None:
        if not listing.availability.covers(booking_dates):
            raise DateRangeUnavailableError()

    @staticmethod
    def check_collisions(
        booking_dates: DateRange,
        sibling_bookings: Iterable[Booking],
        exclude_booking_id: Optional[UUID] = None
    ) -> None:
        """Reject dates overlapping another PENDING or ACCEPTED booking"""
        for sibling in sibling_bookings:
            if sibling.booking_id == exclude_booking_id or not sibling.is_active():
                continue
            if sibling.booking_dates.overlaps(booking_dates):
                raise ConflictError(
                    f"Requested dates collide with booking {sibling.booking_id} "
                    f"({sibling.booking_dates})"
                )

    @staticmethod
    def calculate_total_price(listing: Listing, booking_dates: DateRange) -> Money:
        return listing.price_per_night.times(booking_dates.nights())

    @classmethod
    def resolve(
        cls,
        listing: Listing,
        booking_dates: DateRange,
        number_of_guests: int,
        sibling_bookings: Iterable[Booking],
        exclude_booking_id: Optional[UUID] = None
    ) -> Money:
        """Run every check and return the total price for the stay"""
        cls.check_capacity(listing, number_of_guests)
        cls.check_availability(listing, booking_dates)
        cls.check_collisions(booking_dates, sibling_bookings, exclude_booking_id)
        return cls.calculate_total_price(listing, booking_dates)
