"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional, List, Set, Iterable

from domain.enums import BookingStatus, ListingUtility, ACTIVE_BOOKING_STATUSES
from domain.errors import DuplicateRangeError, OverlappingRangeError, InvalidStateError, InvalidListingError
from domain.value_objects import DateRange, Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.ACCEPTED, BookingStatus.REJECTED, BookingStatus.CANCELLED},
    BookingStatus.ACCEPTED: {BookingStatus.CANCELLED},
    BookingStatus.REJECTED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}


def _check_listing_terms(title: str, capacity: int, location: str) -> None:
    if not title or not title.strip():
        raise InvalidListingError("Title cannot be empty")
    if not location or not location.strip():
        raise InvalidListingError("Location cannot be empty")
    if capacity < 1:
        raise InvalidListingError("Capacity must be at least 1")


class AvailabilitySet(BaseModel):
    """Normalized collection of open date ranges owned by a Listing.

    Ranges are pairwise non-overlapping and never touching (touching
    ranges are merged), kept ascending by start date.
    """

    ranges: List[DateRange] = []

    # ==================== FACTORY METHOD ====================
    @classmethod
    def from_ranges(cls, ranges: Iterable[DateRange]) -> "AvailabilitySet":
        """Build a normalized set by inserting each range in turn"""
        availability = cls()
        for date_range in ranges:
            availability.insert(date_range)
        return availability

    # ==================== MODIFICATION METHODS ====================
    def insert(self, new_range: DateRange) -> None:
        """Open new dates, merging with touching neighbours.

        Raises DuplicateRangeError or OverlappingRangeError before any
        change is made.
        """
        left_neighbor: Optional[DateRange] = None
        right_neighbor: Optional[DateRange] = None

        for existing in self.ranges:
            if new_range.is_identical_to(existing):
                raise DuplicateRangeError()
            if new_range.overlaps(existing):
                raise OverlappingRangeError()
            if existing.is_immediately_before(new_range):
                left_neighbor = existing
            elif new_range.is_immediately_before(existing):
                right_neighbor = existing

        # At most one neighbour on each side since the set is normalized;
        # both present means the new range bridges them into one span.
        start_date = left_neighbor.start_date if left_neighbor else new_range.start_date
        end_date = right_neighbor.end_date if right_neighbor else new_range.end_date

        remaining = [
            r for r in self.ranges
            if r is not left_neighbor and r is not right_neighbor
        ]
        remaining.append(DateRange(start_date=start_date, end_date=end_date))
        self.ranges = sorted(remaining, key=lambda r: r.start_date)

    def remove(self, closed_range: DateRange) -> None:
        """Close dates, splitting any open range they fall inside"""
        remaining: List[DateRange] = []
        for existing in self.ranges:
            if not existing.overlaps(closed_range):
                remaining.append(existing)
                continue
            if existing.start_date < closed_range.start_date:
                remaining.append(DateRange(start_date=existing.start_date, end_date=closed_range.start_date))
            if closed_range.end_date < existing.end_date:
                remaining.append(DateRange(start_date=closed_range.end_date, end_date=existing.end_date))
        self.ranges = remaining

    def restore(self, freed_range: DateRange) -> None:
        """Reopen freed dates, absorbing any open range they overlap or touch"""
        start_date, end_date = freed_range.start_date, freed_range.end_date
        remaining: List[DateRange] = []
        for existing in self.ranges:
            if (
                existing.overlaps(freed_range)
                or existing.is_immediately_before(freed_range)
                or freed_range.is_immediately_before(existing)
            ):
                start_date = min(start_date, existing.start_date)
                end_date = max(end_date, existing.end_date)
            else:
                remaining.append(existing)
        remaining.append(DateRange(start_date=start_date, end_date=end_date))
        self.ranges = sorted(remaining, key=lambda r: r.start_date)

    # ==================== QUERY METHODS ====================
    def covers(self, requested: DateRange) -> bool:
        """Check if every night of the requested range is open"""
        return any(existing.contains(requested) for existing in self.ranges)

    def as_list(self) -> List[DateRange]:
        return list(self.ranges)


class Listing(BaseModel):
    """Listing Aggregate Root Entity"""

    # Identity
    listing_id: UUID = Field(default_factory=uuid4)

    # Details
    title: str = Field(min_length=1)
    description: str = ""
    price_per_night: Money
    capacity: int = Field(gt=0)
    utilities: Set[ListingUtility] = set()
    location: str = Field(min_length=1)
    image_urls: List[str] = []
    average_rating: float = 0.0

    # References to other contexts
    host_id: UUID
    host_name: str

    # Owned collection
    availability: AvailabilitySet = Field(default_factory=AvailabilitySet)

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        host_id: UUID,
        host_name: str,
        title: str,
        price_per_night: Money,
        capacity: int,
        location: str,
        description: str = "",
        utilities: Optional[Iterable[ListingUtility]] = None,
        image_urls: Optional[List[str]] = None,
        available_dates: Optional[List[DateRange]] = None
    ) -> "Listing":
        """Create new listing with its availability normalized"""
        _check_listing_terms(title, capacity, location)
        return Listing(
            host_id=host_id,
            host_name=host_name,
            title=title,
            description=description,
            price_per_night=price_per_night,
            capacity=capacity,
            location=location,
            utilities=set(utilities or ()),
            image_urls=list(image_urls or []),
            availability=AvailabilitySet.from_ranges(available_dates or []),
        )

    # ==================== MODIFICATION METHODS ====================
    def update_details(
        self,
        title: str,
        description: str,
        price_per_night: Money,
        capacity: int,
        location: str,
        utilities: Iterable[ListingUtility],
        image_urls: List[str],
        available_dates: Optional[List[DateRange]] = None
    ) -> None:
        """Replace listing details; availability is rebuilt only when given"""
        _check_listing_terms(title, capacity, location)
        # Build first so a bad range leaves the listing untouched
        new_availability = None
        if available_dates is not None:
            new_availability = AvailabilitySet.from_ranges(available_dates)

        self.title = title
        self.description = description
        self.price_per_night = price_per_night
        self.capacity = capacity
        self.location = location
        self.utilities = set(utilities)
        self.image_urls = list(image_urls)
        if new_availability is not None:
            self.availability = new_availability
        self._touch()

    def add_available_dates(self, date_range: DateRange) -> None:
        self.availability.insert(date_range)
        self._touch()

    def close_dates(self, date_range: DateRange) -> None:
        """Remove booked nights from availability"""
        self.availability.remove(date_range)
        self._touch()

    def reopen_dates(self, date_range: DateRange) -> None:
        """Give freed nights back to availability"""
        self.availability.restore(date_range)
        self._touch()

    # ==================== QUERY METHODS ====================
    def is_hosted_by(self, user_id: UUID) -> bool:
        return self.host_id == user_id

    @property
    def available_dates(self) -> List[DateRange]:
        return self.availability.as_list()

    def _touch(self) -> None:
        self.updated_at = _utcnow()
        self.version += 1


class Booking(BaseModel):
    """Booking Aggregate Root Entity"""

    # Identity
    booking_id: UUID = Field(default_factory=uuid4)

    # References to other contexts
    listing_id: UUID
    listing_title: str
    guest_id: UUID

    # Value Objects
    booking_dates: DateRange
    number_of_guests: int = Field(gt=0)
    total_price: Money

    # Status
    status: BookingStatus = BookingStatus.PENDING

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        listing: Listing,
        guest_id: UUID,
        booking_dates: DateRange,
        number_of_guests: int,
        total_price: Money
    ) -> "Booking":
        """Create new booking in PENDING status"""
        return Booking(
            listing_id=listing.listing_id,
            listing_title=listing.title,
            guest_id=guest_id,
            booking_dates=booking_dates,
            number_of_guests=number_of_guests,
            total_price=total_price,
            status=BookingStatus.PENDING
        )

    # ==================== STATE TRANSITION METHODS ====================
    def accept(self) -> None:
        """Host accepts a pending booking"""
        self._transition_to(BookingStatus.ACCEPTED)

    def reject(self) -> None:
        """Host rejects a pending booking"""
        self._transition_to(BookingStatus.REJECTED)

    def cancel(self) -> None:
        self._transition_to(BookingStatus.CANCELLED)

    # ==================== MODIFICATION METHODS ====================
    def reschedule(
        self,
        booking_dates: DateRange,
        number_of_guests: int,
        total_price: Money
    ) -> None:
        """Replace dates and guests of a pending booking"""
        if self.status != BookingStatus.PENDING:
            raise InvalidStateError(
                f"Cannot update booking with status {self.status.value}"
            )

        self.booking_dates = booking_dates
        self.number_of_guests = number_of_guests
        self.total_price = total_price
        self._touch()

    # ==================== QUERY METHODS ====================
    def is_active(self) -> bool:
        """Check if booking still holds its nights"""
        return self.status in ACTIVE_BOOKING_STATUSES

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.guest_id == user_id

    def nights(self) -> int:
        return self.booking_dates.nights()

    def _transition_to(self, target: BookingStatus) -> None:
        allowed = BOOKING_TRANSITIONS[self.status]
        if target not in allowed:
            raise InvalidStateError(
                f"Cannot change booking from {self.status.value} to {target.value}"
            )
        self.status = target
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _utcnow()
        self.version += 1


class Review(BaseModel):
    """Review Entity, kept only so listing deletion can cascade to it"""
    review_id: UUID = Field(default_factory=uuid4)
    listing_id: UUID
    author_id: UUID
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    created_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True


class ListingSummary(BaseModel):
    listing_id: UUID
    title: str


class HostProfile(BaseModel):
    """Read model of a host with a summary of each hosted listing"""
    host_id: UUID
    username: str
    full_name: Optional[str] = None
    listings: List[ListingSummary] = []
