"""In-Memory Repository Implementations"""
from typing import Optional, List, Dict
from uuid import UUID
from decimal import Decimal

from domain.repositories import ListingRepository, BookingRepository, ReviewRepository
from domain.entities import Listing, Booking, Review
from domain.enums import ListingUtility


class InMemoryListingRepository(ListingRepository):
    """In-memory implementation of ListingRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Listing] = {}

    async def save(self, listing: Listing) -> Listing:
        """Save listing to memory"""
        self._storage[listing.listing_id] = listing
        return listing

    async def find_by_id(self, listing_id: UUID) -> Optional[Listing]:
        """Find listing by ID"""
        return self._storage.get(listing_id)

    async def find_all(self) -> List[Listing]:
        return list(self._storage.values())

    async def find_by_host(self, host_id: UUID) -> List[Listing]:
        return [l for l in self._storage.values() if l.host_id == host_id]

    async def find_by_location(self, location: str) -> List[Listing]:
        wanted = location.strip().casefold()
        return [l for l in self._storage.values() if l.location.casefold() == wanted]

    async def find_by_price_per_night_between(self, min_price: Decimal, max_price: Decimal) -> List[Listing]:
        return [
            l for l in self._storage.values()
            if min_price <= l.price_per_night.amount <= max_price
        ]

    async def find_by_capacity_between(self, min_capacity: int, max_capacity: int) -> List[Listing]:
        return [
            l for l in self._storage.values()
            if min_capacity <= l.capacity <= max_capacity
        ]

    async def find_by_utility(self, utility: ListingUtility) -> List[Listing]:
        return [l for l in self._storage.values() if utility in l.utilities]

    async def update(self, listing: Listing) -> Listing:
        """Update listing"""
        if listing.listing_id in self._storage:
            self._storage[listing.listing_id] = listing
            return listing
        raise KeyError(f"Listing {listing.listing_id} not stored")

    async def delete(self, listing_id: UUID) -> bool:
        """Delete listing"""
        if listing_id in self._storage:
            del self._storage[listing_id]
            return True
        return False


class InMemoryBookingRepository(BookingRepository):
    """In-memory implementation of BookingRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Booking] = {}

    async def save(self, booking: Booking) -> Booking:
        """Save booking to memory"""
        self._storage[booking.booking_id] = booking
        return booking

    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """Find booking by ID"""
        return self._storage.get(booking_id)

    async def find_all(self) -> List[Booking]:
        return list(self._storage.values())

    async def find_by_listing_id(self, listing_id: UUID) -> List[Booking]:
        return [b for b in self._storage.values() if b.listing_id == listing_id]

    async def find_by_user_id(self, user_id: UUID) -> List[Booking]:
        return [b for b in self._storage.values() if b.guest_id == user_id]

    async def update(self, booking: Booking) -> Booking:
        """Update booking"""
        if booking.booking_id in self._storage:
            self._storage[booking.booking_id] = booking
            return booking
        raise KeyError(f"Booking {booking.booking_id} not stored")

    async def delete(self, booking_id: UUID) -> bool:
        if booking_id in self._storage:
            del self._storage[booking_id]
            return True
        return False

    async def delete_by_listing(self, listing_id: UUID) -> List[Booking]:
        removed = [b for b in self._storage.values() if b.listing_id == listing_id]
        for booking in removed:
            del self._storage[booking.booking_id]
        return removed


class InMemoryReviewRepository(ReviewRepository):
    """In-memory implementation of ReviewRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Review] = {}

    async def save(self, review: Review) -> Review:
        self._storage[review.review_id] = review
        return review

    async def find_by_listing_id(self, listing_id: UUID) -> List[Review]:
        return [r for r in self._storage.values() if r.listing_id == listing_id]

    async def delete_by_listing(self, listing_id: UUID) -> List[Review]:
        removed = [r for r in self._storage.values() if r.listing_id == listing_id]
        for review in removed:
            del self._storage[review.review_id]
        return removed
