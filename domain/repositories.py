"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List
from uuid import UUID
from decimal import Decimal

from domain.entities import Listing, Booking, Review
from domain.enums import ListingUtility


class ListingRepository(ABC):
    """Repository interface for Listing Aggregate"""

    @abstractmethod
    async def save(self, listing: Listing) -> Listing:
        """Save listing"""
        pass

    @abstractmethod
    async def find_by_id(self, listing_id: UUID) -> Optional[Listing]:
        """Find listing by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Listing]:
        pass

    @abstractmethod
    async def find_by_host(self, host_id: UUID) -> List[Listing]:
        """Find listings owned by a host"""
        pass

    @abstractmethod
    async def find_by_location(self, location: str) -> List[Listing]:
        """Find listings by location, ignoring case"""
        pass

    @abstractmethod
    async def find_by_price_per_night_between(self, min_price: Decimal, max_price: Decimal) -> List[Listing]:
        """Find listings whose nightly price lies in [min_price, max_price]"""
        pass

    @abstractmethod
    async def find_by_capacity_between(self, min_capacity: int, max_capacity: int) -> List[Listing]:
        """Find listings whose capacity lies in [min_capacity, max_capacity]"""
        pass

    @abstractmethod
    async def find_by_utility(self, utility: ListingUtility) -> List[Listing]:
        pass

    @abstractmethod
    async def update(self, listing: Listing) -> Listing:
        """Update listing"""
        pass

    @abstractmethod
    async def delete(self, listing_id: UUID) -> bool:
        """Delete listing"""
        pass


class BookingRepository(ABC):
    """Repository interface for Booking Aggregate"""

    @abstractmethod
    async def save(self, booking: Booking) -> Booking:
        """Save booking"""
        pass

    @abstractmethod
    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """Find booking by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Booking]:
        pass

    @abstractmethod
    async def find_by_listing_id(self, listing_id: UUID) -> List[Booking]:
        """Find bookings for a listing"""
        pass

    @abstractmethod
    async def find_by_user_id(self, user_id: UUID) -> List[Booking]:
        """Find bookings made by a guest"""
        pass

    @abstractmethod
    async def update(self, booking: Booking) -> Booking:
        """Update booking"""
        pass

    @abstractmethod
    async def delete(self, booking_id: UUID) -> bool:
        pass

    @abstractmethod
    async def delete_by_listing(self, listing_id: UUID) -> List[Booking]:
        """Delete every booking for a listing, returning what was removed"""
        pass


class ReviewRepository(ABC):
    """Repository interface for Reviews"""

    @abstractmethod
    async def save(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def find_by_listing_id(self, listing_id: UUID) -> List[Review]:
        pass

    @abstractmethod
    async def delete_by_listing(self, listing_id: UUID) -> List[Review]:
        """Delete every review for a listing, returning what was removed"""
        pass
