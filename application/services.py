"""Application Services - Business use cases"""
import logging
from uuid import UUID
from decimal import Decimal
from typing import Iterable, List, Optional

from domain.auth import User
from domain.authorization import (
    require_authenticated, require_host_or_admin, require_admin,
    ensure_can_manage_listing, ensure_can_decide_booking,
    ensure_can_modify_booking, ensure_can_delete_booking,
)
from domain.entities import Listing, Booking, HostProfile, ListingSummary
from domain.enums import BookingStatus, ListingUtility
from domain.errors import NotFoundError, InvalidQueryError, InvalidStateError, InvalidListingError
from domain.repositories import ListingRepository, BookingRepository, ReviewRepository
from domain.resolver import BookingResolver
from domain.value_objects import DateRange, Money, CENT, MAX_PRICE_PER_NIGHT
from infrastructure.locks import ListingLocks

logger = logging.getLogger(__name__)


def _nightly_rate(amount: Decimal) -> Money:
    if not amount.is_finite() or amount < CENT or amount > MAX_PRICE_PER_NIGHT:
        raise InvalidListingError(
            f"Price per night must be between {CENT} and {MAX_PRICE_PER_NIGHT}"
        )
    return Money(amount=amount)


class ListingService:
    """Service for Listing and availability use cases"""

    def __init__(self,
                 repository: ListingRepository,
                 booking_repo: BookingRepository,
                 review_repo: ReviewRepository,
                 locks: ListingLocks):
        self.repository = repository
        self.booking_repo = booking_repo
        self.review_repo = review_repo
        self.locks = locks

    async def _load(self, listing_id: UUID) -> Listing:
        listing = await self.repository.find_by_id(listing_id)
        if not listing:
            raise NotFoundError("listing", listing_id)
        return listing

    # ==================== QUERIES ====================
    async def get_all_listings(self) -> List[Listing]:
        return await self.repository.find_all()

    async def get_listing(self, listing_id: UUID) -> Listing:
        """Get listing by ID; raises NotFoundError"""
        return await self._load(listing_id)

    async def get_listings_by_host(self, host_id: UUID) -> List[Listing]:
        return await self.repository.find_by_host(host_id)

    async def get_host_profile(self, host: User) -> HostProfile:
        """Public profile of a host with the id and title of each listing"""
        listings = await self.repository.find_by_host(host.user_id)
        return HostProfile(
            host_id=host.user_id,
            username=host.username,
            full_name=host.full_name,
            listings=[ListingSummary(listing_id=l.listing_id, title=l.title) for l in listings]
        )

    async def get_listings_for_user(self, current_user: User) -> List[Listing]:
        """Listings hosted by the current user (HOST or ADMIN only)"""
        user = require_host_or_admin(current_user)
        return await self.repository.find_by_host(user.user_id)

    async def get_listings_by_price(self, min_price: Decimal, max_price: Decimal) -> List[Listing]:
        if min_price < 0 or max_price <= 0:
            raise InvalidQueryError("Price cannot be negative")
        if min_price > max_price:
            raise InvalidQueryError("min_price cannot be greater than max_price")
        return await self.repository.find_by_price_per_night_between(min_price, max_price)

    async def get_listings_by_location(self, location: str) -> List[Listing]:
        if not location or not location.strip():
            raise InvalidQueryError("Location cannot be empty")
        return await self.repository.find_by_location(location)

    async def get_listings_by_capacity(self, min_capacity: int, max_capacity: int) -> List[Listing]:
        if min_capacity < 0 or max_capacity <= 0:
            raise InvalidQueryError("Capacity cannot be negative")
        if min_capacity > max_capacity:
            raise InvalidQueryError("min_capacity cannot be greater than max_capacity")
        return await self.repository.find_by_capacity_between(min_capacity, max_capacity)

    async def get_listings_by_utility(self, utility: ListingUtility) -> List[Listing]:
        return await self.repository.find_by_utility(utility)

    # ==================== COMMANDS ====================
    async def create_listing(
        self,
        current_user: User,
        title: str,
        price_per_night: Decimal,
        capacity: int,
        location: str,
        description: str = "",
        utilities: Optional[Iterable[ListingUtility]] = None,
        image_urls: Optional[List[str]] = None,
        available_dates: Optional[List[DateRange]] = None
    ) -> Listing:
        """Create a listing hosted by the current user"""
        host = require_host_or_admin(current_user)

        listing = Listing.create(
            host_id=host.user_id,
            host_name=host.username,
            title=title,
            description=description,
            price_per_night=_nightly_rate(price_per_night),
            capacity=capacity,
            location=location,
            utilities=utilities,
            image_urls=image_urls,
            available_dates=available_dates
        )
        await self.repository.save(listing)
        logger.info("Listing %s created by host %s", listing.listing_id, host.user_id)
        return listing

    async def update_listing(
        self,
        listing_id: UUID,
        current_user: User,
        title: str,
        price_per_night: Decimal,
        capacity: int,
        location: str,
        description: str = "",
        utilities: Optional[Iterable[ListingUtility]] = None,
        image_urls: Optional[List[str]] = None,
        available_dates: Optional[List[DateRange]] = None
    ) -> Listing:
        """Replace listing details; only the host or an admin may do so"""
        async with self.locks.hold(listing_id):
            listing = await self._load(listing_id)
            ensure_can_manage_listing(current_user, listing)

            listing.update_details(
                title=title,
                description=description,
                price_per_night=_nightly_rate(price_per_night),
                capacity=capacity,
                location=location,
                utilities=utilities or (),
                image_urls=image_urls or [],
                available_dates=available_dates
            )
            await self.repository.update(listing)

        logger.info("Listing %s updated (version %s)", listing_id, listing.version)
        return listing

    async def add_availability(
        self,
        listing_id: UUID,
        current_user: User,
        date_range: DateRange
    ) -> Listing:
        """Open new dates for booking, merging with touching ranges"""
        async with self.locks.hold(listing_id):
            listing = await self._load(listing_id)
            ensure_can_manage_listing(current_user, listing)

            listing.add_available_dates(date_range)
            await self.repository.update(listing)

        logger.info("Listing %s opened %s", listing_id, date_range)
        return listing

    async def delete_listing(self, listing_id: UUID, current_user: User) -> None:
        """Delete a listing together with its bookings and reviews.

        Bookings, then reviews, then the listing are removed while the
        listing's lock is held. If a step fails, whatever was already
        removed is put back before the error propagates.
        """
        async with self.locks.hold(listing_id):
            listing = await self._load(listing_id)
            ensure_can_manage_listing(current_user, listing)

            removed_bookings: List[Booking] = []
            removed_reviews = []
            try:
                removed_bookings = await self.booking_repo.delete_by_listing(listing_id)
                removed_reviews = await self.review_repo.delete_by_listing(listing_id)
                await self.repository.delete(listing_id)
            except Exception:
                logger.exception("Deleting listing %s failed, restoring its bookings and reviews", listing_id)
                for booking in removed_bookings:
                    await self.booking_repo.save(booking)
                for review in removed_reviews:
                    await self.review_repo.save(review)
                raise

        logger.info(
            "Listing %s deleted with %d bookings and %d reviews",
            listing_id, len(removed_bookings), len(removed_reviews)
        )


class BookingService:
    """Service for Booking lifecycle use cases"""

    def __init__(self,
                 repository: BookingRepository,
                 listing_repo: ListingRepository,
                 locks: ListingLocks):
        self.repository = repository
        self.listing_repo = listing_repo
        self.locks = locks

    async def _load(self, booking_id: UUID) -> Booking:
        booking = await self.repository.find_by_id(booking_id)
        if not booking:
            raise NotFoundError("booking", booking_id)
        return booking

    async def _load_listing(self, listing_id: UUID) -> Listing:
        listing = await self.listing_repo.find_by_id(listing_id)
        if not listing:
            raise NotFoundError("listing", listing_id)
        return listing

    # ==================== QUERIES ====================
    async def get_booking(self, booking_id: UUID) -> Booking:
        return await self._load(booking_id)

    async def get_bookings_by_listing(self, listing_id: UUID) -> List[Booking]:
        await self._load_listing(listing_id)
        return await self.repository.find_by_listing_id(listing_id)

    async def get_bookings_for_user(self, current_user: User) -> List[Booking]:
        user = require_authenticated(current_user)
        return await self.repository.find_by_user_id(user.user_id)

    async def get_bookings_by_user_id(self, current_user: User, user_id: UUID) -> List[Booking]:
        require_admin(current_user)
        return await self.repository.find_by_user_id(user_id)

    async def get_all_bookings(self, current_user: User) -> List[Booking]:
        require_admin(current_user)
        return await self.repository.find_all()

    # ==================== COMMANDS ====================
    async def create_booking(
        self,
        current_user: User,
        listing_id: UUID,
        booking_dates: DateRange,
        number_of_guests: int
    ) -> Booking:
        """Request a stay; the booking starts PENDING.

        Raises:
            NotFoundError: listing does not exist.
            CapacityExceededError: too many (or zero) guests.
            DateRangeUnavailableError: dates are not open on the listing.
            ConflictError: dates collide with another active booking.
        """
        guest = require_authenticated(current_user)

        async with self.locks.hold(listing_id):
            listing = await self._load_listing(listing_id)
            siblings = await self.repository.find_by_listing_id(listing_id)
            total_price = BookingResolver.resolve(listing, booking_dates, number_of_guests, siblings)

            booking = Booking.create(
                listing=listing,
                guest_id=guest.user_id,
                booking_dates=booking_dates,
                number_of_guests=number_of_guests,
                total_price=total_price
            )
            await self.repository.save(booking)

        logger.info(
            "Booking %s requested for listing %s (%s, %s)",
            booking.booking_id, listing_id, booking_dates, total_price.amount
        )
        return booking

    async def update_booking(
        self,
        booking_id: UUID,
        current_user: User,
        booking_dates: DateRange,
        number_of_guests: int
    ) -> Booking:
        """Change dates and guests of a pending booking and reprice it"""
        listing_id = (await self._load(booking_id)).listing_id

        async with self.locks.hold(listing_id):
            booking = await self._load(booking_id)
            ensure_can_modify_booking(current_user, booking)
            if booking.status != BookingStatus.PENDING:
                raise InvalidStateError(
                    f"Cannot update booking with status {booking.status.value}"
                )

            listing = await self._load_listing(listing_id)
            siblings = await self.repository.find_by_listing_id(listing_id)
            total_price = BookingResolver.resolve(
                listing, booking_dates, number_of_guests, siblings,
                exclude_booking_id=booking.booking_id
            )

            booking.reschedule(booking_dates, number_of_guests, total_price)
            await self.repository.update(booking)

        logger.info("Booking %s updated to %s", booking_id, booking_dates)
        return booking

    async def decide_booking(self, booking_id: UUID, current_user: User, accept: bool) -> Booking:
        """Host accepts or rejects a pending booking.

        Accepting closes the booked nights on the listing.
        """
        listing_id = (await self._load(booking_id)).listing_id

        async with self.locks.hold(listing_id):
            booking = await self._load(booking_id)
            listing = await self._load_listing(listing_id)
            ensure_can_decide_booking(current_user, listing)

            if booking.status != BookingStatus.PENDING:
                raise InvalidStateError(
                    f"Booking is already {booking.status.value} and cannot be decided again"
                )

            if accept:
                booking.accept()
                listing.close_dates(booking.booking_dates)
                await self.listing_repo.update(listing)
            else:
                booking.reject()
            await self.repository.update(booking)

        logger.info("Booking %s %s", booking_id, booking.status.value.lower())
        return booking

    async def accept_booking(self, booking_id: UUID, current_user: User) -> Booking:
        return await self.decide_booking(booking_id, current_user, accept=True)

    async def reject_booking(self, booking_id: UUID, current_user: User) -> Booking:
        return await self.decide_booking(booking_id, current_user, accept=False)

    async def delete_booking(self, booking_id: UUID, current_user: User) -> None:
        """Cancel a booking on behalf of its guest or an admin.

        The record is kept with status CANCELLED. Nights of an accepted
        booking go back to the listing. Cancelling twice is a no-op.
        """
        listing_id = (await self._load(booking_id)).listing_id

        async with self.locks.hold(listing_id):
            booking = await self._load(booking_id)
            ensure_can_delete_booking(current_user, booking)

            if booking.status == BookingStatus.CANCELLED:
                return

            was_accepted = booking.status == BookingStatus.ACCEPTED
            if was_accepted:
                # The listing may be gone already; then there is nothing to reopen
                listing = await self.listing_repo.find_by_id(listing_id)
                if listing:
                    listing.reopen_dates(booking.booking_dates)
                    await self.listing_repo.update(listing)

            booking.cancel()
            await self.repository.update(booking)

        logger.info("Booking %s cancelled", booking_id)
