import logging

from fastapi import FastAPI, HTTPException, Depends, Query
from uuid import UUID
from decimal import Decimal
from typing import List
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    # Listings
    DateRangeSchema, ListingRequest, ListingResponse, HostProfileResponse, ListingSummaryResponse,
    # Bookings
    CreateBookingRequest, UpdateBookingRequest, BookingResponse,
    # Auth
    Token, UserResponse
)

from api.dependencies import get_current_active_user, fake_users_db, get_user, get_user_by_id
from api.exception_handlers import register_exception_handlers
from infrastructure.config import APP_TITLE, APP_VERSION, APP_DESCRIPTION, LOG_LEVEL
from infrastructure.security import verify_password, create_access_token
from infrastructure.locks import ListingLocks
from domain.auth import User
from domain.errors import NotFoundError

from application.services import ListingService, BookingService
from infrastructure.repositories.in_memory_repositories import (
    InMemoryListingRepository, InMemoryBookingRepository, InMemoryReviewRepository
)
from domain.enums import BookingStatus, ListingUtility, Role
from domain.value_objects import DateRange

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION
)
register_exception_handlers(app)

# Initialize repositories
listing_repo = InMemoryListingRepository()
booking_repo = InMemoryBookingRepository()
review_repo = InMemoryReviewRepository()
listing_locks = ListingLocks()

# Dependency injection
def get_listing_service() -> ListingService:
    return ListingService(listing_repo, booking_repo, review_repo, listing_locks)

def get_booking_service() -> BookingService:
    return BookingService(booking_repo, listing_repo, listing_locks)

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/booking-status", tags=["Enum Reference"])
async def get_booking_statuses():
    """Get all BookingStatus enum values"""
    return {
        "values": [item.name for item in BookingStatus],
        "description": "Booking status values: PENDING, ACCEPTED, REJECTED, CANCELLED"
    }

@app.get("/api/enums/listing-utility", tags=["Enum Reference"])
async def get_listing_utilities():
    """Get all ListingUtility enum values"""
    return {"values": [item.name for item in ListingUtility]}

@app.get("/api/enums/role", tags=["Enum Reference"])
async def get_roles():
    """Get all Role enum values"""
    return {
        "values": [item.name for item in Role],
        "description": "Role values: GUEST, HOST, ADMIN"
    }

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = get_user(fake_users_db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(data={"sub": user.username})
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    return _user_to_response(current_user)

# ============================================================================
# LISTING ENDPOINTS
# ============================================================================

@app.get("/api/listings", response_model=List[ListingResponse], tags=["Listings"])
async def get_all_listings(service: ListingService = Depends(get_listing_service)):
    """Get all listings"""
    listings = await service.get_all_listings()
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/price", response_model=List[ListingResponse], tags=["Listings"])
async def get_listings_by_price(
    min_price: Decimal = Query(...),
    max_price: Decimal = Query(...),
    service: ListingService = Depends(get_listing_service)
):
    """Get listings with a nightly price between min_price and max_price"""
    listings = await service.get_listings_by_price(min_price, max_price)
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/capacity", response_model=List[ListingResponse], tags=["Listings"])
async def get_listings_by_capacity(
    min_capacity: int = Query(...),
    max_capacity: int = Query(...),
    service: ListingService = Depends(get_listing_service)
):
    """Get listings with a capacity between min_capacity and max_capacity"""
    listings = await service.get_listings_by_capacity(min_capacity, max_capacity)
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/location/{location}", response_model=List[ListingResponse], tags=["Listings"])
async def get_listings_by_location(
    location: str,
    service: ListingService = Depends(get_listing_service)
):
    """Get listings in a location"""
    listings = await service.get_listings_by_location(location)
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/utilities/{utility}", response_model=List[ListingResponse], tags=["Listings"])
async def get_listings_by_utility(
    utility: ListingUtility,
    service: ListingService = Depends(get_listing_service)
):
    """Get listings offering a utility"""
    listings = await service.get_listings_by_utility(utility)
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/host/{host_id}", response_model=List[ListingResponse], tags=["Listings"])
async def get_listings_by_host(
    host_id: UUID,
    service: ListingService = Depends(get_listing_service)
):
    """Get all listings of a host"""
    if get_user_by_id(fake_users_db, host_id) is None:
        raise NotFoundError("user", host_id)
    listings = await service.get_listings_by_host(host_id)
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/host/{host_id}/profile", response_model=HostProfileResponse, tags=["Listings"])
async def get_host_profile(
    host_id: UUID,
    service: ListingService = Depends(get_listing_service)
):
    """Get a host's profile with the id and title of each listing"""
    host = get_user_by_id(fake_users_db, host_id)
    if host is None:
        raise NotFoundError("user", host_id)
    profile = await service.get_host_profile(host)
    return HostProfileResponse(
        host_id=profile.host_id,
        username=profile.username,
        full_name=profile.full_name,
        listings=[
            ListingSummaryResponse(listing_id=s.listing_id, title=s.title)
            for s in profile.listings
        ]
    )

@app.get("/api/listings/user", response_model=List[ListingResponse], tags=["Listings"])
async def get_listings_current_user(
    service: ListingService = Depends(get_listing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get listings hosted by the current user"""
    listings = await service.get_listings_for_user(current_user)
    return [_listing_to_response(l) for l in listings]

@app.get("/api/listings/{listing_id}", response_model=ListingResponse, tags=["Listings"])
async def get_listing(
    listing_id: UUID,
    service: ListingService = Depends(get_listing_service)
):
    """Get listing by ID"""
    listing = await service.get_listing(listing_id)
    return _listing_to_response(listing)

@app.post("/api/listings", response_model=ListingResponse, status_code=201, tags=["Listings"])
async def create_listing(
    request: ListingRequest,
    service: ListingService = Depends(get_listing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Create a listing hosted by the current user"""
    listing = await service.create_listing(
        current_user=current_user,
        title=request.title,
        description=request.description,
        price_per_night=request.price_per_night,
        capacity=request.capacity,
        location=request.location,
        utilities=request.utilities,
        image_urls=request.image_urls,
        available_dates=_to_date_ranges(request.available_dates)
    )
    return _listing_to_response(listing)

@app.put("/api/listings/{listing_id}", response_model=ListingResponse, tags=["Listings"])
async def update_listing(
    listing_id: UUID,
    request: ListingRequest,
    service: ListingService = Depends(get_listing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Update listing details"""
    listing = await service.update_listing(
        listing_id=listing_id,
        current_user=current_user,
        title=request.title,
        description=request.description,
        price_per_night=request.price_per_night,
        capacity=request.capacity,
        location=request.location,
        utilities=request.utilities,
        image_urls=request.image_urls,
        available_dates=_to_date_ranges(request.available_dates)
    )
    return _listing_to_response(listing)

@app.post("/api/listings/{listing_id}/availability", response_model=ListingResponse, tags=["Listings"])
async def add_listing_availability(
    listing_id: UUID,
    request: DateRangeSchema,
    service: ListingService = Depends(get_listing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Open new dates on a listing"""
    date_range = DateRange(start_date=request.start_date, end_date=request.end_date)
    listing = await service.add_availability(listing_id, current_user, date_range)
    return _listing_to_response(listing)

@app.delete("/api/listings/{listing_id}", status_code=204, tags=["Listings"])
async def delete_listing(
    listing_id: UUID,
    service: ListingService = Depends(get_listing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Delete a listing with its bookings and reviews"""
    await service.delete_listing(listing_id, current_user)

# ============================================================================
# BOOKING ENDPOINTS
# ============================================================================

@app.post("/api/bookings", response_model=BookingResponse, status_code=201, tags=["Bookings"])
async def create_booking(
    request: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Request a booking for the current user"""
    booking = await service.create_booking(
        current_user=current_user,
        listing_id=request.listing_id,
        booking_dates=DateRange(start_date=request.start_date, end_date=request.end_date),
        number_of_guests=request.number_of_guests
    )
    return _booking_to_response(booking)

@app.get("/api/bookings", response_model=List[BookingResponse], tags=["Bookings"])
async def get_all_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all bookings (admin only)"""
    bookings = await service.get_all_bookings(current_user)
    return [_booking_to_response(b) for b in bookings]

@app.get("/api/bookings/user", response_model=List[BookingResponse], tags=["Bookings"])
async def get_bookings_current_user(
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get bookings made by the current user"""
    bookings = await service.get_bookings_for_user(current_user)
    return [_booking_to_response(b) for b in bookings]

@app.get("/api/bookings/user/{user_id}", response_model=List[BookingResponse], tags=["Bookings"])
async def get_bookings_by_user_id(
    user_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get bookings made by any user (admin only)"""
    bookings = await service.get_bookings_by_user_id(current_user, user_id)
    if not bookings and get_user_by_id(fake_users_db, user_id) is None:
        raise NotFoundError("user", user_id)
    return [_booking_to_response(b) for b in bookings]

@app.get("/api/bookings/listing/{listing_id}", response_model=List[BookingResponse], tags=["Bookings"])
async def get_bookings_by_listing(
    listing_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all bookings for a listing"""
    bookings = await service.get_bookings_by_listing(listing_id)
    return [_booking_to_response(b) for b in bookings]

@app.get("/api/bookings/{booking_id}", response_model=BookingResponse, tags=["Bookings"])
async def get_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get booking by ID"""
    booking = await service.get_booking(booking_id)
    return _booking_to_response(booking)

@app.put("/api/bookings/{booking_id}", response_model=BookingResponse, tags=["Bookings"])
async def update_booking(
    booking_id: UUID,
    request: UpdateBookingRequest,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Change dates or guests of a pending booking"""
    booking = await service.update_booking(
        booking_id=booking_id,
        current_user=current_user,
        booking_dates=DateRange(start_date=request.start_date, end_date=request.end_date),
        number_of_guests=request.number_of_guests
    )
    return _booking_to_response(booking)

@app.patch("/api/bookings/{booking_id}/accept", response_model=BookingResponse, tags=["Bookings"])
async def accept_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Accept a pending booking (listing host only)"""
    booking = await service.accept_booking(booking_id, current_user)
    return _booking_to_response(booking)

@app.patch("/api/bookings/{booking_id}/reject", response_model=BookingResponse, tags=["Bookings"])
async def reject_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Reject a pending booking (listing host only)"""
    booking = await service.reject_booking(booking_id, current_user)
    return _booking_to_response(booking)

@app.delete("/api/bookings/{booking_id}", status_code=204, tags=["Bookings"])
async def delete_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Cancel a booking (its guest or an admin)"""
    await service.delete_booking(booking_id, current_user)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _to_date_ranges(ranges):
    """Convert request date ranges to domain DateRange values (None stays None)"""
    if ranges is None:
        return None
    return [DateRange(start_date=r.start_date, end_date=r.end_date) for r in ranges]

def _user_to_response(user) -> UserResponse:
    return UserResponse(
        user_id=user.user_id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        disabled=user.disabled,
        roles=sorted(user.roles, key=lambda r: r.value)
    )

def _listing_to_response(listing) -> ListingResponse:
    """Convert Listing entity to ListingResponse"""
    return ListingResponse(
        listing_id=listing.listing_id,
        title=listing.title,
        host_id=listing.host_id,
        host_name=listing.host_name,
        description=listing.description,
        price_per_night=listing.price_per_night.amount,
        capacity=listing.capacity,
        utilities=sorted(u.value for u in listing.utilities),
        available_dates=[
            DateRangeSchema(start_date=r.start_date, end_date=r.end_date)
            for r in listing.available_dates
        ],
        location=listing.location,
        image_urls=listing.image_urls,
        average_rating=listing.average_rating,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
        version=listing.version
    )

def _booking_to_response(booking) -> BookingResponse:
    """Convert Booking entity to BookingResponse"""
    return BookingResponse(
        booking_id=booking.booking_id,
        listing_id=booking.listing_id,
        listing_title=booking.listing_title,
        guest_id=booking.guest_id,
        start_date=booking.booking_dates.start_date,
        end_date=booking.booking_dates.end_date,
        nights=booking.nights(),
        number_of_guests=booking.number_of_guests,
        total_price=booking.total_price.amount,
        status=booking.status.value,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        version=booking.version
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
