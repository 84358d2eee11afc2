"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional, Set

from domain.enums import ListingUtility, Role


# ============================================================================
# SHARED SCHEMAS
# ============================================================================

class DateRangeSchema(BaseModel):
    """Date range DTO, end_date is the check-out day"""
    start_date: date
    end_date: date


# ============================================================================
# LISTING SCHEMAS
# ============================================================================

class ListingRequest(BaseModel):
    """Create or update listing request DTO"""
    title: str = Field(min_length=1)
    description: str = ""
    price_per_night: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    capacity: int = Field(gt=0)
    utilities: Set[ListingUtility] = set()
    location: str = Field(min_length=1)
    image_urls: List[str] = []
    available_dates: Optional[List[DateRangeSchema]] = None


class ListingResponse(BaseModel):
    """Listing response DTO"""
    listing_id: UUID
    title: str
    host_id: UUID
    host_name: str
    description: str
    price_per_night: Decimal
    capacity: int
    utilities: List[str]
    available_dates: List[DateRangeSchema]
    location: str
    image_urls: List[str]
    average_rating: float
    created_at: datetime
    updated_at: datetime
    version: int


class ListingSummaryResponse(BaseModel):
    """Listing id and title DTO"""
    listing_id: UUID
    title: str


class HostProfileResponse(BaseModel):
    """Host profile response DTO"""
    host_id: UUID
    username: str
    full_name: Optional[str] = None
    listings: List[ListingSummaryResponse]


# ============================================================================
# BOOKING SCHEMAS
# ============================================================================

class CreateBookingRequest(BaseModel):
    """Create booking request DTO"""
    listing_id: UUID
    start_date: date
    end_date: date
    number_of_guests: int = Field(ge=1)


class UpdateBookingRequest(BaseModel):
    """Update booking request DTO"""
    start_date: date
    end_date: date
    number_of_guests: int = Field(ge=1)


class BookingResponse(BaseModel):
    """Booking response DTO"""
    booking_id: UUID
    listing_id: UUID
    listing_title: str
    guest_id: UUID
    start_date: date
    end_date: date
    nights: int
    number_of_guests: int
    total_price: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    version: int


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str

class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None

class UserResponse(BaseModel):
    """User response DTO"""
    user_id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    disabled: bool
    roles: List[Role]
