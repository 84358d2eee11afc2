"""Role and ownership guards for mutation entry points"""
from typing import Optional

from domain.auth import User
from domain.entities import Booking, Listing
from domain.enums import Role
from domain.errors import UnauthorizedError


def require_authenticated(user: Optional[User]) -> User:
    if user is None or user.disabled:
        raise UnauthorizedError("An authenticated user is required")
    return user


def require_host_or_admin(user: Optional[User]) -> User:
    user = require_authenticated(user)
    if not user.has_any_role(Role.HOST, Role.ADMIN):
        raise UnauthorizedError("Only hosts or admins can manage listings")
    return user


def require_admin(user: Optional[User]) -> User:
    user = require_authenticated(user)
    if not user.is_admin:
        raise UnauthorizedError("Only admins can perform this action")
    return user


def ensure_can_manage_listing(user: Optional[User], listing: Listing) -> User:
    """Listing update/delete/availability: the listing's host, or an admin"""
    user = require_host_or_admin(user)
    if not user.is_admin and not listing.is_hosted_by(user.user_id):
        raise UnauthorizedError("Only the listing host or an admin can change this listing")
    return user


def ensure_can_decide_booking(user: Optional[User], listing: Listing) -> User:
    """Accept/reject: only the host of the booked listing"""
    user = require_authenticated(user)
    if not listing.is_hosted_by(user.user_id):
        raise UnauthorizedError("Only the listing host can accept or reject a booking")
    return user


def ensure_can_modify_booking(user: Optional[User], booking: Booking) -> User:
    user = require_authenticated(user)
    if not booking.is_owned_by(user.user_id):
        raise UnauthorizedError("Only the guest who made the booking can update it")
    return user


def ensure_can_delete_booking(user: Optional[User], booking: Booking) -> User:
    """Delete: the booking's guest, or an admin"""
    user = require_authenticated(user)
    if not user.is_admin and not booking.is_owned_by(user.user_id):
        raise UnauthorizedError("Only the guest who made the booking or an admin can delete it")
    return user
