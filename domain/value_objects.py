"""Domain Value Objects"""
from pydantic import BaseModel, Field, validator
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from domain.errors import InvalidRangeError

CENT = Decimal("0.01")
# Ten integer digits, so the total of any stay fits decimal precision
MAX_PRICE_PER_NIGHT = Decimal("9999999999.99")


class DateRange(BaseModel):
    """Value Object for a span of nights.

    Stored as ``[start_date, end_date)``: ``end_date`` is the check-out day
    and is not itself a night. Two ranges that touch (one ends on the day
    the other starts) share no night and do not overlap.
    """
    start_date: date
    end_date: date

    @validator('end_date')
    def end_after_start(cls, v, values):
        if 'start_date' in values and v <= values['start_date']:
            raise InvalidRangeError()
        return v

    def nights(self) -> int:
        """Calculate number of nights"""
        return (self.end_date - self.start_date).days

    def overlaps(self, other: "DateRange") -> bool:
        """Check if the two ranges share at least one night"""
        return self.start_date < other.end_date and other.start_date < self.end_date

    def is_identical_to(self, other: "DateRange") -> bool:
        return self.start_date == other.start_date and self.end_date == other.end_date

    def is_immediately_before(self, other: "DateRange") -> bool:
        """Check if this range ends exactly where the other starts"""
        return self.end_date == other.start_date

    def contains(self, other: "DateRange") -> bool:
        return self.start_date <= other.start_date and other.end_date <= self.end_date

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()} -> {self.end_date.isoformat()}"

    class Config:
        frozen = True


class Money(BaseModel):
    """Value Object for monetary amounts, kept at cent precision"""
    amount: Decimal = Field(gt=0)

    @validator('amount')
    def quantize_to_cents(cls, v):
        try:
            cents = v.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError("Amount is too large to keep at cent precision")
        if cents <= 0:
            raise ValueError("Amount must be at least one cent")
        return cents

    def times(self, quantity: int) -> "Money":
        """Multiply by a whole quantity without leaving decimal arithmetic"""
        return Money(amount=self.amount * quantity)

    class Config:
        frozen = True
