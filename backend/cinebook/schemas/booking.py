"""
Pydantic schemas for booking and cancellation form bodies and responses.

Form values arrive as strings; numeric coercion and JSON decoding of
seats_indices happen in the booking service.
"""

from typing import Optional
from pydantic import BaseModel


class BookingForm(BaseModel):
    user: Optional[str] = None
    movie: Optional[str] = None
    screening_time: Optional[str] = None
    seats_count: Optional[str] = None
    total: Optional[str] = None
    seats_indices: Optional[str] = None  # JSON array, e.g. "[3,4]"


class BookingResponse(BaseModel):
    status: str = "success"
    message: str = "Booking saved."
    booking_id: int


class CancelForm(BaseModel):
    user: Optional[str] = None
    movie: Optional[str] = None
    time: Optional[str] = None


class CancelResponse(BaseModel):
    status: str = "success"
    message: str = "Booking successfully cancelled."
