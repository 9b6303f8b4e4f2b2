"""
Booking and cancellation endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.db.session import get_db
from cinebook.schemas.booking import BookingForm, BookingResponse, CancelForm, CancelResponse
from cinebook.services.booking_service import create_booking, cancel_booking

router = APIRouter(tags=["Bookings"])


@router.post("/book", response_model=BookingResponse)
async def book(
    form: Annotated[BookingForm, Form()],
    db: AsyncSession = Depends(get_db),
):
    """
    Book seats for a screening.

    seats_indices is a JSON array sent as a form field. The booking row and
    every seat row are committed together or not at all.
    """
    booking_id = await create_booking(db, form)
    return BookingResponse(booking_id=booking_id)


@router.delete("/cancel", response_model=CancelResponse)
async def cancel(
    form: Annotated[CancelForm, Form()],
    db: AsyncSession = Depends(get_db),
):
    """Cancel the most recent booking for the user, movie and screening time."""
    await cancel_booking(db, form)
    return CancelResponse()
