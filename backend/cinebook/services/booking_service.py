"""
Booking service: atomic seat booking and cancellation.

TRANSACTION MODEL
=================

A booking is one booking row plus one occupied_seats row per seat index.
Both are written in the same transaction, so either all of them persist
or none do:

  1. INSERT INTO bookings (...)          -> flush to get the generated id
  2. INSERT INTO occupied_seats (...)    -> bulk, one row per seat index
  3. COMMIT                              -> or ROLLBACK on any failure

Seat occupancy is guarded by the uq_screening_seat constraint on
(movie_title, screening_time, seat_index). When two bookings race for the
same seat, the database rejects the second insert and that booking rolls
back with a 409 instead of double-selling the seat.

Cancellation deletes the most recent booking matching (user, movie, time)
together with its seats, again inside one transaction.
"""

import json
from decimal import Decimal, InvalidOperation

from sqlalchemy import select, insert, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.booking import Booking, OccupiedSeat
from cinebook.schemas.booking import BookingForm, CancelForm
from cinebook.core.config import get_settings
from cinebook.core.exceptions import DatabaseError, NotFoundError, SeatUnavailableError, ValidationError
from cinebook.core.metrics import booking_latency, record_booking_attempt, record_cancellation
from cinebook.core.logging import get_logger

logger = get_logger(__name__)

SEAT_CONSTRAINT = "uq_screening_seat"


def _reject_constant(name: str):
    # NaN and Infinity are not JSON, json.loads accepts them by default
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_seat_indices(raw: str | None) -> list:
    """
    Decode the JSON-encoded seat list sent in the form body.
    `null` means no seats. Elements are coerced to int at insert time.
    """
    try:
        parsed = json.loads(raw, parse_constant=_reject_constant)
    except (TypeError, ValueError):
        raise ValidationError("Invalid seats_indices format.")

    if parsed is None:
        return []
    if not isinstance(parsed, list):
        raise ValidationError("Invalid seats_indices format.")
    return parsed


def _parse_optional(value: str | None, cast, field: str):
    if value is None or value == "":
        return None
    try:
        parsed = cast(value)
    except (ValueError, InvalidOperation):
        raise ValidationError(f"Invalid {field} value.")
    if isinstance(parsed, Decimal) and not parsed.is_finite():
        raise ValidationError(f"Invalid {field} value.")
    return parsed


def _failure_message(prefix: str, exc: Exception) -> str:
    if get_settings().EXPOSE_ERROR_DETAILS:
        return f"{prefix}: {exc}"
    return f"{prefix}."


def _is_seat_conflict(exc: IntegrityError) -> bool:
    detail = str(exc.orig)
    # PostgreSQL names the constraint, SQLite lists its columns
    return SEAT_CONSTRAINT in detail or "occupied_seats.seat_index" in detail


async def create_booking(db: AsyncSession, form: BookingForm) -> int:
    """
    Create a booking and its occupied seats atomically.
    Returns the generated booking id.
    """
    if not form.screening_time:
        raise ValidationError("Screening time is required for booking.")

    seat_indices = parse_seat_indices(form.seats_indices)
    seats_booked = _parse_optional(form.seats_count, int, "seats_count")
    total_amount = _parse_optional(form.total, Decimal, "total")

    with booking_latency.time():
        try:
            # The transaction begins with the first statement on this session
            booking = Booking(
                user_name=form.user,
                movie_title=form.movie,
                screening_time=form.screening_time,
                seats_booked=seats_booked,
                total_amount=total_amount,
            )
            db.add(booking)
            await db.flush()
            booking_id = booking.id

            if seat_indices:
                seat_rows = [
                    {
                        "booking_id_fk": booking_id,
                        "movie_title": form.movie,
                        "screening_time": form.screening_time,
                        "seat_index": int(index),
                    }
                    for index in seat_indices
                ]
                await db.execute(insert(OccupiedSeat), seat_rows)

            await db.commit()

        except IntegrityError as exc:
            await db.rollback()
            if _is_seat_conflict(exc):
                logger.warning(
                    "booking_seat_conflict",
                    user=form.user,
                    movie=form.movie,
                    screening_time=form.screening_time,
                    seats=seat_indices,
                )
                record_booking_attempt("conflict")
                raise SeatUnavailableError("One or more seats are already booked.") from exc
            logger.error("booking_failed", error=str(exc), exc_info=True)
            record_booking_attempt("error")
            raise DatabaseError(_failure_message("Booking failed", exc)) from exc

        except Exception as exc:
            await db.rollback()
            logger.error("booking_failed", error=str(exc), exc_info=True)
            record_booking_attempt("error")
            raise DatabaseError(_failure_message("Booking failed", exc)) from exc

    logger.info(
        "booking_created",
        booking_id=booking_id,
        user=form.user,
        movie=form.movie,
        screening_time=form.screening_time,
        seats=len(seat_indices),
    )
    record_booking_attempt("success")
    return booking_id


async def cancel_booking(db: AsyncSession, form: CancelForm) -> int:
    """
    Delete the most recent booking for (user, movie, time) and its seats.
    Returns the id of the cancelled booking.
    """
    if not form.movie or not form.user or not form.time:
        raise ValidationError("Missing user, movie, or time details for cancellation.")

    try:
        result = await db.execute(
            select(Booking.id)
            .where(
                Booking.user_name == form.user,
                Booking.movie_title == form.movie,
                Booking.screening_time == form.time,
            )
            .order_by(Booking.id.desc())
            .limit(1)
        )
        booking_id = result.scalar_one_or_none()

        if booking_id is None:
            await db.rollback()
            raise NotFoundError("No recent booking found to cancel with that movie and time.")

        await db.execute(delete(OccupiedSeat).where(OccupiedSeat.booking_id_fk == booking_id))
        deleted = await db.execute(delete(Booking).where(Booking.id == booking_id))

        # Another request removed it between the lookup and the delete
        if deleted.rowcount == 0:
            raise DatabaseError("Booking record not found for deletion.")

        await db.commit()

    except NotFoundError:
        logger.info("cancellation_not_found", user=form.user, movie=form.movie, time=form.time)
        record_cancellation("not_found")
        raise

    except Exception as exc:
        await db.rollback()
        logger.error("cancellation_failed", error=str(exc), exc_info=True)
        record_cancellation("error")
        raise DatabaseError(
            _failure_message("Cancellation failed due to server error", exc)
        ) from exc

    logger.info(
        "booking_cancelled",
        booking_id=booking_id,
        user=form.user,
        movie=form.movie,
        time=form.time,
    )
    record_cancellation("success")
    return booking_id
