"""
Booking and occupied-seat models.

Key design decisions:
- A booking is keyed by user name and screening (movie_title, screening_time);
  there is no status column, cancellation deletes the row.
- booking_date is assigned by the database at insert time.
- occupied_seats carries the screening columns so seat occupancy can be
  made unique per screening without a join.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, UniqueConstraint, Index, func

from cinebook.db.base import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_name = Column(String(100), nullable=True, index=True)
    movie_title = Column(String(255), nullable=True)
    screening_time = Column(String(64), nullable=False)
    seats_booked = Column(Integer, nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=True)
    booking_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        # Cancellation looks up the latest booking for (user, movie, time)
        Index("ix_bookings_user_screening", "user_name", "movie_title", "screening_time"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_name}, movie={self.movie_title}, time={self.screening_time})>"


class OccupiedSeat(Base):
    __tablename__ = "occupied_seats"

    id = Column(Integer, primary_key=True)
    booking_id_fk = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    movie_title = Column(String(255), nullable=True)
    screening_time = Column(String(64), nullable=False)
    seat_index = Column(Integer, nullable=False)

    __table_args__ = (
        # One occupant per seat per screening
        UniqueConstraint("movie_title", "screening_time", "seat_index", name="uq_screening_seat"),
    )

    def __repr__(self) -> str:
        return f"<OccupiedSeat(booking={self.booking_id_fk}, seat={self.seat_index})>"
