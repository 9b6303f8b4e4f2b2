from cinebook.models.user import User
from cinebook.models.booking import Booking, OccupiedSeat

__all__ = ["User", "Booking", "OccupiedSeat"]
