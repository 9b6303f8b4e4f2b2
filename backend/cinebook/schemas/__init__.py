from cinebook.schemas.user import SignInForm, SignInResponse
from cinebook.schemas.booking import BookingForm, BookingResponse, CancelForm, CancelResponse

__all__ = [
    "SignInForm", "SignInResponse",
    "BookingForm", "BookingResponse", "CancelForm", "CancelResponse",
]
