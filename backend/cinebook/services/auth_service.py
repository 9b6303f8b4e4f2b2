"""
Sign-in service with implicit registration of unseen usernames.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.user import User
from cinebook.schemas.user import SignInForm, SignInResponse
from cinebook.core.config import get_settings
from cinebook.core.exceptions import AuthError, DatabaseError, ValidationError
from cinebook.core.metrics import record_signin
from cinebook.core.security import hash_password, verify_password
from cinebook.core.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password."
SIGNIN_FAILED = "Server error during authentication/registration."


async def find_or_create_user(
    db: AsyncSession,
    username: str,
    password: str,
    auto_register: bool = True,
) -> tuple[User, bool]:
    """
    Return (user, created) for the given credentials.

    An existing user must present the matching password. An unseen username
    is registered on the spot when auto_register is on, otherwise rejected
    the same way as a wrong password.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    if user is not None:
        if not verify_password(password, user.hashed_password):
            raise AuthError(INVALID_CREDENTIALS)
        return user, False

    if not auto_register:
        raise AuthError(INVALID_CREDENTIALS)

    user = User(username=username, hashed_password=hash_password(password))
    db.add(user)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return user, True


async def sign_in(db: AsyncSession, form: SignInForm) -> SignInResponse:
    if not form.username or not form.password:
        raise ValidationError("Username and password are required.")

    settings = get_settings()
    try:
        user, created = await find_or_create_user(
            db, form.username, form.password, auto_register=settings.AUTO_REGISTER_ON_SIGNIN
        )
    except AuthError:
        logger.warning("signin_rejected", username=form.username)
        record_signin("rejected")
        raise
    except Exception as exc:
        logger.error("signin_db_error", username=form.username, error=str(exc), exc_info=True)
        record_signin("error")
        raise DatabaseError(SIGNIN_FAILED) from exc

    if created:
        logger.info("user_auto_registered", user_id=user.id, username=user.username)
        record_signin("registered")
        return SignInResponse(
            message="New user created and signed in successfully.",
            user_id=user.id,
        )

    logger.info("signin_succeeded", user_id=user.id)
    record_signin("success")
    return SignInResponse(message="Sign-in successful.")
