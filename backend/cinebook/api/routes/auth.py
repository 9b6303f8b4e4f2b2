"""
Sign-in endpoint (registers unseen usernames).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.db.session import get_db
from cinebook.schemas.user import SignInForm, SignInResponse
from cinebook.services.auth_service import sign_in

router = APIRouter(tags=["Authentication"])


@router.post("/signin", response_model=SignInResponse, response_model_exclude_none=True)
async def signin(
    form: Annotated[SignInForm, Form()],
    db: AsyncSession = Depends(get_db),
):
    """Sign in with username and password; unseen usernames are registered."""
    return await sign_in(db, form)
