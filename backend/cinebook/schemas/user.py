"""
Pydantic schemas for sign-in form bodies and responses.
"""

from typing import Optional
from pydantic import BaseModel


class SignInForm(BaseModel):
    # Optional here so missing fields surface as 400s from the service
    username: Optional[str] = None
    password: Optional[str] = None


class SignInResponse(BaseModel):
    status: str = "success"
    message: str
    user_id: Optional[int] = None
