"""
Session API Routes

Admin login check.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..auth import AuthConfig, LoginError, get_auth_config

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginInput(BaseModel):
    """Login form."""

    username: str = ""
    passcode: str = ""


@router.post("/login")
async def login(
    input_data: LoginInput,
    config: AuthConfig = Depends(get_auth_config),
) -> dict:
    """Check a passcode/user pair and return the canonical user name.

    The client sends the returned name as X-Admin-User on later calls.
    """
    try:
        user = config.login(input_data.username, input_data.passcode)
    except LoginError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return {"user": user.name, "role": user.role}
