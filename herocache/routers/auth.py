"""Authentication routes for login, logout and health."""

from fastapi import APIRouter, Depends

from herocache import schemas
from herocache.core.dependencies import get_session_service
from herocache.services import SessionService

router = APIRouter()


@router.post("/login", response_model=schemas.StatusResponse)
async def login(body: schemas.LoginRequest, session: SessionService = Depends(get_session_service)):
    """
    Log in against the heroes API and keep the session token.

    Returns:
        - 401: Invalid credentials
        - 502: Empty credentials or API unreachable
    """
    await session.login(body.username, body.password)
    return {"success": True, "message": "Login successful"}


@router.post("/logout", response_model=schemas.StatusResponse)
async def logout(session: SessionService = Depends(get_session_service)):
    """Forget the token and empty the local store."""
    cleared = await session.logout()
    return {"success": True, "message": "Logged out" if cleared else "Logged out, cache partially cleared"}


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
