"""
Account endpoints for API v1.

Registration, login, profile and logout.  A successful login sets the
signed credential as the ``token`` cookie; logout overwrites it with an
empty value (the credential itself stays valid until it expires, if it
was issued with an expiry at all).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from venue_booking_api.app.api.deps import get_settings, get_user_service
from venue_booking_api.app.core.config import Settings
from venue_booking_api.app.core.security import get_optional_user
from venue_booking_api.app.schemas.user import UserCreate, UserLogin, UserProfile, UserRead
from venue_booking_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=UserRead, response_model_exclude_none=True)
async def register_user(
    user: UserCreate,
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Register a new attendee, venue owner or organizer.

    ``venueDetails`` is kept only for venue owners and
    ``organizationDetails`` only for organizers.  A duplicate email
    yields 422.
    """
    return await users.create_user(user)


@router.post("/login", response_model=UserRead, response_model_exclude_none=True)
async def login_user(
    credentials: UserLogin,
    request: Request,
    response: Response,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> UserRead:
    """Check email and password and set the session cookie.

    Unknown emails yield 404, wrong passwords 401.
    """
    user = await users.authenticate(credentials.email, credentials.password)
    token = request.app.state.credentials.issue(user.id, user.email)
    response.set_cookie(key=settings.cookie_name, value=token, httponly=True, samesite="lax")
    return user


@router.get("/profile", response_model=Optional[UserProfile])
async def read_profile(
    current_user: Optional[UserRead] = Depends(get_optional_user),
) -> Optional[UserProfile]:
    """Return ``{id, name, email, role}`` for the session, or ``null`` without one."""
    if current_user is None:
        return None
    return UserProfile(
        id=current_user.id,
        name=current_user.name,
        email=current_user.email,
        role=current_user.role,
    )


@router.post("/logout")
async def logout_user(response: Response, settings: Settings = Depends(get_settings)) -> bool:
    response.set_cookie(key=settings.cookie_name, value="", httponly=True, samesite="lax")
    return True
