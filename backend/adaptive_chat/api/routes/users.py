"""
User Routes

Endpoints:
- POST /users/register - Create an account (no token issued)
- POST /users/login - Exchange email/password for a bearer JWT
- GET/PUT /users/profile - Current user profile
- GET/PUT /users/preferences - Persona, theme and UI preferences
- GET /users/stats - Usage counters and streak

Auth Flow:
1. Client registers with name, email and password
2. Client logs in and receives a JWT in the response body
3. Client sends `Authorization: Bearer <token>` on every protected call
"""

from fastapi import APIRouter, status

from adaptive_chat.api.deps import (
    CurrentUser,
    DbSession,
    create_access_token,
    token_lifetime_seconds,
)
from adaptive_chat.schemas.auth import LoginRequest, LoginResponse
from adaptive_chat.schemas.user import (
    Preferences,
    PreferencesUpdate,
    PreferencesUpdateResponse,
    ProfileUpdateResponse,
    RegisterResponse,
    UserCreate,
    UserRead,
    UserStats,
    UserSummary,
    UserUpdate,
)
from adaptive_chat.services import credentials

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, db: DbSession) -> RegisterResponse:
    """Create an account. The caller still has to log in to get a token."""
    user = await credentials.register(db, data.name, data.email, data.password)
    return RegisterResponse(
        message="User registered successfully",
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, db: DbSession) -> LoginResponse:
    """
    Exchange email/password for a session JWT.

    Unknown email and wrong password both answer 400 "Invalid credentials".
    A successful login also advances the daily streak.
    """
    user = await credentials.authenticate(db, data.email, data.password)
    return LoginResponse(
        token=create_access_token(user.id),
        expires_in=token_lifetime_seconds(),
        user=UserRead.model_validate(user),
    )


@router.get("/profile", response_model=UserRead)
async def get_profile(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    data: UserUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProfileUpdateResponse:
    user = await credentials.update_profile(db, current_user.id, data)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserRead.model_validate(user),
    )


@router.get("/preferences", response_model=Preferences)
async def get_preferences(current_user: CurrentUser, db: DbSession) -> Preferences:
    return await credentials.get_preferences(db, current_user.id)


@router.put("/preferences", response_model=PreferencesUpdateResponse)
async def update_preferences(
    data: PreferencesUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> PreferencesUpdateResponse:
    """Merge a partial update; `themes` is merged per mode."""
    preferences = await credentials.update_preferences(db, current_user.id, data)
    return PreferencesUpdateResponse(
        message="Preferences updated successfully",
        preferences=preferences,
    )


@router.get("/stats", response_model=UserStats)
async def get_stats(current_user: CurrentUser) -> UserStats:
    return UserStats.model_validate(current_user.stats)
