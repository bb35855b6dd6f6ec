"""
Credential service: registration, password login and profile management.

Registration leaves an account registered but unauthenticated; a session
token is only issued by a separate login (see api/routes/users.py, which
signs the token once `authenticate` succeeds).
"""

import base64
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from adaptive_chat.config import get_settings
from adaptive_chat.db.models import User, default_preferences
from adaptive_chat.errors import AuthError, ConflictError, NotFoundError, ValidationError
from adaptive_chat.schemas.user import Preferences, PreferencesUpdate, UserUpdate
from adaptive_chat.services import personas

logger = logging.getLogger(__name__)
settings = get_settings()

_HASH_SCHEME = "pbkdf2_sha256"
INVALID_CREDENTIALS = "Invalid credentials"


# =============================================================================
# PASSWORD HASHING
# =============================================================================


def hash_password(password: str, *, iterations: int | None = None) -> str:
    """Hash a password with PBKDF2-HMAC-SHA256 and a random 16-byte salt."""
    iterations = iterations or settings.password_hash_iterations
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "$".join([
        _HASH_SCHEME,
        str(iterations),
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    ])


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a stored hash in constant time."""
    try:
        scheme, iterations, salt_b64, digest_b64 = hashed.split("$")
        if scheme != _HASH_SCHEME:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
        candidate = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(candidate, expected)


def normalize_email(email: str) -> str:
    return email.strip().lower()


# =============================================================================
# LOOKUPS
# =============================================================================


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    """Fetch a user by id. Raises NotFoundError if the account no longer exists."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


# =============================================================================
# OPERATIONS
# =============================================================================


async def register(db: AsyncSession, name: str | None, email: str | None, password: str | None) -> User:
    """
    Create an account with default preferences and stats.

    Raises:
        ValidationError: a field is missing or blank.
        ConflictError: the email is already registered.
    """
    if not name or not name.strip() or not email or not password:
        raise ValidationError("All fields are required")

    if await get_user_by_email(db, email) is not None:
        raise ConflictError("User already exists")

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        preferences=default_preferences(),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same email
        await db.rollback()
        raise ConflictError("User already exists") from e

    logger.info("Registered user %s", user.id)
    return user


def _advance_streak(user: User, now: datetime) -> None:
    """Daily streak: unchanged on the same day, +1 on the next day, otherwise restart at 1."""
    gap = (now.date() - user.last_active.date()).days
    if user.streak_days <= 0 or gap > 1:
        user.streak_days = 1
    elif gap == 1:
        user.streak_days += 1


async def authenticate(db: AsyncSession, email: str | None, password: str | None) -> User:
    """
    Verify email/password and record the visit.

    Unknown email and wrong password raise the same AuthError so callers
    cannot probe which accounts exist.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthError(INVALID_CREDENTIALS, status_code=400)

    now = datetime.now(timezone.utc)
    _advance_streak(user, now)
    user.last_active = now
    await db.commit()

    return user


async def update_profile(db: AsyncSession, user_id: UUID, changes: UserUpdate) -> User:
    """Partial profile update; omitted fields keep their value."""
    user = await get_user(db, user_id)

    if changes.name:
        user.name = changes.name
    if changes.email:
        email = normalize_email(changes.email)
        if email != user.email:
            existing = await get_user_by_email(db, email)
            if existing is not None:
                raise ConflictError("Email already in use")
            user.email = email
    if changes.profile_picture is not None:
        user.profile_picture = changes.profile_picture

    user.updated_at = datetime.now(timezone.utc)
    await db.commit()
    return user


async def get_preferences(db: AsyncSession, user_id: UUID) -> Preferences:
    user = await get_user(db, user_id)
    return Preferences.model_validate(user.preferences)


async def update_preferences(db: AsyncSession, user_id: UUID, changes: PreferencesUpdate) -> Preferences:
    """
    Merge a partial preferences update into the stored preferences.

    Top-level keys that are omitted are preserved. The `themes` map is
    merged per mode, so setting one mode's theme never resets the others.
    """
    user = await get_user(db, user_id)
    current = Preferences.model_validate(user.preferences).model_dump(mode="json")
    update = changes.model_dump(mode="json", exclude_none=True)

    themes = update.pop("themes", None)
    if themes:
        for mode_name, theme_name in themes.items():
            mode = await personas.find_mode(db, mode_name)
            if mode is not None and theme_name not in {t["name"] for t in mode.themes}:
                raise ValidationError(f"Unknown theme '{theme_name}' for mode '{mode_name}'")
        current["themes"] = {**current["themes"], **themes}

    merged = Preferences.model_validate({**current, **update})
    user.preferences = merged.model_dump(mode="json")
    user.updated_at = datetime.now(timezone.utc)
    await db.commit()

    return merged
