# upsc_prep/services/auth_service.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.auth import AuthUser, IdentityProvider, IdentityProviderError
from ..core.config import config
from ..core.errors import AppError, BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from ..core.models import User
from ..core.utils import ValidationUtils
from ..models.schemas import CallbackRequest, LoginRequest, SignupRequest

logger = logging.getLogger(__name__)


def user_summary(user: User, *fields: str) -> Dict[str, Any]:
    data = {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }
    full = user.to_dict()
    for name in fields:
        data[name] = full[name]
    return data


def names_from_metadata(metadata: Dict[str, Any]) -> tuple:
    """(first, last) from provider metadata, splitting ``full_name`` when needed"""
    parts = (metadata.get("full_name") or "").split()
    first = metadata.get("first_name") or (parts[0] if parts else None)
    last = metadata.get("last_name") or (" ".join(parts[1:]) if len(parts) > 1 else None)
    return first, last


class AuthService:
    """Signup, login and OAuth flows; the provider owns credentials"""

    def __init__(self, provider: IdentityProvider):
        self.provider = provider

    def _mirror(self, db: Session, auth_user: AuthUser, **overrides) -> User:
        """Local user row for a provider account, created on first sight"""
        user = db.query(User).filter(User.supabase_id == auth_user.id).first()
        if user is not None:
            return user

        first, last = names_from_metadata(auth_user.user_metadata)
        values = {
            "first_name": first,
            "last_name": last,
            "avatar_url": auth_user.user_metadata.get("avatar_url") or auth_user.user_metadata.get("picture"),
        }
        values.update(overrides)
        user = User(
            supabase_id=auth_user.id,
            email=(auth_user.email or "").lower(),
            email_verified=auth_user.email_confirmed,
            **values,
        )
        db.add(user)
        db.commit()
        logger.info(f"👤 Local user created for provider account {auth_user.id}")
        return user

    def signup(self, db: Session, request: SignupRequest) -> Dict[str, Any]:
        if not request.email or not request.password:
            raise BadRequestError("Email and password are required")
        if not ValidationUtils.is_valid_email(request.email):
            raise BadRequestError("Invalid email format")
        if len(request.password) < config.MIN_PASSWORD_LENGTH:
            raise BadRequestError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters")

        email = request.email.lower()
        if db.query(User).filter(User.email == email).first() is not None:
            raise ConflictError("An account with this email already exists")

        try:
            result = self.provider.sign_up(email, request.password, {
                "first_name": request.first_name,
                "last_name": request.last_name,
            })
        except IdentityProviderError as e:
            logger.error(f"Provider sign up error: {e}")
            raise BadRequestError(e.message)

        if result.user is None:
            raise AppError(500, "Failed to create user account")

        user = self._mirror(db, result.user, first_name=request.first_name, last_name=request.last_name,
                            phone=request.phone, avatar_url=None)

        if result.session is None:
            return {
                "message": "Account created successfully. Please check your email to verify your account.",
                "data": {
                    "user": user_summary(user),
                    "session": None,
                    "requiresEmailVerification": True,
                },
            }
        return {
            "message": "Account created successfully",
            "data": {"user": user_summary(user), "session": result.session.to_dict()},
        }

    def login(self, db: Session, request: LoginRequest) -> Dict[str, Any]:
        if not request.email or not request.password:
            raise BadRequestError("Email and password are required")

        try:
            result = self.provider.sign_in(request.email.lower(), request.password)
        except IdentityProviderError as e:
            logger.warning(f"Login error: {e}")
            raise UnauthorizedError("Invalid email or password")

        if result.user is None or result.session is None:
            raise UnauthorizedError("Invalid email or password")

        user = self._mirror(db, result.user, avatar_url=None)
        if result.user.email_confirmed and not user.email_verified:
            user.email_verified = True
            db.commit()

        return {
            "user": user_summary(user, "avatarUrl"),
            "session": result.session.to_dict(),
        }

    def refresh(self, refresh_token: Optional[str]) -> Dict[str, Any]:
        if not refresh_token:
            raise BadRequestError("Refresh token is required")
        try:
            session = self.provider.refresh(refresh_token)
        except IdentityProviderError as e:
            logger.warning(f"Refresh failed: {e}")
            session = None
        if session is None:
            raise UnauthorizedError("Invalid refresh token")
        return {"session": session.to_dict()}

    def google_url(self) -> Dict[str, Any]:
        try:
            url = self.provider.oauth_url("google", config.GOOGLE_REDIRECT_URL)
        except IdentityProviderError as e:
            raise BadRequestError(e.message)
        return {"url": url}

    def callback(self, db: Session, request: CallbackRequest) -> Dict[str, Any]:
        if not request.access_token:
            raise BadRequestError("Access token is required")

        try:
            auth_user = self.provider.get_user(request.access_token)
        except IdentityProviderError as e:
            logger.warning(f"OAuth callback verification failed: {e}")
            auth_user = None
        if auth_user is None:
            raise UnauthorizedError("Invalid token")

        user = self._mirror(db, auth_user)
        return {
            "user": user_summary(user, "avatarUrl"),
            "session": {"accessToken": request.access_token, "refreshToken": request.refresh_token},
        }

    def me(self, db: Session, token: Optional[str]) -> Dict[str, Any]:
        if not token:
            raise UnauthorizedError("No token provided")

        try:
            auth_user = self.provider.get_user(token)
        except IdentityProviderError as e:
            logger.warning(f"Token verification failed: {e}")
            auth_user = None
        if auth_user is None:
            raise UnauthorizedError("Invalid or expired token")

        user = db.query(User).filter(User.supabase_id == auth_user.id).first()
        if user is None:
            raise NotFoundError("User not found")

        return {"user": user_summary(user, "phone", "avatarUrl", "emailVerified", "createdAt")}

    def logout(self, token: Optional[str]):
        if not token:
            return
        try:
            self.provider.sign_out(token)
        except IdentityProviderError as e:
            logger.warning(f"Provider sign out failed: {e}")
