# upsc_prep/core/auth.py
"""
Bearer-token authentication against the external identity provider (Supabase).

The backend never sees passwords beyond forwarding them to the provider; it
verifies access tokens and keeps a minimal local mirror of each user.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from supabase import Client, create_client

from .config import config
from .database import get_db
from .errors import AppError, UnauthorizedError
from .models import User

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Provider rejected a request, or could not be reached"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_rejection(self) -> bool:
        return self.status is not None and 400 <= self.status < 500


@dataclass
class AuthUser:
    id: str
    email: Optional[str]
    email_confirmed: bool = False
    user_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    expires_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "expiresAt": self.expires_at,
        }


@dataclass
class AuthResult:
    user: Optional[AuthUser]
    session: Optional[AuthSession]


class IdentityProvider:
    """Thin wrapper over the Supabase auth API"""

    def __init__(self, url: str = None, anon_key: str = None, service_key: str = None):
        self.url = url if url is not None else config.SUPABASE_URL
        self.anon_key = anon_key if anon_key is not None else config.SUPABASE_ANON_KEY
        self.service_key = service_key if service_key is not None else config.SUPABASE_SERVICE_ROLE_KEY
        self._client: Optional[Client] = None
        self._admin_client: Optional[Client] = None

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def client(self) -> Client:
        if not self.configured:
            raise IdentityProviderError("Identity provider is not configured")
        if self._client is None:
            self._client = create_client(self.url, self.anon_key)
            logger.info("✅ Supabase client initialized")
        return self._client

    @property
    def admin_client(self) -> Optional[Client]:
        if not (self.configured and self.service_key):
            return None
        if self._admin_client is None:
            self._admin_client = create_client(self.url, self.service_key)
        return self._admin_client

    # ---------- conversions ----------

    @staticmethod
    def _to_user(raw) -> Optional[AuthUser]:
        if raw is None:
            return None
        return AuthUser(
            id=str(raw.id),
            email=raw.email,
            email_confirmed=bool(getattr(raw, "email_confirmed_at", None)),
            user_metadata=dict(getattr(raw, "user_metadata", None) or {}),
        )

    @staticmethod
    def _to_session(raw) -> Optional[AuthSession]:
        if raw is None:
            return None
        return AuthSession(
            access_token=raw.access_token,
            refresh_token=raw.refresh_token,
            expires_at=getattr(raw, "expires_at", None),
        )

    def _call(self, operation: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except IdentityProviderError:
            raise
        except Exception as e:
            status = getattr(e, "status", None)
            logger.warning(f"Identity provider {operation} failed: {e}")
            raise IdentityProviderError(str(e) or f"{operation} failed",
                                        status if isinstance(status, int) else None) from e

    # ---------- operations ----------

    def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> AuthResult:
        response = self._call("sign_up", self.client.auth.sign_up, {
            "email": email,
            "password": password,
            "options": {"data": metadata},
        })
        return AuthResult(user=self._to_user(response.user), session=self._to_session(response.session))

    def sign_in(self, email: str, password: str) -> AuthResult:
        response = self._call("sign_in", self.client.auth.sign_in_with_password,
                              {"email": email, "password": password})
        return AuthResult(user=self._to_user(response.user), session=self._to_session(response.session))

    def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve an access token; None when the provider rejects it"""
        try:
            response = self._call("get_user", self.client.auth.get_user, access_token)
        except IdentityProviderError as e:
            if e.is_rejection:
                return None
            raise
        return self._to_user(response.user if response else None)

    def refresh(self, refresh_token: str) -> Optional[AuthSession]:
        try:
            response = self._call("refresh", self.client.auth.refresh_session, refresh_token)
        except IdentityProviderError as e:
            if e.is_rejection:
                return None
            raise
        return self._to_session(response.session if response else None)

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        response = self._call("oauth", self.client.auth.sign_in_with_oauth, {
            "provider": provider,
            "options": {"redirect_to": redirect_to},
        })
        return response.url

    def sign_out(self, access_token: str):
        admin = self.admin_client
        if admin is None:
            logger.info("No service role key; skipping provider-side sign out")
            return
        self._call("sign_out", admin.auth.admin.sign_out, access_token)


# Singleton pattern for identity provider
_identity_provider = None


def get_identity_provider() -> IdentityProvider:
    """Get identity provider instance (singleton)"""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = IdentityProvider()
    return _identity_provider


_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[str]:
    if not credentials or not credentials.credentials:
        return None
    return credentials.credentials


def authenticate(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> User:
    """Dependency: resolves the bearer token to the local user or raises 401"""
    if not token:
        raise UnauthorizedError("No token provided")

    try:
        auth_user = provider.get_user(token)
    except IdentityProviderError as e:
        logger.error(f"Auth middleware error: {e}")
        raise AppError(500, "Authentication failed")

    if auth_user is None:
        raise UnauthorizedError("Invalid or expired token")

    user = db.query(User).filter(User.supabase_id == auth_user.id).first()
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def optional_auth(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Optional[User]:
    """Dependency: like ``authenticate`` but yields None instead of failing"""
    if not token:
        return None
    try:
        auth_user = provider.get_user(token)
    except IdentityProviderError as e:
        logger.warning(f"Optional auth skipped: {e}")
        return None
    if auth_user is None:
        return None
    return db.query(User).filter(User.supabase_id == auth_user.id).first()
