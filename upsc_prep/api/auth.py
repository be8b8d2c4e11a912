# upsc_prep/api/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..core.auth import IdentityProvider, get_bearer_token, get_identity_provider
from ..core.database import get_db
from ..core.utils import ResponseFormatter
from ..models.schemas import CallbackRequest, LoginRequest, RefreshRequest, SignupRequest
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_auth_service(provider: IdentityProvider = Depends(get_identity_provider)) -> AuthService:
    return AuthService(provider)


@router.post("/signup", status_code=201)
def signup(body: SignupRequest, db: Session = Depends(get_db),
           service: AuthService = Depends(get_auth_service)):
    """Create the provider account and its local mirror"""
    result = service.signup(db, body)
    return JSONResponse(status_code=201,
                        content=ResponseFormatter.success(result["data"], result["message"]))


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db),
          service: AuthService = Depends(get_auth_service)):
    return ResponseFormatter.success(service.login(db, body), "Login successful")


@router.post("/refresh")
def refresh(body: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    return ResponseFormatter.success(service.refresh(body.refresh_token))


@router.get("/google")
def google_auth(service: AuthService = Depends(get_auth_service)):
    """Google OAuth URL the frontend redirects to"""
    return ResponseFormatter.success(service.google_url())


@router.post("/callback")
def auth_callback(body: CallbackRequest, db: Session = Depends(get_db),
                  service: AuthService = Depends(get_auth_service)):
    return ResponseFormatter.success(service.callback(db, body))


@router.get("/me")
def get_me(token: Optional[str] = Depends(get_bearer_token), db: Session = Depends(get_db),
           service: AuthService = Depends(get_auth_service)):
    return ResponseFormatter.success(service.me(db, token))


@router.post("/logout")
def logout(token: Optional[str] = Depends(get_bearer_token),
           service: AuthService = Depends(get_auth_service)):
    service.logout(token)
    return ResponseFormatter.success(message="Logged out successfully")
