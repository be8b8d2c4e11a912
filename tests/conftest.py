# tests/conftest.py
import os

# Must be set before upsc_prep is imported: config reads the environment at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EVALUATION_DELAY_SECONDS"] = "0"
os.environ["GROQ_API_KEY"] = ""
os.environ["NODE_ENV"] = "test"
os.environ["SUPABASE_URL"] = "http://identity.test"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["SEED_SAMPLE_DATA"] = "false"

import uuid
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from upsc_prep.core.auth import (
    AuthResult, AuthSession, AuthUser, IdentityProviderError, get_identity_provider,
)
from upsc_prep.core.database import get_db_manager
from upsc_prep.main import app
from upsc_prep.services.content_seed import seed_daily_content


class FakeIdentityProvider:
    """In-process stand-in for the Supabase auth API"""

    def __init__(self, require_confirmation: bool = False):
        self.require_confirmation = require_confirmation
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.signed_out = []
        self.down = False

    def _check(self):
        if self.down:
            raise IdentityProviderError("connection refused")

    def _auth_user(self, account) -> AuthUser:
        return AuthUser(
            id=account["id"],
            email=account["email"],
            email_confirmed=account["confirmed"],
            user_metadata=dict(account["metadata"]),
        )

    def _issue(self, account) -> AuthSession:
        access, refresh = f"access-{uuid.uuid4().hex}", f"refresh-{uuid.uuid4().hex}"
        self.tokens[access] = account["id"]
        self.refresh_tokens[refresh] = account["id"]
        return AuthSession(access_token=access, refresh_token=refresh, expires_at=4102444800)

    def _by_id(self, account_id: str):
        return next(a for a in self.accounts.values() if a["id"] == account_id)

    def add_account(self, email: str, password: str = "secret123", metadata: Optional[dict] = None,
                    confirmed: bool = True) -> Dict[str, Any]:
        account = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": password,
            "metadata": metadata or {},
            "confirmed": confirmed,
        }
        self.accounts[email] = account
        return account

    def token_for(self, email: str) -> str:
        return self._issue(self.accounts[email]).access_token

    def sign_up(self, email, password, metadata):
        self._check()
        if email in self.accounts:
            raise IdentityProviderError("User already registered", 422)
        account = self.add_account(email, password, metadata, confirmed=not self.require_confirmation)
        session = None if self.require_confirmation else self._issue(account)
        return AuthResult(user=self._auth_user(account), session=session)

    def sign_in(self, email, password):
        self._check()
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise IdentityProviderError("Invalid login credentials", 400)
        return AuthResult(user=self._auth_user(account), session=self._issue(account))

    def get_user(self, access_token):
        self._check()
        account_id = self.tokens.get(access_token)
        if account_id is None:
            return None
        return self._auth_user(self._by_id(account_id))

    def refresh(self, refresh_token):
        self._check()
        account_id = self.refresh_tokens.pop(refresh_token, None)
        if account_id is None:
            return None
        return self._issue(self._by_id(account_id))

    def oauth_url(self, provider, redirect_to):
        return f"http://identity.test/authorize?provider={provider}&redirect_to={redirect_to}"

    def sign_out(self, access_token):
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)


@pytest.fixture
def provider():
    return FakeIdentityProvider()


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_identity_provider] = lambda: provider
    with TestClient(app) as test_client:
        manager = get_db_manager()
        manager.drop_tables()
        manager.create_tables()
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def db(client):
    session = get_db_manager().SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    """Today's sample MCQ set, mains question and editorials"""
    return seed_daily_content(db)


def signup(client, email="aspirant@example.com", password="secret123", **extra) -> Dict[str, Any]:
    body = {"email": email, "password": password, "firstName": "Asha", "lastName": "Rao", **extra}
    response = client.post("/api/auth/signup", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client):
    data = signup(client)
    return {"Authorization": f"Bearer {data['session']['accessToken']}"}


@pytest.fixture
def other_headers(client):
    data = signup(client, email="rival@example.com")
    return {"Authorization": f"Bearer {data['session']['accessToken']}"}


@pytest.fixture
def register(client):
    """Sign up another account; returns the signup payload"""
    def _register(email: str, **extra) -> Dict[str, Any]:
        return signup(client, email=email, **extra)
    return _register