# tests/test_auth.py
from upsc_prep.core.models import User


def test_signup_creates_local_user_and_session(client, db):
    response = client.post("/api/auth/signup", json={
        "email": "New.User@Example.com",
        "password": "secret123",
        "firstName": "Meera",
        "lastName": "Iyer",
        "phone": "9999999999",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Account created successfully"
    assert body["data"]["user"]["email"] == "new.user@example.com"
    assert body["data"]["user"]["firstName"] == "Meera"
    assert body["data"]["session"]["accessToken"].startswith("access-")

    user = db.query(User).filter(User.email == "new.user@example.com").one()
    assert user.phone == "9999999999"
    assert user.email_verified is True


def test_signup_validation(client):
    missing = client.post("/api/auth/signup", json={"email": "a@b.com"})
    assert missing.status_code == 400
    assert missing.json() == {"status": "error", "message": "Email and password are required"}

    bad_email = client.post("/api/auth/signup", json={"email": "not-an-email", "password": "secret123"})
    assert bad_email.status_code == 400
    assert bad_email.json()["message"] == "Invalid email format"

    short = client.post("/api/auth/signup", json={"email": "a@b.com", "password": "123"})
    assert short.status_code == 400
    assert short.json()["message"] == "Password must be at least 6 characters"


def test_signup_conflict_on_existing_email(client, auth_headers):
    response = client.post("/api/auth/signup", json={"email": "ASPIRANT@example.com", "password": "secret123"})
    assert response.status_code == 409
    assert response.json()["message"] == "An account with this email already exists"


def test_signup_without_session_requires_verification(client, provider):
    provider.require_confirmation = True
    response = client.post("/api/auth/signup", json={"email": "pending@example.com", "password": "secret123"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["session"] is None
    assert data["requiresEmailVerification"] is True


def test_signup_provider_error_is_bad_request(client, provider):
    provider.add_account("taken@example.com")
    response = client.post("/api/auth/signup", json={"email": "taken@example.com", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["message"] == "User already registered"


def test_login_and_me(client, auth_headers):
    response = client.post("/api/auth/login", json={"email": "aspirant@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    token = body["data"]["session"]["accessToken"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    user = me.json()["data"]["user"]
    assert user["email"] == "aspirant@example.com"
    assert user["emailVerified"] is True
    assert "createdAt" in user


def test_login_rejects_bad_credentials(client, auth_headers):
    response = client.post("/api/auth/login", json={"email": "aspirant@example.com", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_creates_mirror_for_provider_only_account(client, db, provider):
    provider.add_account("oauth@example.com", metadata={"first_name": "Kiran", "last_name": "Das"})

    response = client.post("/api/auth/login", json={"email": "oauth@example.com", "password": "secret123"})

    assert response.status_code == 200
    user = db.query(User).filter(User.email == "oauth@example.com").one()
    assert user.first_name == "Kiran"


def test_me_errors(client, provider):
    assert client.get("/api/auth/me").status_code == 401
    invalid = client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Invalid or expired token"

    provider.add_account("ghost@example.com")
    token = provider.token_for("ghost@example.com")
    missing = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert missing.status_code == 404


def test_refresh(client, register):
    data = register("refresh@example.com")

    assert client.post("/api/auth/refresh", json={}).status_code == 400
    assert client.post("/api/auth/refresh", json={"refreshToken": "bogus"}).status_code == 401

    response = client.post("/api/auth/refresh", json={"refreshToken": data["session"]["refreshToken"]})
    assert response.status_code == 200
    assert response.json()["data"]["session"]["accessToken"].startswith("access-")


def test_google_url(client):
    response = client.get("/api/auth/google")
    assert response.status_code == 200
    assert "provider=google" in response.json()["data"]["url"]


def test_callback_creates_user_from_full_name(client, db, provider):
    provider.add_account("google@example.com", metadata={
        "full_name": "Ravi Kumar Singh",
        "picture": "http://img.test/ravi.png",
    })
    token = provider.token_for("google@example.com")

    response = client.post("/api/auth/callback", json={"accessToken": token, "refreshToken": "r1"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["firstName"] == "Ravi"
    assert data["user"]["lastName"] == "Kumar Singh"
    assert data["user"]["avatarUrl"] == "http://img.test/ravi.png"
    assert data["session"] == {"accessToken": token, "refreshToken": "r1"}
    assert db.query(User).filter(User.email == "google@example.com").count() == 1


def test_callback_rejects_unknown_token(client):
    assert client.post("/api/auth/callback", json={}).status_code == 400
    assert client.post("/api/auth/callback", json={"accessToken": "nope"}).status_code == 401


def test_logout_always_succeeds(client, auth_headers, provider):
    assert client.post("/api/auth/logout").json()["message"] == "Logged out successfully"

    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert provider.signed_out == [auth_headers["Authorization"].split(" ", 1)[1]]


def test_protected_route_requires_token(client):
    response = client.get("/api/user/dashboard")
    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "No token provided"}


def test_provider_outage_is_server_error(client, auth_headers, provider):
    provider.down = True
    response = client.get("/api/user/dashboard", headers=auth_headers)
    assert response.status_code == 500
    assert response.json()["message"] == "Authentication failed"


def test_token_without_local_user(client, provider):
    provider.add_account("orphan@example.com")
    token = provider.token_for("orphan@example.com")
    response = client.get("/api/user/streak", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"
