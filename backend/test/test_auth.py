"""
Tests for Authentication
"""

from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

from flexispace.config import settings
from flexispace.models.user import User, UserType
from flexispace.utils.auth import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from test_utils import TEST_PASSWORD, TestDataGenerator, create_user, make_token


class TestAuthRoutes:
    """Test authentication endpoints"""

    def test_login_success(self, client: TestClient, guest_user: User):
        """Test successful login"""
        login_data = {"email": guest_user.email, "password": TEST_PASSWORD}

        response = client.post("/api/auth/login", json=login_data)
        assert response.status_code == 200

        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["email"] == guest_user.email
        assert settings.ACCESS_TOKEN_COOKIE in response.cookies

    def test_login_wrong_password(self, client: TestClient, guest_user: User, db: Session):
        """Test login with wrong password"""
        login_data = {"email": guest_user.email, "password": "wrongpassword"}

        response = client.post("/api/auth/login", json=login_data)
        assert response.status_code == 401

        db.refresh(guest_user)
        assert guest_user.failed_login_attempts == 1

    def test_login_nonexistent_user(self, client: TestClient):
        """Test login with non-existent email"""
        login_data = {"email": "nonexistent@example.com", "password": "somepassword"}

        response = client.post("/api/auth/login", json=login_data)
        assert response.status_code == 401
        assert "detail" in response.json()

    def test_login_locks_account_after_failures(self, client: TestClient, guest_user: User, db: Session):
        """Five wrong passwords lock the account"""
        for _ in range(4):
            response = client.post("/api/auth/login", json={"email": guest_user.email, "password": "nope"})
            assert response.status_code == 401

        response = client.post("/api/auth/login", json={"email": guest_user.email, "password": "nope"})
        assert response.status_code == 403

        db.refresh(guest_user)
        assert guest_user.locked_until > datetime.utcnow()

        # Correct password is refused while locked
        response = client.post("/api/auth/login", json={"email": guest_user.email, "password": TEST_PASSWORD})
        assert response.status_code == 403

    def test_expired_lock_restarts_failure_count(self, client: TestClient, guest_user: User, db: Session):
        guest_user.failed_login_attempts = 5
        guest_user.locked_until = datetime.utcnow() - timedelta(minutes=1)
        db.commit()

        response = client.post("/api/auth/login", json={"email": guest_user.email, "password": "nope"})
        assert response.status_code == 401

        db.refresh(guest_user)
        assert guest_user.failed_login_attempts == 1
        assert guest_user.locked_until is None

    def test_login_resets_failed_attempts(self, client: TestClient, guest_user: User, db: Session):
        guest_user.failed_login_attempts = 3
        db.commit()

        response = client.post("/api/auth/login", json={"email": guest_user.email, "password": TEST_PASSWORD})
        assert response.status_code == 200

        db.refresh(guest_user)
        assert guest_user.failed_login_attempts == 0
        assert guest_user.last_login is not None

    def test_login_inactive_user(self, client: TestClient, db: Session):
        user = create_user(db, "inactive@example.com", "Ina Active")
        user.is_active = False
        db.commit()

        response = client.post("/api/auth/login", json={"email": user.email, "password": TEST_PASSWORD})
        assert response.status_code == 403

    def test_get_current_user(self, client: TestClient, guest_headers: dict, guest_user: User):
        """Test getting current user info"""
        response = client.get("/api/auth/me", headers=guest_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == str(guest_user.id)
        assert data["name"] == guest_user.name
        assert data["user_type"] == "GUEST"
        assert "hashed_password" not in data

    def test_get_current_user_unauthorized(self, client: TestClient):
        """Test getting current user without token"""
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_get_current_user_invalid_token(self, client: TestClient):
        """Test getting current user with invalid token"""
        headers = {"Authorization": "Bearer invalid_token"}
        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    def test_get_current_user_from_cookie(self, client: TestClient, guest_user: User):
        client.cookies.set(settings.ACCESS_TOKEN_COOKIE, make_token(guest_user))
        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["email"] == guest_user.email

    def test_update_current_user(self, client: TestClient, guest_headers: dict):
        response = client.put(
            "/api/auth/me",
            json={"name": "Grace Updated", "company_name": "Acme"},
            headers=guest_headers,
        )
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Grace Updated"
        assert data["company_name"] == "Acme"

    def test_update_email_taken(self, client: TestClient, guest_headers: dict, other_user: User):
        response = client.put("/api/auth/me", json={"email": other_user.email}, headers=guest_headers)
        assert response.status_code == 400

    def test_change_password(self, client: TestClient, guest_headers: dict, guest_user: User, db: Session):
        response = client.post(
            "/api/auth/change-password",
            json={"old_password": TEST_PASSWORD, "new_password": "NewPassword9"},
            headers=guest_headers,
        )
        assert response.status_code == 200

        db.refresh(guest_user)
        assert verify_password("NewPassword9", guest_user.hashed_password)

    def test_change_password_wrong_old(self, client: TestClient, guest_headers: dict):
        response = client.post(
            "/api/auth/change-password",
            json={"old_password": "wrong", "new_password": "NewPassword9"},
            headers=guest_headers,
        )
        assert response.status_code == 400

    def test_refresh_token(self, client: TestClient, guest_user: User):
        response = client.post("/api/auth/refresh", json={"refresh_token": make_token(guest_user, "refresh")})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_refresh_rejects_access_token(self, client: TestClient, guest_user: User):
        response = client.post("/api/auth/refresh", json={"refresh_token": make_token(guest_user, "access")})
        assert response.status_code == 401

    def test_logout(self, client: TestClient, guest_headers: dict):
        response = client.post("/api/auth/logout", headers=guest_headers)
        assert response.status_code == 200


class TestUserRegistration:
    """Test user registration"""

    def test_register_new_user(self, client: TestClient):
        user_data = TestDataGenerator.generate_user_data()

        response = client.post("/api/auth/register", json=user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["email"] == user_data["email"]
        assert data["user_type"] == "GUEST"
        assert data["is_active"] is True

    def test_register_as_provider(self, client: TestClient):
        user_data = TestDataGenerator.generate_user_data({"user_type": "PROVIDER"})

        response = client.post("/api/auth/register", json=user_data)
        assert response.status_code == 201
        assert response.json()["user_type"] == "PROVIDER"

    def test_register_as_admin_refused(self, client: TestClient):
        user_data = TestDataGenerator.generate_user_data({"user_type": "ADMIN"})

        response = client.post("/api/auth/register", json=user_data)
        assert response.status_code == 400

    def test_register_duplicate_email(self, client: TestClient, guest_user: User):
        user_data = TestDataGenerator.generate_user_data({"email": guest_user.email})

        response = client.post("/api/auth/register", json=user_data)
        assert response.status_code == 400
        assert "already registered" in response.json()["detail"]

    def test_register_invalid_email(self, client: TestClient):
        user_data = TestDataGenerator.generate_user_data({"email": "not-an-email"})

        response = client.post("/api/auth/register", json=user_data)
        assert response.status_code == 422

    @pytest.mark.parametrize("password", ["short1A", "nodigitsHere", "nouppercase1"])
    def test_register_weak_password(self, client: TestClient, password: str):
        user_data = TestDataGenerator.generate_user_data({"password": password})

        response = client.post("/api/auth/register", json=user_data)
        assert response.status_code == 422


class TestTokenValidation:
    """Test token helpers and validation"""

    def test_password_hashing(self):
        hashed = get_password_hash("Secret123")
        assert hashed != "Secret123"
        assert verify_password("Secret123", hashed)
        assert not verify_password("Secret124", hashed)

    def test_access_token_round_trip(self, guest_user: User):
        token = create_access_token({"sub": str(guest_user.id)})
        assert decode_access_token(token) == guest_user.id

    def test_refresh_token_type(self, guest_user: User):
        token = create_refresh_token({"sub": str(guest_user.id)})
        assert decode_access_token(token, expected_type="refresh") == guest_user.id

        with pytest.raises(HTTPException) as exc:
            decode_access_token(token)
        assert exc.value.status_code == 401

    def test_expired_token(self, client: TestClient, guest_user: User):
        token = make_token(guest_user, expires_in=timedelta(minutes=-5))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_missing_user_id(self, client: TestClient):
        token = jwt.encode({"exp": datetime.utcnow() + timedelta(minutes=5)}, settings.SECRET_KEY, algorithm="HS256")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_invalid_signature(self, client: TestClient, guest_user: User):
        token = jwt.encode(
            {"sub": str(guest_user.id), "exp": datetime.utcnow() + timedelta(minutes=5)},
            "another-secret",
            algorithm="HS256",
        )
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_locked_user_rejected(self, client: TestClient, guest_user: User, guest_headers: dict, db: Session):
        guest_user.locked_until = datetime.utcnow() + timedelta(minutes=10)
        db.commit()

        response = client.get("/api/auth/me", headers=guest_headers)
        assert response.status_code == 403

    def test_admin_only_endpoint(self, client: TestClient, guest_headers: dict, admin_headers: dict):
        assert client.get("/api/dashboard/admin/stats", headers=guest_headers).status_code == 403
        assert client.get("/api/dashboard/admin/stats", headers=admin_headers).status_code == 200

    def test_user_properties(self, db: Session):
        provider = create_user(db, "p@example.com", "P", user_type=UserType.PROVIDER)
        admin = create_user(db, "a@example.com", "A", user_type=UserType.ADMIN)

        assert provider.is_provider and not provider.is_admin
        assert admin.is_provider and admin.is_admin
