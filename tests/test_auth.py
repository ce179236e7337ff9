from datetime import datetime, timedelta, timezone

import pytest
from django.conf import settings
from jose import jwt

from apps.accounts.models import User
from apps.accounts.services import AuthService
from apps.accounts.tokens import decode_token, generate_token
from apps.cart.models import Cart
from apps.core.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    ValidationException,
)

REGISTER_URL = '/api/auth/register/'
LOGIN_URL = '/api/auth/login/'


@pytest.mark.django_db
class TestRegister:

    def test_register_creates_user_cart_and_token(self, api_client):
        response = api_client.post(REGISTER_URL, {
            "email": "New.User@Example.com",
            "password": "long-enough",
            "first_name": "New",
            "last_name": "User",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["data"]["user"]["email"] == "new.user@example.com"
        assert body["data"]["user"]["role"] == "CUSTOMER"
        assert "password" not in body["data"]["user"]

        user = User.objects.get(email="new.user@example.com")
        assert user.password != "long-enough"
        assert Cart.objects.filter(user=user).exists()
        assert decode_token(body["data"]["token"])["id"] == str(user.id)

    def test_duplicate_email_is_rejected_without_new_row(self, api_client, customer):
        before = User.objects.count()

        response = api_client.post(REGISTER_URL, {
            "email": customer.email,
            "password": "long-enough",
            "first_name": "Again",
            "last_name": "User",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"
        assert User.objects.count() == before

    def test_short_password_fails_validation(self, api_client):
        response = api_client.post(REGISTER_URL, {
            "email": "short@example.com",
            "password": "short",
            "first_name": "S",
            "last_name": "P",
        })

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "error"
        assert body["code"] == "VALIDATION_ERROR"
        assert "password" in body["details"]
        assert not User.objects.filter(email="short@example.com").exists()

    def test_service_raises_conflict(self, customer):
        with pytest.raises(ConflictException):
            AuthService().register(customer.email, "whatever1", "A", "B")


@pytest.mark.django_db
class TestLogin:

    def test_login_returns_token(self, api_client, customer):
        response = api_client.post(LOGIN_URL, {"email": "JANE@example.com", "password": "s3cret-pass"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == str(customer.id)
        assert decode_token(data["token"])["email"] == customer.email

    @pytest.mark.parametrize("email,password", [
        ("jane@example.com", "wrong-pass"),
        ("nobody@example.com", "s3cret-pass"),
    ])
    def test_bad_credentials_share_one_message(self, api_client, customer, email, password):
        response = api_client.post(LOGIN_URL, {"email": email, "password": password})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_inactive_user_cannot_login(self, customer):
        customer.is_active = False
        customer.save()

        with pytest.raises(AuthenticationException):
            AuthService().login(customer.email, "s3cret-pass")


@pytest.mark.django_db
class TestTokens:

    def test_me_requires_token(self, api_client):
        response = api_client.get('/api/auth/me/')

        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_me_returns_current_user(self, auth_client, customer):
        response = auth_client.get('/api/auth/me/')

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == customer.email

    def test_garbage_token_is_rejected(self, api_client, customer):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")

        response = api_client.get('/api/auth/me/')

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_expired_token_is_rejected(self, api_client, customer):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode(
            {"id": str(customer.id), "iat": past - timedelta(days=1), "exp": past},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get('/api/auth/me/')

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_token_signed_with_other_secret_is_invalid(self, customer):
        token = jwt.encode({"id": str(customer.id)}, "some-other-secret", algorithm="HS256")

        with pytest.raises(AuthenticationException, match="Invalid token"):
            decode_token(token)

    def test_token_carries_role(self, admin_user):
        payload = decode_token(generate_token(admin_user))

        assert payload["role"] == "ADMIN"
        assert payload["email"] == admin_user.email


@pytest.mark.django_db
class TestPasswordReset:

    def test_forgot_password_echoes_token_only_in_debug(self, api_client, customer, settings):
        settings.DEBUG = True
        response = api_client.post('/api/auth/forgot-password/', {"email": customer.email})

        assert response.status_code == 200
        token = response.json()["data"]["reset_token"]
        customer.refresh_from_db()
        assert customer.reset_token == token
        assert customer.reset_token_expiry > datetime.now(timezone.utc)

        settings.DEBUG = False
        response = api_client.post('/api/auth/forgot-password/', {"email": customer.email})
        assert response.json()["data"] is None

    def test_unknown_email_is_not_found(self, db):
        with pytest.raises(NotFoundException):
            AuthService().request_password_reset("ghost@example.com")

    def test_reset_changes_password_and_clears_token(self, api_client, customer):
        token = AuthService().request_password_reset(customer.email)

        response = api_client.post('/api/auth/reset-password/', {
            "token": token,
            "new_password": "brand-new-pass",
        })

        assert response.status_code == 200
        customer.refresh_from_db()
        assert customer.reset_token is None
        assert customer.reset_token_expiry is None
        assert customer.check_password("brand-new-pass")

        # Tokens are single use
        response = api_client.post('/api/auth/reset-password/', {
            "token": token,
            "new_password": "another-pass",
        })
        assert response.status_code == 400

    def test_expired_token_is_rejected(self, customer):
        token = AuthService().request_password_reset(customer.email)
        User.objects.filter(pk=customer.pk).update(
            reset_token_expiry=datetime.now(timezone.utc) - timedelta(minutes=1)
        )

        with pytest.raises(ValidationException, match="Invalid or expired reset token"):
            AuthService().reset_password(token, "brand-new-pass")


@pytest.mark.django_db
class TestChangePassword:

    def test_change_password(self, auth_client, customer):
        response = auth_client.post('/api/auth/change-password/', {
            "current_password": "s3cret-pass",
            "new_password": "even-better-pass",
        })

        assert response.status_code == 200
        customer.refresh_from_db()
        assert customer.check_password("even-better-pass")

    def test_wrong_current_password(self, auth_client):
        response = auth_client.post('/api/auth/change-password/', {
            "current_password": "not-it",
            "new_password": "even-better-pass",
        })

        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"
