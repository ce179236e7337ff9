"""
Shared fixtures: API clients, accounts, catalog records and a fake payment gateway
"""
import uuid
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.accounts.models import Address, Role
from apps.accounts.services import AuthService
from apps.catalog.models import Category, Product
from apps.core.exceptions import PaymentGatewayException
from apps.orders.payments import PaymentGateway, PaymentIntent


class FakeGateway(PaymentGateway):
    """Records intents instead of calling a payment provider."""
    name = "fake"

    def __init__(self, fail=False, fail_cancel=False):
        self.fail = fail
        self.fail_cancel = fail_cancel
        self.calls = []
        self.cancelled = []

    def create_intent(self, amount, currency, metadata):
        self.calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        if self.fail:
            raise PaymentGatewayException("card declined", provider=self.name)
        return PaymentIntent(reference="pi_test_123", client_secret="pi_test_123_secret_abc")

    def cancel_intent(self, reference):
        if self.fail_cancel:
            raise PaymentGatewayException("gateway unavailable", provider=self.name)
        self.cancelled.append(reference)


@pytest.fixture
def api_client():
    return APIClient()


def _client_for(token):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def customer(db):
    user, token = AuthService().register(
        email="jane@example.com",
        password="s3cret-pass",
        first_name="Jane",
        last_name="Doe",
    )
    user.token = token
    return user


@pytest.fixture
def other_customer(db):
    user, token = AuthService().register(
        email="kim@example.com",
        password="another-pass",
        first_name="Kim",
        last_name="Lee",
    )
    user.token = token
    return user


@pytest.fixture
def admin_user(db):
    user, token = AuthService().register(
        email="admin@example.com",
        password="admin123456",
        first_name="Admin",
        last_name="User",
    )
    user.role = Role.ADMIN
    user.save(update_fields=['role'])
    # Role travels in the token, so issue a fresh one
    user.token = AuthService().login("admin@example.com", "admin123456")[1]
    return user


@pytest.fixture
def auth_client(customer):
    return _client_for(customer.token)


@pytest.fixture
def other_client(other_customer):
    return _client_for(other_customer.token)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user.token)


@pytest.fixture
def category(db):
    return Category.objects.create(name="Dresses", slug="dresses", description="All dresses")


@pytest.fixture
def make_product(category):
    def _make(name="Floral Dress", price="500.00", stock=10, **extra):
        slug = extra.pop('slug', f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}")
        return Product.objects.create(
            name=name,
            slug=slug,
            description=extra.pop('description', f"A lovely {name.lower()}"),
            price=Decimal(price),
            category=extra.pop('category', category),
            stock=stock,
            sku=extra.pop('sku', f"SKU-{uuid.uuid4().hex[:8].upper()}"),
            **extra,
        )
    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def make_address():
    def _make(user, **fields):
        address = Address(
            user=user,
            full_name=fields.pop('full_name', user.full_name),
            address_line1=fields.pop('address_line1', "12 MG Road"),
            city=fields.pop('city', "Bengaluru"),
            state=fields.pop('state', "Karnataka"),
            postal_code=fields.pop('postal_code', "560001"),
            phone=fields.pop('phone', "9876543210"),
            **fields,
        )
        address.save()
        return address
    return _make


@pytest.fixture
def address(customer, make_address):
    return make_address(customer, is_default=True)


@pytest.fixture
def fake_gateway():
    return FakeGateway()
