import pytest

from apps.accounts.models import Address
from apps.accounts.services import ProfileService
from apps.core.exceptions import NotFoundException
from apps.orders.models import Order

ADDRESSES_URL = '/api/users/addresses/'

ADDRESS_PAYLOAD = {
    "full_name": "Jane Doe",
    "address_line1": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postal_code": "560001",
    "phone": "9876543210",
}


@pytest.mark.django_db
class TestProfile:

    def test_get_profile(self, auth_client, customer):
        response = auth_client.get('/api/users/profile/')

        assert response.status_code == 200
        assert response.json()["data"]["user"]["first_name"] == "Jane"

    def test_update_profile_only_touches_given_fields(self, auth_client, customer):
        response = auth_client.put('/api/users/profile/', {"phone": "9000000000"})

        assert response.status_code == 200
        customer.refresh_from_db()
        assert customer.phone == "9000000000"
        assert customer.first_name == "Jane"

    def test_profile_requires_auth(self, api_client):
        assert api_client.get('/api/users/profile/').status_code == 401


@pytest.mark.django_db
class TestAddresses:

    def test_create_address_defaults_country(self, auth_client, customer):
        response = auth_client.post(ADDRESSES_URL, ADDRESS_PAYLOAD)

        assert response.status_code == 201
        address = response.json()["data"]["address"]
        assert address["country"] == "India"
        assert address["is_default"] is False
        assert Address.objects.filter(user=customer).count() == 1

    def test_only_one_default_per_user(self, auth_client, customer, make_address):
        first = make_address(customer, is_default=True)

        response = auth_client.post(ADDRESSES_URL, {**ADDRESS_PAYLOAD, "is_default": True})

        assert response.status_code == 201
        first.refresh_from_db()
        assert first.is_default is False
        assert Address.objects.filter(user=customer, is_default=True).count() == 1

    def test_default_listed_first(self, auth_client, customer, make_address):
        make_address(customer, city="Pune")
        default = make_address(customer, city="Mumbai", is_default=True)
        make_address(customer, city="Delhi")

        response = auth_client.get(ADDRESSES_URL)

        addresses = response.json()["data"]["addresses"]
        assert len(addresses) == 3
        assert addresses[0]["id"] == str(default.id)

    def test_update_address(self, auth_client, address):
        response = auth_client.put(f"{ADDRESSES_URL}{address.id}/", {"city": "Mysuru"})

        assert response.status_code == 200
        address.refresh_from_db()
        assert address.city == "Mysuru"
        assert address.postal_code == "560001"

    def test_other_users_address_is_not_found(self, other_client, address):
        assert other_client.put(f"{ADDRESSES_URL}{address.id}/", {"city": "X"}).status_code == 404
        assert other_client.delete(f"{ADDRESSES_URL}{address.id}/").status_code == 404
        assert Address.objects.filter(pk=address.pk).exists()

    def test_delete_address_keeps_orders(self, auth_client, customer, address):
        order = Order.objects.create(
            order_number="ORD-1-ABCDEFGHI",
            user=customer,
            address=address,
            payment_method="cod",
            subtotal="100.00",
            shipping_cost="50.00",
            tax="18.00",
            total="168.00",
        )

        response = auth_client.delete(f"{ADDRESSES_URL}{address.id}/")

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.address is None

    def test_service_get_address_checks_owner(self, other_customer, address):
        with pytest.raises(NotFoundException):
            ProfileService().get_address(other_customer, address.id)
