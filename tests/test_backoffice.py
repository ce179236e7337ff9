from decimal import Decimal

import pytest

from apps.backoffice.services import BackofficeService
from apps.cart.services import CartService
from apps.core.exceptions import NotFoundException, ValidationException
from apps.orders.models import Order, OrderStatus, PaymentStatus
from apps.orders.services import OrderService


@pytest.fixture
def orders(customer, address, make_product):
    placed = []
    for price in ("500.00", "200.00"):
        CartService().add_item(customer, make_product(price=price).id, 2)
        placed.append(OrderService().place_order(customer, address.id, "cod").order)
    return placed


@pytest.mark.django_db
class TestBackofficeAccess:

    @pytest.mark.parametrize("method,url", [
        ("get", "/api/admin/dashboard/"),
        ("get", "/api/admin/orders/"),
        ("get", "/api/admin/users/"),
    ])
    def test_customers_are_forbidden(self, auth_client, method, url):
        response = getattr(auth_client, method)(url)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"
        assert response.json()["message"] == "You do not have permission to perform this action"

    def test_anonymous_is_unauthenticated(self, api_client):
        assert api_client.get("/api/admin/dashboard/").status_code == 401

    def test_customer_cannot_change_status(self, auth_client, orders):
        response = auth_client.put(f"/api/admin/orders/{orders[0].id}/status/", {"status": "SHIPPED"})

        assert response.status_code == 403
        orders[0].refresh_from_db()
        assert orders[0].status == OrderStatus.PENDING


@pytest.mark.django_db
class TestDashboard:

    def test_revenue_counts_completed_payments_only(self, admin_client, orders, product):
        Order.objects.filter(pk=orders[0].pk).update(payment_status=PaymentStatus.COMPLETED)

        response = admin_client.get("/api/admin/dashboard/")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["stats"]["total_users"] == 1
        assert data["stats"]["total_orders"] == 2
        assert data["stats"]["total_products"] == 3
        assert data["stats"]["total_revenue"] == "1180.00"
        assert len(data["recent_orders"]) == 2

    def test_no_revenue_is_zero(self, admin_user):
        stats = BackofficeService().dashboard_stats()["stats"]

        assert stats["total_revenue"] == Decimal("0.00")
        assert stats["total_users"] == 0


@pytest.mark.django_db
class TestOrderAdministration:

    def test_list_and_filter_by_status(self, admin_client, orders):
        Order.objects.filter(pk=orders[1].pk).update(status=OrderStatus.SHIPPED)

        everything = admin_client.get("/api/admin/orders/").json()
        shipped = admin_client.get("/api/admin/orders/", {"status": "SHIPPED"}).json()

        assert everything["pagination"]["total"] == 2
        assert everything["pagination"]["limit"] == 20
        assert [o["id"] for o in shipped["data"]] == [str(orders[1].id)]
        assert shipped["data"][0]["user"]["email"] == "jane@example.com"

    def test_unknown_status_filter(self, admin_client):
        assert admin_client.get("/api/admin/orders/", {"status": "LOST"}).status_code == 400

        with pytest.raises(ValidationException):
            BackofficeService().list_orders(status="LOST")

    def test_update_status_and_tracking(self, admin_client, orders):
        response = admin_client.put(f"/api/admin/orders/{orders[0].id}/status/", {
            "status": "SHIPPED",
            "tracking_number": "TRK123",
        })

        assert response.status_code == 200
        order = response.json()["data"]["order"]
        assert order["status"] == "SHIPPED"
        assert order["tracking_number"] == "TRK123"

    def test_update_unknown_order(self, db):
        with pytest.raises(NotFoundException):
            BackofficeService().update_order_status("6f1c2d4e-8a9b-4c3d-9e8f-1a2b3c4d5e6f", status="SHIPPED")


@pytest.mark.django_db
class TestUserAdministration:

    def test_list_users_with_order_counts(self, admin_client, customer, orders):
        response = admin_client.get("/api/admin/users/")

        assert response.status_code == 200
        users = {u["email"]: u for u in response.json()["data"]}
        assert users["jane@example.com"]["order_count"] == 2
        assert users["admin@example.com"]["order_count"] == 0
