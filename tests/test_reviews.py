import pytest

from apps.core.exceptions import NotFoundException, ValidationException
from apps.orders.models import Order, OrderItem, OrderStatus
from apps.reviews.models import Review
from apps.reviews.services import ReviewService

REVIEWS_URL = '/api/reviews/'


def _delivered_order(user, address, product):
    order = Order.objects.create(
        order_number=f"ORD-1-{user.id.hex[:9].upper()}",
        user=user,
        address=address,
        status=OrderStatus.DELIVERED,
        payment_method="cod",
        subtotal=product.price,
        shipping_cost="50.00",
        tax="0.00",
        total=product.price,
    )
    OrderItem.objects.create(order=order, product=product, quantity=1, price=product.price)
    return order


@pytest.mark.django_db
class TestReviews:

    def test_rating_is_mean_of_all_reviews(self, customer, other_customer, admin_user, product):
        service = ReviewService()
        service.create_review(customer, product.id, 5)
        service.create_review(other_customer, product.id, 4)
        service.create_review(admin_user, product.id, 2)

        product.refresh_from_db()
        assert product.rating == pytest.approx(11 / 3)
        assert product.review_count == 3

    def test_submit_through_api(self, auth_client, product):
        response = auth_client.post(REVIEWS_URL, {
            "product_id": str(product.id),
            "rating": 4,
            "comment": "Fits well",
        })

        assert response.status_code == 201
        review = response.json()["data"]["review"]
        assert review["rating"] == 4
        assert review["user"]["first_name"] == "Jane"
        assert review["is_verified"] is False
        product.refresh_from_db()
        assert product.rating == 4.0
        assert product.review_count == 1

    def test_verified_after_delivery(self, customer, address, product):
        _delivered_order(customer, address, product)

        review = ReviewService().create_review(customer, product.id, 5)

        assert review.is_verified is True

    def test_undelivered_order_is_not_verified(self, customer, address, product):
        order = _delivered_order(customer, address, product)
        order.status = OrderStatus.SHIPPED
        order.save()

        assert ReviewService().create_review(customer, product.id, 3).is_verified is False

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, auth_client, customer, product, rating):
        response = auth_client.post(REVIEWS_URL, {"product_id": str(product.id), "rating": rating})

        assert response.status_code == 400
        with pytest.raises(ValidationException):
            ReviewService().create_review(customer, product.id, rating)
        assert not Review.objects.exists()

    def test_unknown_product(self, customer):
        with pytest.raises(NotFoundException):
            ReviewService().create_review(customer, "6f1c2d4e-8a9b-4c3d-9e8f-1a2b3c4d5e6f", 5)

    def test_requires_auth(self, api_client, product):
        response = api_client.post(REVIEWS_URL, {"product_id": str(product.id), "rating": 5})

        assert response.status_code == 401

    def test_list_product_reviews(self, api_client, customer, other_customer, product):
        ReviewService().create_review(customer, product.id, 5)
        ReviewService().create_review(other_customer, product.id, 3)

        response = api_client.get(f"{REVIEWS_URL}product/{product.id}/")

        body = response.json()
        assert response.status_code == 200
        assert body["pagination"]["total"] == 2
        assert {r["rating"] for r in body["data"]} == {3, 5}

    def test_product_detail_embeds_reviews(self, api_client, customer, product):
        ReviewService().create_review(customer, product.id, 5, comment="Lovely")

        response = api_client.get(f"/api/products/{product.id}/")

        reviews = response.json()["data"]["product"]["reviews"]
        assert [r["comment"] for r in reviews] == ["Lovely"]
