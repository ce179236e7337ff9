"""
Review service - submission and product rating aggregation
"""
import logging
from typing import List, Optional

from django.db import transaction
from django.db.models import Avg, Count

from apps.catalog.models import Product
from apps.core.exceptions import NotFoundException, ValidationException
from apps.core.utils import paginate
from apps.orders.models import Order, OrderStatus
from .models import Review

logger = logging.getLogger(__name__)


class ReviewService:

    def create_review(
        self,
        user,
        product_id,
        rating: int,
        comment: Optional[str] = None,
        images: Optional[List[str]] = None,
    ) -> Review:
        if not 1 <= int(rating) <= 5:
            raise ValidationException("Rating must be between 1 and 5", field="rating")

        with transaction.atomic():
            product = Product.objects.select_for_update().filter(pk=product_id).first()
            if product is None:
                raise NotFoundException("Product")

            purchased = Order.objects.filter(
                user=user,
                status=OrderStatus.DELIVERED,
                items__product=product,
            ).exists()

            review = Review.objects.create(
                user=user,
                product=product,
                rating=int(rating),
                comment=comment,
                images=images or [],
                is_verified=purchased,
            )
            self.refresh_product_rating(product)

        logger.info(f"Review {review.id} ({review.rating}/5) on product {product.id}")
        return review

    def refresh_product_rating(self, product: Product) -> Product:
        """Recompute rating and review_count from every review of the product."""
        stats = Review.objects.filter(product=product).aggregate(
            average=Avg('rating'), count=Count('id')
        )
        product.rating = float(stats['average'] or 0)
        product.review_count = stats['count']
        product.save(update_fields=['rating', 'review_count', 'updated_at'])
        return product

    def list_product_reviews(self, product_id, page: int = 1, limit: int = 10):
        queryset = (
            Review.objects.filter(product_id=product_id)
            .select_related('user')
            .order_by('-created_at')
        )
        return paginate(queryset, page, limit)
