"""
Reviews Models - Product ratings
Tables: Reviews
"""
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from apps.core.models import BaseModel


class Review(BaseModel):
    """
    A 1-5 star review. Verified when the author received the product.
    """
    product = models.ForeignKey('catalog.Product', on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='reviews')
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, null=True)
    images = models.JSONField(default=list, blank=True)
    is_verified = models.BooleanField(default=False)

    class Meta:
        db_table = 'reviews_reviews'
        verbose_name = 'Review'
        verbose_name_plural = 'Reviews'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.rating}/5 for {self.product_id} by {self.user_id}"
