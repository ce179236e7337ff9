"""
Cart Models - one cart per user, one line per (product, size, color)
Tables: Carts, CartItems
"""
from decimal import Decimal

from django.db import models
from apps.core.models import BaseModel


class Cart(BaseModel):
    """
    Shopping cart. Created at registration and emptied, never deleted, at checkout.
    """
    user = models.OneToOneField('accounts.User', on_delete=models.CASCADE, related_name='cart')

    class Meta:
        db_table = 'cart_carts'
        verbose_name = 'Cart'
        verbose_name_plural = 'Carts'

    def __str__(self):
        return f"Cart {self.id} - {self.user_id}"


class CartItem(BaseModel):
    """
    A cart line. Size and color are stored as '' when not chosen so the
    uniqueness constraint also covers lines without them.
    """
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.CASCADE, related_name='cart_items')
    quantity = models.PositiveIntegerField(default=1)
    size = models.CharField(max_length=50, blank=True, default='')
    color = models.CharField(max_length=50, blank=True, default='')

    class Meta:
        db_table = 'cart_items'
        verbose_name = 'Cart Item'
        verbose_name_plural = 'Cart Items'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['cart', 'product', 'size', 'color'],
                name='unique_cart_line',
            ),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_id}"

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity
