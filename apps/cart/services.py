"""
Cart service - per-user cart and line-item mutations
"""
import logging
from typing import Optional

from django.db import transaction

from apps.catalog.models import Product
from apps.core.exceptions import InsufficientStockException, NotFoundException, ValidationException
from .models import Cart, CartItem

logger = logging.getLogger(__name__)


class CartService:
    """
    All operations are scoped to the calling user's cart.
    """

    def get_cart(self, user) -> Cart:
        cart, created = Cart.objects.get_or_create(user=user)
        if created:
            logger.info(f"Created missing cart for user {user.id}")
        return Cart.objects.prefetch_related('items__product').get(pk=cart.pk)

    def add_item(
        self,
        user,
        product_id,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CartItem:
        if quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")

        product = Product.objects.filter(pk=product_id, is_active=True).first()
        if product is None:
            raise NotFoundException("Product")

        with transaction.atomic():
            cart, _ = Cart.objects.get_or_create(user=user)
            item = (
                CartItem.objects.select_for_update()
                .filter(cart=cart, product=product, size=size or '', color=color or '')
                .first()
            )
            new_quantity = quantity + (item.quantity if item else 0)
            if product.stock < new_quantity:
                raise InsufficientStockException()

            if item:
                item.quantity = new_quantity
                item.save(update_fields=['quantity', 'updated_at'])
            else:
                item = CartItem.objects.create(
                    cart=cart,
                    product=product,
                    quantity=quantity,
                    size=size or '',
                    color=color or '',
                )

        logger.info(f"Cart {cart.id}: {product.id} x{item.quantity}")
        return item

    def _owned_item(self, user, item_id) -> CartItem:
        item = CartItem.objects.select_related('product').filter(pk=item_id, cart__user=user).first()
        if item is None:
            raise NotFoundException("Cart item")
        return item

    def update_item(self, user, item_id, quantity: int) -> CartItem:
        if quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")

        item = self._owned_item(user, item_id)
        if item.product.stock < quantity:
            raise InsufficientStockException()

        item.quantity = quantity
        item.save(update_fields=['quantity', 'updated_at'])
        return item

    def remove_item(self, user, item_id) -> None:
        item = self._owned_item(user, item_id)
        item.delete()

    def clear(self, user) -> int:
        cart = Cart.objects.filter(user=user).first()
        if cart is None:
            raise NotFoundException("Cart")
        deleted, _ = CartItem.objects.filter(cart=cart).delete()
        logger.info(f"Cart {cart.id} cleared ({deleted} lines)")
        return deleted
