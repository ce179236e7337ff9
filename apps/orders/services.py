"""
Order service - checkout and order history

Checkout turns the caller's cart into an order inside a single database
transaction: product rows are locked, stock is decremented with a
conditional update, the cart is emptied and, for prepaid orders, a payment
intent is created. Any failure rolls the whole sequence back, and an intent
whose order does not commit is cancelled at the gateway.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import F

from apps.accounts.models import Address
from apps.cart.models import Cart, CartItem
from apps.catalog.models import Product
from apps.core.exceptions import (
    InsufficientStockException,
    NotFoundException,
    PaymentGatewayException,
    ValidationException,
)
from apps.core.utils import generate_order_number, paginate, to_money
from .models import Order, OrderItem, PaymentMethod
from .payments import PaymentGateway, PaymentIntent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    total: Decimal


@dataclass
class PlacedOrder:
    order: Order
    client_secret: Optional[str] = None


def calculate_totals(subtotal: Decimal) -> OrderTotals:
    """
    Shipping is free strictly above the threshold; tax is a flat rate on the subtotal.
    """
    rules = settings.STORE
    subtotal = to_money(subtotal)
    threshold = Decimal(str(rules['FREE_SHIPPING_THRESHOLD']))
    shipping_cost = Decimal('0.00') if subtotal > threshold else to_money(rules['FLAT_SHIPPING_FEE'])
    tax = to_money(subtotal * Decimal(str(rules['TAX_RATE'])))
    return OrderTotals(
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        tax=tax,
        total=subtotal + shipping_cost + tax,
    )


class OrderService:
    """
    Checkout and order lookup for one customer.

    The payment gateway and database alias are supplied by the caller.
    """

    def __init__(self, gateway: Optional[PaymentGateway] = None, using: str = DEFAULT_DB_ALIAS):
        self.gateway = gateway
        self.using = using

    def _orders(self):
        return (
            Order.objects.using(self.using)
            .select_related('address')
            .prefetch_related('items__product')
        )

    def place_order(self, user, address_id, payment_method: str) -> PlacedOrder:
        if payment_method not in PaymentMethod.values:
            raise ValidationException(
                f"'payment_method' must be one of: {', '.join(PaymentMethod.values)}",
                field="payment_method",
            )
        if payment_method == PaymentMethod.STRIPE and self.gateway is None:
            raise PaymentGatewayException("card payments are not configured")

        intent = None
        try:
            with transaction.atomic(using=self.using):
                cart = Cart.objects.using(self.using).filter(user=user).first()
                items = list(
                    CartItem.objects.using(self.using)
                    .filter(cart=cart)
                    .order_by('created_at', 'id')
                ) if cart else []
                if not items:
                    raise ValidationException("Cart is empty")

                address = Address.objects.using(self.using).filter(pk=address_id, user=user).first()
                if address is None:
                    raise NotFoundException("Address")

                # Lock in primary-key order so concurrent checkouts cannot deadlock
                product_ids = sorted({item.product_id for item in items}, key=str)
                products: Dict = {
                    product.pk: product
                    for product in Product.objects.using(self.using)
                    .select_for_update()
                    .filter(pk__in=product_ids)
                    .order_by('pk')
                }

                requested = defaultdict(int)
                subtotal = Decimal('0')
                for item in items:
                    product = products[item.product_id]
                    requested[product.pk] += item.quantity
                    if product.stock < requested[product.pk]:
                        logger.warning(
                            f"Checkout rejected for user {user.id}: {product.name} "
                            f"has {product.stock}, requested {requested[product.pk]}"
                        )
                        raise InsufficientStockException(product.name)
                    subtotal += product.price * item.quantity

                totals = calculate_totals(subtotal)
                order = Order.objects.using(self.using).create(
                    order_number=generate_order_number(),
                    user=user,
                    address=address,
                    payment_method=payment_method,
                    subtotal=totals.subtotal,
                    shipping_cost=totals.shipping_cost,
                    tax=totals.tax,
                    total=totals.total,
                )
                OrderItem.objects.using(self.using).bulk_create([
                    OrderItem(
                        order=order,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        size=item.size,
                        color=item.color,
                        price=products[item.product_id].price,
                        position=position,
                    )
                    for position, item in enumerate(items)
                ])

                for product_id, quantity in requested.items():
                    updated = (
                        Product.objects.using(self.using)
                        .filter(pk=product_id, stock__gte=quantity)
                        .update(stock=F('stock') - quantity)
                    )
                    if updated != 1:
                        logger.warning(
                            f"Stock for {products[product_id].name} changed during checkout "
                            f"by user {user.id}"
                        )
                        raise InsufficientStockException(products[product_id].name)

                CartItem.objects.using(self.using).filter(cart=cart).delete()

                # Created last so a gateway failure rolls the order back; an intent
                # whose order fails to commit is cancelled in the handler below.
                if payment_method == PaymentMethod.STRIPE:
                    intent = self.gateway.create_intent(
                        amount=totals.total,
                        currency=settings.STORE['CURRENCY'],
                        metadata={"order_number": order.order_number, "user_id": str(user.id)},
                    )
                    order.payment_reference = intent.reference
                    order.save(update_fields=['payment_reference', 'updated_at'])
        except Exception:
            if intent is not None:
                self._release_intent(intent)
            raise

        logger.info(
            f"Order {order.order_number} placed by user {user.id}: "
            f"{len(items)} lines, total {totals.total} ({payment_method})"
        )
        return PlacedOrder(
            order=self._orders().get(pk=order.pk),
            client_secret=intent.client_secret if intent else None,
        )

    def _release_intent(self, intent: PaymentIntent) -> None:
        """Cancel an intent whose order was rolled back."""
        logger.warning(f"Cancelling payment intent {intent.reference}: order was not saved")
        try:
            self.gateway.cancel_intent(intent.reference)
        except PaymentGatewayException as e:
            logger.error(f"Payment intent {intent.reference} left open: {e.message}")

    def list_orders(self, user, page: int = 1, limit: int = 10):
        queryset = self._orders().filter(user=user).order_by('-created_at')
        return paginate(queryset, page, limit)

    def get_order(self, user, order_id) -> Order:
        order = self._orders().filter(pk=order_id, user=user).first()
        if order is None:
            raise NotFoundException("Order")
        return order
