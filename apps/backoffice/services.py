"""
Backoffice service - store-wide counts and order/user administration for operators
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db.models import Count, Sum

from apps.accounts.models import Role, User
from apps.catalog.models import Product
from apps.core.exceptions import NotFoundException, ValidationException
from apps.core.utils import paginate
from apps.orders.models import Order, OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)

RECENT_ORDERS = 10


class BackofficeService:

    def _orders(self):
        return Order.objects.select_related('user').prefetch_related('items__product')

    def dashboard_stats(self) -> Dict[str, Any]:
        revenue = Order.objects.filter(payment_status=PaymentStatus.COMPLETED).aggregate(
            total=Sum('total')
        )['total']
        return {
            "stats": {
                "total_users": User.objects.filter(role=Role.CUSTOMER).count(),
                "total_orders": Order.objects.count(),
                "total_products": Product.objects.count(),
                "total_revenue": revenue or Decimal('0.00'),
            },
            "recent_orders": list(self._orders().order_by('-created_at')[:RECENT_ORDERS]),
        }

    def list_orders(self, page: int = 1, limit: int = 20, status: Optional[str] = None):
        queryset = self._orders().order_by('-created_at')
        if status:
            if status not in OrderStatus.values:
                raise ValidationException(f"Unknown order status '{status}'", field="status")
            queryset = queryset.filter(status=status)
        return paginate(queryset, page, limit)

    def update_order_status(
        self,
        order_id,
        status: Optional[str] = None,
        tracking_number: Optional[str] = None,
        estimated_delivery=None,
    ) -> Order:
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            raise NotFoundException("Order")

        changed = []
        if status:
            if status not in OrderStatus.values:
                raise ValidationException(f"Unknown order status '{status}'", field="status")
            order.status = status
            changed.append('status')
        if tracking_number:
            order.tracking_number = tracking_number
            changed.append('tracking_number')
        if estimated_delivery:
            order.estimated_delivery = estimated_delivery
            changed.append('estimated_delivery')

        if changed:
            order.save(update_fields=changed + ['updated_at'])
            logger.info(f"Order {order.order_number} updated: {changed}")
        return self._orders().get(pk=order.pk)

    def list_users(self, page: int = 1, limit: int = 20):
        queryset = User.objects.annotate(order_count=Count('orders')).order_by('-created_at')
        return paginate(queryset, page, limit)
