"""
Catalog service - category browsing, product search and product administration
"""
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Count, Prefetch, Q

from apps.core.exceptions import NotFoundException, ValidationException
from apps.core.utils import paginate, truncate_for_display
from .models import Category, Product

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ('created_at', 'price', 'name', 'rating')
PRODUCT_FIELDS = (
    'name', 'slug', 'description', 'price', 'compare_price', 'category',
    'stock', 'sku', 'images', 'sizes', 'colors', 'tags', 'is_featured', 'is_active',
)
RECENT_REVIEWS = 10
CATEGORY_PRODUCTS = 20


def _parse_price(value: Any, name: str) -> Optional[Decimal]:
    if value in (None, ''):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationException(f"'{name}' must be a number", field=name)


class CatalogService:
    """
    Read side of the catalog for shoppers, write side for operators.
    """

    def list_categories(self) -> List[Category]:
        return list(
            Category.objects.annotate(product_count=Count('products'))
            .prefetch_related('children')
            .order_by('name')
        )

    def get_category(self, slug: str) -> Category:
        category = (
            Category.objects.filter(slug=slug)
            .prefetch_related('children')
            .first()
        )
        if category is None:
            raise NotFoundException("Category")
        category.featured_products = list(
            category.products.filter(is_active=True)[:CATEGORY_PRODUCTS]
        )
        return category

    def list_products(
        self,
        page: int = 1,
        limit: int = 20,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Any = None,
        max_price: Any = None,
        sort_by: str = 'created_at',
        order: str = 'desc',
        featured: Optional[bool] = None,
    ):
        """
        Filter, sort and paginate active products.

        Returns (products, PageMeta).
        """
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationException(
                f"'sort_by' must be one of: {', '.join(SORTABLE_FIELDS)}", field="sort_by"
            )
        if order not in ('asc', 'desc'):
            raise ValidationException("'order' must be 'asc' or 'desc'", field="order")

        queryset = Product.objects.filter(is_active=True).select_related('category')

        if category:
            queryset = queryset.filter(category__slug=category)

        if search:
            logger.debug(f"Product search: {truncate_for_display(search)}")
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(description__icontains=search)
                # Whole tags only: match the quoted JSON string
                | Q(tags__icontains=json.dumps(search))
            )

        low = _parse_price(min_price, 'min_price')
        high = _parse_price(max_price, 'max_price')
        if low is not None:
            queryset = queryset.filter(price__gte=low)
        if high is not None:
            queryset = queryset.filter(price__lte=high)

        if featured:
            queryset = queryset.filter(is_featured=True)

        ordering = sort_by if order == 'asc' else f"-{sort_by}"
        queryset = queryset.order_by(ordering, 'id')

        return paginate(queryset, page, limit)

    def _detail_queryset(self):
        from apps.reviews.models import Review

        return Product.objects.select_related('category').prefetch_related(
            Prefetch(
                'reviews',
                queryset=Review.objects.select_related('user').order_by('-created_at'),
                to_attr='all_reviews',
            )
        )

    def _with_recent_reviews(self, product: Optional[Product]) -> Product:
        if product is None:
            raise NotFoundException("Product")
        product.recent_reviews = product.all_reviews[:RECENT_REVIEWS]
        return product

    def get_product(self, product_id) -> Product:
        return self._with_recent_reviews(self._detail_queryset().filter(pk=product_id).first())

    def get_product_by_slug(self, slug: str) -> Product:
        return self._with_recent_reviews(self._detail_queryset().filter(slug=slug).first())

    def create_product(self, **fields: Any) -> Product:
        with transaction.atomic():
            product = Product.objects.create(**self._product_data(fields))
        logger.info(f"Product {product.id} ({product.slug}) created")
        return product

    def update_product(self, product_id, **fields: Any) -> Product:
        product = Product.objects.filter(pk=product_id).first()
        if product is None:
            raise NotFoundException("Product")
        data = self._product_data(fields)
        for name, value in data.items():
            setattr(product, name, value)
        with transaction.atomic():
            product.save()
        logger.info(f"Product {product.id} updated: {sorted(data)}")
        return product

    def delete_product(self, product_id) -> None:
        product = Product.objects.filter(pk=product_id).first()
        if product is None:
            raise NotFoundException("Product")
        product.delete()
        logger.info(f"Product {product_id} deleted")

    @staticmethod
    def _product_data(fields: Dict[str, Any]) -> Dict[str, Any]:
        return {name: fields[name] for name in PRODUCT_FIELDS if name in fields}
