"""
API Serializers for Request/Response handling
"""
from rest_framework import serializers

from apps.accounts.models import Address, User
from apps.cart.models import Cart, CartItem
from apps.catalog.models import Category, Product
from apps.core.utils import MAX_PAGE_SIZE
from apps.orders.models import Order, OrderItem, OrderStatus, PaymentMethod
from apps.reviews.models import Review


# ---------- Auth ----------

class RegisterRequestSerializer(serializers.Serializer):
    """
    Request serializer for account registration.
    """
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, max_length=128, write_only=True)
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class ForgotPasswordRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordRequestSerializer(serializers.Serializer):
    token = serializers.CharField()
    new_password = serializers.CharField(min_length=8, max_length=128, write_only=True)


class ChangePasswordRequestSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=8, max_length=128, write_only=True)


class UserSerializer(serializers.ModelSerializer):
    """
    Public view of an account. Never exposes credentials or reset tokens.
    """
    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'phone', 'role', 'is_verified', 'created_at']
        read_only_fields = fields


class AuthResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    token = serializers.CharField()


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100, required=False)
    last_name = serializers.CharField(max_length=100, required=False)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)


class AdminUserSerializer(UserSerializer):
    order_count = serializers.IntegerField(read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['is_active', 'order_count']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'email']
        read_only_fields = fields


class ReviewerSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name']
        read_only_fields = fields


# ---------- Addresses ----------

class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            'id', 'full_name', 'address_line1', 'address_line2', 'city', 'state',
            'postal_code', 'country', 'phone', 'is_default', 'created_at',
        ]
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {
            'country': {'required': False},
            'address_line2': {'required': False},
        }


# ---------- Catalog ----------

class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'name', 'slug', 'price', 'images', 'stock']
        read_only_fields = fields


class CategorySerializer(serializers.ModelSerializer):
    children = CategorySummarySerializer(many=True, read_only=True)
    product_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'description', 'image', 'parent', 'children', 'product_count']
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    category = CategorySummarySerializer(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'description', 'price', 'compare_price', 'category',
            'stock', 'sku', 'images', 'sizes', 'colors', 'tags', 'is_featured',
            'is_active', 'rating', 'review_count', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class CategoryDetailSerializer(CategorySerializer):
    products = ProductSerializer(source='featured_products', many=True, read_only=True)

    class Meta(CategorySerializer.Meta):
        fields = ['id', 'name', 'slug', 'description', 'image', 'parent', 'children', 'products']
        read_only_fields = fields


class ReviewSerializer(serializers.ModelSerializer):
    user = ReviewerSerializer(read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'product', 'user', 'rating', 'comment', 'images', 'is_verified', 'created_at']
        read_only_fields = fields


class ProductDetailSerializer(ProductSerializer):
    reviews = ReviewSerializer(source='recent_reviews', many=True, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ['reviews']
        read_only_fields = fields


class ProductQuerySerializer(serializers.Serializer):
    """
    Query parameters accepted by the product listing.
    """
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=MAX_PAGE_SIZE, default=20)
    category = serializers.CharField(required=False)
    search = serializers.CharField(required=False)
    min_price = serializers.DecimalField(required=False, max_digits=10, decimal_places=2, min_value=0)
    max_price = serializers.DecimalField(required=False, max_digits=10, decimal_places=2, min_value=0)
    sort_by = serializers.ChoiceField(
        choices=['created_at', 'price', 'name', 'rating'], required=False, default='created_at'
    )
    order = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')
    featured = serializers.BooleanField(required=False)


class ProductWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload for products (operators only).
    """
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0)
    images = serializers.ListField(child=serializers.CharField(), required=False)
    sizes = serializers.ListField(child=serializers.CharField(), required=False)
    colors = serializers.ListField(child=serializers.CharField(), required=False)
    tags = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = Product
        fields = [
            'name', 'slug', 'description', 'price', 'compare_price', 'category',
            'stock', 'sku', 'images', 'sizes', 'colors', 'tags', 'is_featured', 'is_active',
        ]
        # Uniqueness is enforced by the database and reported by the error layer
        extra_kwargs = {
            'slug': {'validators': []},
            'sku': {'validators': []},
        }


# ---------- Cart ----------

class CartItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'product', 'quantity', 'size', 'color', 'line_total']
        read_only_fields = fields


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    item_count = serializers.SerializerMethodField()
    subtotal = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ['id', 'items', 'item_count', 'subtotal']
        read_only_fields = fields

    def get_item_count(self, obj) -> int:
        return sum(item.quantity for item in obj.items.all())

    def get_subtotal(self, obj) -> str:
        return str(sum((item.line_total for item in obj.items.all()), 0))


class CartItemCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    size = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    color = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)


class CartItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


# ---------- Orders ----------

class OrderItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'position', 'product', 'quantity', 'size', 'color', 'price']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    address = AddressSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'status', 'payment_status', 'payment_method',
            'payment_reference', 'subtotal', 'shipping_cost', 'tax', 'total',
            'tracking_number', 'estimated_delivery', 'notes', 'address', 'items',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['user']
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    address_id = serializers.UUIDField()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=MAX_PAGE_SIZE, default=10)


class AdminPageQuerySerializer(PageQuerySerializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=MAX_PAGE_SIZE, default=20)


class AdminOrderQuerySerializer(AdminPageQuerySerializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    tracking_number = serializers.CharField(max_length=100, required=False)
    estimated_delivery = serializers.DateTimeField(required=False)


# ---------- Reviews ----------

class ReviewCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    images = serializers.ListField(child=serializers.CharField(), required=False)


# ---------- Backoffice ----------

class DashboardStatsSerializer(serializers.Serializer):
    total_users = serializers.IntegerField()
    total_orders = serializers.IntegerField()
    total_products = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)


class DashboardSerializer(serializers.Serializer):
    stats = DashboardStatsSerializer()
    recent_orders = AdminOrderSerializer(many=True)


class HealthCheckSerializer(serializers.Serializer):
    """
    Response serializer for health check.
    """
    status = serializers.CharField()
    version = serializers.CharField()
    database = serializers.CharField()
