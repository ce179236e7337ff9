"""
API Views for the Storefront

This module provides REST API endpoints for:
- Auth: registration, login, password reset
- Profile & Addresses: the caller's account and address book
- Catalog: categories and products (product writes for operators)
- Cart: the caller's cart lines
- Orders: checkout and order history
- Reviews: product ratings
- Backoffice: dashboard, order and user administration
- Health Check: system health and status
"""
import logging
from datetime import datetime, timezone

from django.conf import settings
from django.db import connection
from drf_spectacular.utils import extend_schema, OpenApiExample
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.models import Capability
from apps.accounts.services import AuthService, ProfileService
from apps.backoffice.services import BackofficeService
from apps.cart.services import CartService
from apps.catalog.services import CatalogService
from apps.orders.payments import get_payment_gateway
from apps.orders.services import OrderService
from apps.reviews.services import ReviewService
from .permissions import RequiresCapability
from .responses import paginated_response, success_response
from .serializers import (
    AddressSerializer,
    AdminOrderQuerySerializer,
    AdminPageQuerySerializer,
    AdminOrderSerializer,
    AdminUserSerializer,
    AuthResponseSerializer,
    CartItemCreateSerializer,
    CartItemSerializer,
    CartItemUpdateSerializer,
    CartSerializer,
    CategoryDetailSerializer,
    CategorySerializer,
    ChangePasswordRequestSerializer,
    DashboardSerializer,
    ForgotPasswordRequestSerializer,
    HealthCheckSerializer,
    LoginRequestSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    PageQuerySerializer,
    ProductDetailSerializer,
    ProductQuerySerializer,
    ProductSerializer,
    ProductWriteSerializer,
    ProfileUpdateSerializer,
    RegisterRequestSerializer,
    ResetPasswordRequestSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _validated(serializer_class, data, **kwargs):
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# ---------- Auth ----------

class RegisterView(APIView):
    """
    Create a customer account with an empty cart and return a token.
    """
    permission_classes = [AllowAny]
    throttle_scope = 'auth'

    @extend_schema(
        request=RegisterRequestSerializer,
        responses={201: AuthResponseSerializer},
        description="Register a new customer account",
        examples=[
            OpenApiExample(
                "Registration",
                value={
                    "email": "jane@example.com",
                    "password": "s3cret-pass",
                    "first_name": "Jane",
                    "last_name": "Doe",
                    "phone": "+919876543210"
                },
                request_only=True
            ),
        ]
    )
    def post(self, request):
        data = _validated(RegisterRequestSerializer, request.data)
        user, token = AuthService().register(**data)
        return success_response(
            {"user": UserSerializer(user).data, "token": token},
            message="User registered successfully",
            status_code=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    throttle_scope = 'auth'

    @extend_schema(request=LoginRequestSerializer, responses={200: AuthResponseSerializer})
    def post(self, request):
        data = _validated(LoginRequestSerializer, request.data)
        user, token = AuthService().login(data['email'], data['password'])
        return success_response({"user": UserSerializer(user).data, "token": token})


class ForgotPasswordView(APIView):
    """
    Issue a password reset token. The token is only echoed back in DEBUG.
    """
    permission_classes = [AllowAny]
    throttle_scope = 'auth'

    @extend_schema(request=ForgotPasswordRequestSerializer)
    def post(self, request):
        data = _validated(ForgotPasswordRequestSerializer, request.data)
        token = AuthService().request_password_reset(data['email'])
        payload = {"reset_token": token} if settings.DEBUG else None
        return success_response(payload, message="Password reset token generated")


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    throttle_scope = 'auth'

    @extend_schema(request=ResetPasswordRequestSerializer)
    def post(self, request):
        data = _validated(ResetPasswordRequestSerializer, request.data)
        AuthService().reset_password(data['token'], data['new_password'])
        return success_response(message="Password reset successful")


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return success_response({"user": UserSerializer(request.user).data})


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ChangePasswordRequestSerializer)
    def post(self, request):
        data = _validated(ChangePasswordRequestSerializer, request.data)
        AuthService().change_password(request.user, data['current_password'], data['new_password'])
        return success_response(message="Password changed successfully")


# ---------- Profile & Addresses ----------

class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        user = ProfileService().get_profile(request.user)
        return success_response({"user": UserSerializer(user).data})

    @extend_schema(request=ProfileUpdateSerializer, responses={200: UserSerializer})
    def put(self, request):
        data = _validated(ProfileUpdateSerializer, request.data)
        user = ProfileService().update_profile(request.user, **data)
        return success_response({"user": UserSerializer(user).data})


class AddressListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: AddressSerializer(many=True)})
    def get(self, request):
        addresses = ProfileService().list_addresses(request.user)
        return success_response({"addresses": AddressSerializer(addresses, many=True).data})

    @extend_schema(request=AddressSerializer, responses={201: AddressSerializer})
    def post(self, request):
        data = _validated(AddressSerializer, request.data)
        address = ProfileService().create_address(request.user, **data)
        return success_response(
            {"address": AddressSerializer(address).data},
            status_code=status.HTTP_201_CREATED,
        )


class AddressDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=AddressSerializer, responses={200: AddressSerializer})
    def put(self, request, pk):
        data = _validated(AddressSerializer, request.data, partial=True)
        address = ProfileService().update_address(request.user, pk, **data)
        return success_response({"address": AddressSerializer(address).data})

    def delete(self, request, pk):
        ProfileService().delete_address(request.user, pk)
        return success_response(message="Address deleted successfully")


# ---------- Catalog ----------

class CategoryListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: CategorySerializer(many=True)})
    def get(self, request):
        categories = CatalogService().list_categories()
        return success_response({"categories": CategorySerializer(categories, many=True).data})


class CategoryDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: CategoryDetailSerializer})
    def get(self, request, slug):
        category = CatalogService().get_category(slug)
        return success_response({"category": CategoryDetailSerializer(category).data})


class ProductListView(APIView):
    """
    Public product listing; creation is restricted to catalog managers.
    """

    def get_permissions(self):
        if self.request.method == 'POST':
            return [RequiresCapability(Capability.MANAGE_CATALOG)()]
        return [AllowAny()]

    @extend_schema(
        parameters=[ProductQuerySerializer],
        responses={200: ProductSerializer(many=True)},
        description="List active products with filtering, sorting and pagination",
    )
    def get(self, request):
        query = _validated(ProductQuerySerializer, request.query_params)
        products, meta = CatalogService().list_products(**query)
        return paginated_response(ProductSerializer(products, many=True).data, meta)

    @extend_schema(request=ProductWriteSerializer, responses={201: ProductSerializer})
    def post(self, request):
        data = _validated(ProductWriteSerializer, request.data)
        product = CatalogService().create_product(**data)
        return success_response(
            {"product": ProductSerializer(product).data},
            status_code=status.HTTP_201_CREATED,
        )


class ProductDetailView(APIView):

    def get_permissions(self):
        if self.request.method in ('PUT', 'PATCH', 'DELETE'):
            return [RequiresCapability(Capability.MANAGE_CATALOG)()]
        return [AllowAny()]

    @extend_schema(responses={200: ProductDetailSerializer})
    def get(self, request, pk):
        product = CatalogService().get_product(pk)
        return success_response({"product": ProductDetailSerializer(product).data})

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductSerializer})
    def put(self, request, pk):
        data = _validated(ProductWriteSerializer, request.data, partial=True)
        product = CatalogService().update_product(pk, **data)
        return success_response({"product": ProductSerializer(product).data})

    def delete(self, request, pk):
        CatalogService().delete_product(pk)
        return success_response(message="Product deleted successfully")


class ProductBySlugView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ProductDetailSerializer})
    def get(self, request, slug):
        product = CatalogService().get_product_by_slug(slug)
        return success_response({"product": ProductDetailSerializer(product).data})


# ---------- Cart ----------

class CartView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: CartSerializer})
    def get(self, request):
        cart = CartService().get_cart(request.user)
        return success_response({"cart": CartSerializer(cart).data})

    @extend_schema(request=CartItemCreateSerializer, responses={201: CartItemSerializer})
    def post(self, request):
        data = _validated(CartItemCreateSerializer, request.data)
        item = CartService().add_item(request.user, **data)
        return success_response(
            {"cart_item": CartItemSerializer(item).data},
            status_code=status.HTTP_201_CREATED,
        )

    def delete(self, request):
        CartService().clear(request.user)
        return success_response(message="Cart cleared")


class CartItemView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CartItemUpdateSerializer, responses={200: CartItemSerializer})
    def put(self, request, item_id):
        data = _validated(CartItemUpdateSerializer, request.data)
        item = CartService().update_item(request.user, item_id, data['quantity'])
        return success_response({"cart_item": CartItemSerializer(item).data})

    def delete(self, request, item_id):
        CartService().remove_item(request.user, item_id)
        return success_response(message="Item removed from cart")


# ---------- Orders ----------

class OrderListView(APIView):
    """
    The caller's orders; POST places a new order from the cart.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[PageQuerySerializer], responses={200: OrderSerializer(many=True)})
    def get(self, request):
        query = _validated(PageQuerySerializer, request.query_params)
        orders, meta = OrderService().list_orders(request.user, query['page'], query['limit'])
        return paginated_response(OrderSerializer(orders, many=True).data, meta)

    @extend_schema(
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
        description="Place an order from the current cart",
        examples=[
            OpenApiExample(
                "Cash on delivery",
                value={
                    "address_id": "6f1c2d4e-8a9b-4c3d-9e8f-1a2b3c4d5e6f",
                    "payment_method": "cod"
                },
                request_only=True
            ),
        ]
    )
    def post(self, request):
        data = _validated(OrderCreateSerializer, request.data)
        service = OrderService(gateway=get_payment_gateway())
        placed = service.place_order(request.user, data['address_id'], data['payment_method'])

        payload = {"order": OrderSerializer(placed.order).data}
        if placed.client_secret:
            payload["client_secret"] = placed.client_secret
        return success_response(payload, status_code=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, pk):
        order = OrderService().get_order(request.user, pk)
        return success_response({"order": OrderSerializer(order).data})


# ---------- Reviews ----------

class ReviewCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ReviewCreateSerializer, responses={201: ReviewSerializer})
    def post(self, request):
        data = _validated(ReviewCreateSerializer, request.data)
        review = ReviewService().create_review(request.user, **data)
        return success_response(
            {"review": ReviewSerializer(review).data},
            status_code=status.HTTP_201_CREATED,
        )


class ProductReviewListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(parameters=[PageQuerySerializer], responses={200: ReviewSerializer(many=True)})
    def get(self, request, product_id):
        query = _validated(PageQuerySerializer, request.query_params)
        reviews, meta = ReviewService().list_product_reviews(product_id, query['page'], query['limit'])
        return paginated_response(ReviewSerializer(reviews, many=True).data, meta)


# ---------- Backoffice ----------

class DashboardView(APIView):
    permission_classes = [RequiresCapability(Capability.VIEW_DASHBOARD)]

    @extend_schema(responses={200: DashboardSerializer})
    def get(self, request):
        stats = BackofficeService().dashboard_stats()
        return success_response(DashboardSerializer(stats).data)


class AdminOrderListView(APIView):
    permission_classes = [RequiresCapability(Capability.MANAGE_ORDERS)]

    @extend_schema(parameters=[AdminOrderQuerySerializer], responses={200: AdminOrderSerializer(many=True)})
    def get(self, request):
        query = _validated(AdminOrderQuerySerializer, request.query_params)
        orders, meta = BackofficeService().list_orders(**query)
        return paginated_response(AdminOrderSerializer(orders, many=True).data, meta)


class AdminOrderStatusView(APIView):
    permission_classes = [RequiresCapability(Capability.MANAGE_ORDERS)]

    @extend_schema(request=OrderStatusUpdateSerializer, responses={200: AdminOrderSerializer})
    def put(self, request, pk):
        data = _validated(OrderStatusUpdateSerializer, request.data)
        order = BackofficeService().update_order_status(pk, **data)
        return success_response({"order": AdminOrderSerializer(order).data})


class AdminUserListView(APIView):
    permission_classes = [RequiresCapability(Capability.MANAGE_USERS)]

    @extend_schema(parameters=[AdminPageQuerySerializer], responses={200: AdminUserSerializer(many=True)})
    def get(self, request):
        query = _validated(AdminPageQuerySerializer, request.query_params)
        users, meta = BackofficeService().list_users(query['page'], query['limit'])
        return paginated_response(AdminUserSerializer(users, many=True).data, meta)


# ---------- Health ----------

class HealthCheckView(APIView):
    """
    System health check endpoint.

    Returns the status of the API and database connectivity.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: HealthCheckSerializer},
        description="Check system health status"
    )
    def get(self, request):
        """
        Check system health.
        """
        db_status = "healthy"
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"

        response_data = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": "1.0.0",
            "database": db_status,
            "payments": "configured" if settings.STRIPE_SECRET_KEY else "not configured",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        return Response(response_data, status=status.HTTP_200_OK)
