"""
API URL Configuration
"""
from django.urls import path
from .views import (
    AddressDetailView,
    AddressListView,
    AdminOrderListView,
    AdminOrderStatusView,
    AdminUserListView,
    CartItemView,
    CartView,
    CategoryDetailView,
    CategoryListView,
    ChangePasswordView,
    CurrentUserView,
    DashboardView,
    ForgotPasswordView,
    HealthCheckView,
    LoginView,
    OrderDetailView,
    OrderListView,
    ProductBySlugView,
    ProductDetailView,
    ProductListView,
    ProductReviewListView,
    ProfileView,
    RegisterView,
    ResetPasswordView,
    ReviewCreateView,
)

app_name = 'api'

urlpatterns = [
    # Auth
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/forgot-password/', ForgotPasswordView.as_view(), name='forgot-password'),
    path('auth/reset-password/', ResetPasswordView.as_view(), name='reset-password'),
    path('auth/me/', CurrentUserView.as_view(), name='me'),
    path('auth/change-password/', ChangePasswordView.as_view(), name='change-password'),

    # Profile & addresses
    path('users/profile/', ProfileView.as_view(), name='profile'),
    path('users/addresses/', AddressListView.as_view(), name='addresses'),
    path('users/addresses/<uuid:pk>/', AddressDetailView.as_view(), name='address-detail'),

    # Catalog
    path('categories/', CategoryListView.as_view(), name='categories'),
    path('categories/<slug:slug>/', CategoryDetailView.as_view(), name='category-detail'),
    path('products/', ProductListView.as_view(), name='products'),
    path('products/slug/<slug:slug>/', ProductBySlugView.as_view(), name='product-by-slug'),
    path('products/<uuid:pk>/', ProductDetailView.as_view(), name='product-detail'),

    # Cart
    path('cart/', CartView.as_view(), name='cart'),
    path('cart/<uuid:item_id>/', CartItemView.as_view(), name='cart-item'),

    # Orders
    path('orders/', OrderListView.as_view(), name='orders'),
    path('orders/<uuid:pk>/', OrderDetailView.as_view(), name='order-detail'),

    # Reviews
    path('reviews/', ReviewCreateView.as_view(), name='reviews'),
    path('reviews/product/<uuid:product_id>/', ProductReviewListView.as_view(), name='product-reviews'),

    # Backoffice
    path('admin/dashboard/', DashboardView.as_view(), name='admin-dashboard'),
    path('admin/orders/', AdminOrderListView.as_view(), name='admin-orders'),
    path('admin/orders/<uuid:pk>/status/', AdminOrderStatusView.as_view(), name='admin-order-status'),
    path('admin/users/', AdminUserListView.as_view(), name='admin-users'),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health'),
]
