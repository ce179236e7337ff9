"""
Accounts Models - Customers, Operators and their Addresses
Tables: Users, Addresses
"""
from enum import Enum

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import models, transaction

from apps.core.models import BaseModel


class Role(models.TextChoices):
    CUSTOMER = 'CUSTOMER', 'Customer'
    ADMIN = 'ADMIN', 'Admin'


class Capability(str, Enum):
    """Operations gated by role."""
    MANAGE_CATALOG = "manage_catalog"
    MANAGE_ORDERS = "manage_orders"
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_USERS = "manage_users"


ROLE_CAPABILITIES = {
    Role.CUSTOMER: frozenset(),
    Role.ADMIN: frozenset(Capability),
}


class User(BaseModel):
    """
    Storefront account. Customers shop; admins also operate the store.
    """
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)
    is_active = models.BooleanField(default=True)
    is_verified = models.BooleanField(default=False)
    reset_token = models.CharField(max_length=128, blank=True, null=True, db_index=True)
    reset_token_expiry = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'accounts_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} ({self.email})"

    # DRF reads these on request.user
    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    def has_capability(self, capability: Capability) -> bool:
        return capability in ROLE_CAPABILITIES.get(Role(self.role), frozenset())


class Address(BaseModel):
    """
    Shipping address belonging to a user.
    """
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='addresses')
    full_name = models.CharField(max_length=255)
    address_line1 = models.CharField(max_length=255)
    address_line2 = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20)
    country = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20)
    is_default = models.BooleanField(default=False)

    class Meta:
        db_table = 'accounts_addresses'
        verbose_name = 'Address'
        verbose_name_plural = 'Addresses'
        ordering = ['-is_default', '-created_at']

    def __str__(self):
        return f"{self.full_name}, {self.address_line1}, {self.city}"

    def save(self, *args, **kwargs):
        if not self.country:
            self.country = settings.STORE['DEFAULT_COUNTRY']
        with transaction.atomic():
            # Ensure only one default per user
            if self.is_default:
                Address.objects.filter(user=self.user, is_default=True).exclude(pk=self.pk).update(is_default=False)
            super().save(*args, **kwargs)
