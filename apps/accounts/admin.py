from django.contrib import admin

from .models import Address, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'role', 'is_active', 'created_at')
    list_filter = ('role', 'is_active', 'is_verified')
    search_fields = ('email', 'first_name', 'last_name')
    exclude = ('password', 'reset_token', 'reset_token_expiry')


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'user', 'city', 'postal_code', 'is_default')
    search_fields = ('full_name', 'city', 'postal_code')
