from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ('position', 'product', 'quantity', 'size', 'color', 'price')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'user', 'status', 'payment_status', 'total', 'created_at')
    list_filter = ('status', 'payment_status', 'payment_method')
    search_fields = ('order_number', 'user__email')
    readonly_fields = ('subtotal', 'shipping_cost', 'tax', 'total', 'payment_reference')
    inlines = [OrderItemInline]
