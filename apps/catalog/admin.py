from django.contrib import admin

from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'parent')
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'sku', 'category', 'price', 'stock', 'rating', 'is_active')
    list_filter = ('category', 'is_active', 'is_featured')
    search_fields = ('name', 'sku', 'slug')
    readonly_fields = ('rating', 'review_count')
