from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'kg_per_unit', 'unit_price', 'total', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['name', 'description']
    ordering = ['name']
    readonly_fields = ['unit_price', 'total', 'created_at', 'updated_at']
