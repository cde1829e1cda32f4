from django.contrib import admin
from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['enterprise_name', 'name', 'city', 'category', 'email', 'created_at']
    list_filter = ['category', 'city', 'created_at']
    search_fields = ['enterprise_name', 'name', 'email', 'city']
    ordering = ['-created_at']
