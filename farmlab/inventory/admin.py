from django.contrib import admin
from .models import FoodStock, MedicalStock, MedicineUnit, PlantStock, PlantStockUnit


@admin.register(FoodStock)
class FoodStockAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity', 'unit_price', 'reorder_level', 'expiry_date', 'feed_type', 'updated_at']
    list_filter = ['feed_type', 'category', 'expiry_date']
    search_fields = ['product__name']
    ordering = ['-created_at']


@admin.register(MedicalStock)
class MedicalStockAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity', 'unit_price', 'reorder_level', 'expiry_date', 'medicine_type', 'updated_at']
    list_filter = ['medicine_type', 'category', 'expiry_date']
    search_fields = ['product__name']
    ordering = ['-created_at']


@admin.register(MedicineUnit)
class MedicineUnitAdmin(admin.ModelAdmin):
    list_display = ['custom_id', 'product', 'expiration_date', 'is_used', 'is_expired', 'created_at']
    list_filter = ['is_used', 'is_expired', 'category']
    search_fields = ['custom_id', 'product__name']
    ordering = ['-created_at']
    readonly_fields = ['is_expired']


class PlantStockUnitInline(admin.TabularInline):
    model = PlantStockUnit
    extra = 0
    readonly_fields = ['harvested_at', 'created_at']


@admin.register(PlantStock)
class PlantStockAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity', 'updated_at']
    list_filter = ['product__category']
    search_fields = ['product__name']
    ordering = ['-created_at']
    inlines = [PlantStockUnitInline]
