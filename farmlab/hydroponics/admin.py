from django.contrib import admin
from .models import BarleyPlate


@admin.register(BarleyPlate)
class BarleyPlateAdmin(admin.ModelAdmin):
    list_display = ['plate_number', 'farm_id', 'status', 'start_date', 'expected_harvest_date', 'actual_harvest_date', 'seed_weight']
    list_filter = ['status', 'farm_id', 'start_date']
    search_fields = ['plate_number', 'notes']
    ordering = ['-created_at']
