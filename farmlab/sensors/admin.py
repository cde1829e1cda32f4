from django.contrib import admin
from .models import SensorReading


@admin.register(SensorReading)
class SensorReadingAdmin(admin.ModelAdmin):
    list_display = ['station_id', 'recorded_at', 'air_temp_c', 'air_humidity_percent', 'water_temp_c', 'water_tds_ppm', 'gas_ppm']
    list_filter = ['station_id']
    search_fields = ['station_id']
    ordering = ['-recorded_at']
    date_hierarchy = 'recorded_at'
