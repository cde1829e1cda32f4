from django.urls import path
from .views import (
    inventory_monitor, invoice_analytics, stock_availability,
    stock_impact, registration_analytics, farm_insights,
    sponsor_metrics, sponsor_analytics
)

urlpatterns = [
    path('sponsor/inventory-monitor/', inventory_monitor, name='sponsor-inventory-monitor'),
    path('sponsor/invoice-analytics/', invoice_analytics, name='sponsor-invoice-analytics'),
    path('sponsor/stock-availability/', stock_availability, name='sponsor-stock-availability'),
    path('sponsor/stock-impact/', stock_impact, name='sponsor-stock-impact'),
    path('sponsor/registration-analytics/', registration_analytics, name='sponsor-registration-analytics'),
    path('sponsor/farm-insights/', farm_insights, name='sponsor-farm-insights'),
    path('sponsor/metrics/', sponsor_metrics, name='sponsor-metrics'),
    path('sponsor/analytics/', sponsor_analytics, name='sponsor-analytics'),
]
