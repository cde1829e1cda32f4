"""
URL configuration for the FarmLab backend.

Every app contributes its routes under the versioned ``api/v1/`` prefix.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "FarmLab Admin Panel"
admin.site.site_title = "FarmLab Admin Portal"
admin.site.index_title = "FarmLab Management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('farmlab.core.urls')),
    path('api/v1/', include('farmlab.suppliers.urls')),
    path('api/v1/', include('farmlab.catalog.urls')),
    path('api/v1/', include('farmlab.inventory.urls')),
    path('api/v1/', include('farmlab.purchasing.urls')),
    path('api/v1/', include('farmlab.hydroponics.urls')),
    path('api/v1/', include('farmlab.sensors.urls')),
    path('api/v1/', include('farmlab.analytics.urls')),
    path('api/v1/', include('farmlab.onboarding.urls')),
]
