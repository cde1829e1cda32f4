from django.urls import path
from .views import (
    sensor_reading_ingest, sensor_station_list, sensor_station_detail,
    sensor_station_summary, sensor_station_comparison, microclimate_metrics
)

urlpatterns = [
    path('sensors/readings/', sensor_reading_ingest, name='sensor-reading-ingest'),
    path('sensorstations/', sensor_station_list, name='sensor-station-list'),
    path('sensorstations/comparison/', sensor_station_comparison, name='sensor-station-comparison'),
    path('sensorstations/microclimate/', microclimate_metrics, name='microclimate-metrics'),
    path('sensorstations/<str:station_id>/', sensor_station_detail, name='sensor-station-detail'),
    path('sensorstations/<str:station_id>/summary/', sensor_station_summary, name='sensor-station-summary'),
]
