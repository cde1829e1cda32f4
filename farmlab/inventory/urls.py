from django.urls import path
from .views import (
    food_stock_list_create, food_stock_adjust,
    medical_stock_list_create, medical_stock_adjust,
    medicine_unit_list_create, medicine_unit_detail,
    plant_stock_list_create, plant_stock_detail, plant_stock_unit_update
)

urlpatterns = [
    path('food-stock/', food_stock_list_create, name='food-stock-list-create'),
    path('food-stock/adjust/', food_stock_adjust, name='food-stock-adjust'),
    path('medical-stock/', medical_stock_list_create, name='medical-stock-list-create'),
    path('medical-stock/adjust/', medical_stock_adjust, name='medical-stock-adjust'),
    path('medicine-units/', medicine_unit_list_create, name='medicine-unit-list-create'),
    path('medicine-units/<int:pk>/', medicine_unit_detail, name='medicine-unit-detail'),
    path('plant-stock/', plant_stock_list_create, name='plant-stock-list-create'),
    path('plant-stock/<int:pk>/', plant_stock_detail, name='plant-stock-detail'),
    path('plant-stock/units/<int:pk>/', plant_stock_unit_update, name='plant-stock-unit-update'),
]
