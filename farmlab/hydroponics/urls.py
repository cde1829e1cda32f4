from django.urls import path
from .views import barley_plate_list_create, barley_plate_detail, barley_plate_summary

urlpatterns = [
    path('hydroponic-barley/', barley_plate_list_create, name='barley-plate-list-create'),
    path('hydroponic-barley/summary/', barley_plate_summary, name='barley-plate-summary'),
    path('hydroponic-barley/<int:pk>/', barley_plate_detail, name='barley-plate-detail'),
]
