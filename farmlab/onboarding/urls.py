from django.urls import path
from .views import (
    contact_list_create, contact_detail, waitlist_join, waitlist_stats,
    registration_form, registration_validate_step, register
)

urlpatterns = [
    path('contact/', contact_list_create, name='contact-list-create'),
    path('contact/<int:pk>/', contact_detail, name='contact-detail'),
    path('waitlist/', waitlist_join, name='waitlist-join'),
    path('waitlist/stats/', waitlist_stats, name='waitlist-stats'),
    path('registration/form/', registration_form, name='registration-form'),
    path('registration/validate-step/', registration_validate_step, name='registration-validate-step'),
    path('auth/register/', register, name='register'),
]
