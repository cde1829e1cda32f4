from django.apps import AppConfig


class HydroponicsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'farmlab.hydroponics'
    label = 'hydroponics'
