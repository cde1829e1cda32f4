from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'farmlab.core'
    label = 'core'

    def ready(self):
        """Wire cache invalidation once every app's models are loaded"""
        from farmlab.core.cache_signals import connect_signals
        connect_signals()
