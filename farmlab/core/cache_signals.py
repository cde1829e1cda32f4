"""
Cache invalidation signals
Any write to a model that feeds the analytics endpoints bumps the cache generation
"""
from django.apps import apps
from django.db.models.signals import post_save, post_delete
from contextlib import contextmanager
import logging
import threading

from .cache_utils import bump_generation

logger = logging.getLogger(__name__)

_thread_locals = threading.local()

ANALYTICS_SOURCES = [
    'suppliers.Supplier',
    'catalog.Product',
    'inventory.FoodStock',
    'inventory.MedicalStock',
    'inventory.MedicineUnit',
    'purchasing.SupplierInvoice',
    'purchasing.InvoiceLine',
    'hydroponics.BarleyPlate',
    'sensors.SensorReading',
    'onboarding.RegistrationResponse',
    'onboarding.WaitlistEntry',
]


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation, e.g. during bulk imports.
    The generation is bumped once when the block exits.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False
        bump_generation()


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def invalidate_analytics(sender, **kwargs):
    if is_suspended():
        return
    bump_generation()
    logger.debug(f"Analytics cache invalidated by {sender.__name__}")


def connect_signals():
    for label in ANALYTICS_SOURCES:
        model = apps.get_model(label)
        post_save.connect(invalidate_analytics, sender=model, dispatch_uid=f'analytics_save_{label}')
        post_delete.connect(invalidate_analytics, sender=model, dispatch_uid=f'analytics_delete_{label}')
