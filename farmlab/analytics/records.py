"""
Load database rows as plain dicts for the aggregation functions.

Decimals become floats so the reductions work on plain numbers.
"""
from datetime import timedelta

from farmlab.catalog.models import Product
from farmlab.hydroponics.models import BarleyPlate
from farmlab.inventory.models import FoodStock, MedicalStock, MedicineUnit
from farmlab.onboarding.models import RegistrationResponse, WaitlistEntry
from farmlab.purchasing.models import SupplierInvoice
from farmlab.sensors.models import SensorReading
from farmlab.suppliers.models import Supplier


def as_float(value):
    return float(value) if value is not None else None


def supplier_records():
    return [
        {'id': s.pk, 'name': s.enterprise_name or s.name, 'category': s.category}
        for s in Supplier.objects.order_by('enterprise_name')
    ]


def product_records():
    return [
        {'id': p.pk, 'name': p.name, 'category': p.category, 'price': as_float(p.price)}
        for p in Product.objects.order_by('name')
    ]


def invoice_records(limit=None):
    """Invoices newest first with their lines"""
    invoices = SupplierInvoice.objects.select_related('supplier').prefetch_related('lines').order_by('-created_at')
    if limit:
        invoices = invoices[:limit]

    records = []
    for invoice in invoices:
        records.append({
            'id': invoice.pk,
            'invoice_number': invoice.invoice_number,
            'supplier_id': invoice.supplier_id,
            'supplier_name': invoice.supplier_enterprise or invoice.supplier_name or None,
            'grand_total': as_float(invoice.grand_total) or 0,
            'invoice_date': invoice.invoice_date,
            'created_at': invoice.created_at,
            'lines': [
                {
                    'name': line.name,
                    'category': line.category,
                    'quantity': as_float(line.quantity) or 0,
                    'price': as_float(line.price) or 0,
                    'total_price': as_float(line.total_price),
                }
                for line in invoice.lines.all()
            ],
        })
    return records


def stock_record(stock, family):
    record = {
        'id': stock.pk,
        'family': family,
        'product_id': stock.product_id,
        'name': stock.product.name,
        'quantity': stock.quantity,
        'unit_price': as_float(stock.unit_price) or 0,
        'reorder_level': stock.reorder_level,
        'expiry_date': stock.expiry_date,
        'category': stock.category,
        'created_at': stock.created_at,
        'updated_at': stock.updated_at,
    }
    if family == 'food':
        record['feed_type'] = stock.feed_type
    else:
        record['medicine_type'] = stock.medicine_type
    return record


def medical_stock_records():
    return [stock_record(s, 'medical') for s in MedicalStock.objects.select_related('product').order_by('product__name')]


def food_stock_records():
    return [stock_record(s, 'food') for s in FoodStock.objects.select_related('product').order_by('product__name')]


def medicine_unit_records():
    return [
        {
            'id': unit.pk,
            'custom_id': unit.custom_id,
            'name': unit.product.name,
            'category': unit.category,
            'expiration_date': unit.expiration_date,
            'is_used': unit.is_used,
            'is_expired': unit.is_expired,
            'created_at': unit.created_at,
        }
        for unit in MedicineUnit.objects.select_related('product').order_by('-created_at')
    ]


def registration_records():
    records = []
    for response in RegistrationResponse.objects.order_by('submitted_at'):
        record = dict(response.answers or {})
        record.update({
            'roles': response.roles,
            'country': response.country,
            'submitted_at': response.submitted_at,
        })
        records.append(record)
    return records


def plate_records():
    return [
        {
            'id': plate.pk,
            'plate_number': plate.plate_number,
            'status': plate.status,
            'start_date': plate.start_date,
            'expected_harvest_date': plate.expected_harvest_date,
            'farm_id': plate.farm_id,
        }
        for plate in BarleyPlate.objects.all()
    ]


def station_snapshots(now):
    """
    Latest reading of every station, and the first reading each station
    sent during the day before ``now``.
    """
    latest, day_old = [], []
    since = now - timedelta(days=1)
    station_ids = SensorReading.objects.order_by('station_id').values_list('station_id', flat=True).distinct()

    for station_id in station_ids:
        readings = SensorReading.objects.filter(station_id=station_id)
        latest.append(readings.order_by('-recorded_at').first().to_record())
        oldest_recent = readings.filter(recorded_at__gte=since).order_by('recorded_at').first()
        if oldest_recent is not None:
            day_old.append(oldest_recent.to_record())
    return latest, day_old


def sponsor_interests(user):
    """Interests and expectations from the waitlist entry sharing the user's email"""
    entry = WaitlistEntry.objects.filter(email__iexact=user.email).first() if user.email else None
    if entry is None:
        return [], []
    return list(entry.interests or []), list(entry.expectations or [])
