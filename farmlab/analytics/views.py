import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.utils import timezone

from farmlab.core.cache_utils import get_cached_analytics, cache_analytics
from farmlab.core.permissions import IsSponsorOrAdmin
from . import records
from .farm_insights import calculate_farm_insights
from .inventory_monitor import calculate_inventory_analytics
from .invoice_analytics import calculate_invoice_analytics
from .registration import calculate_registration_analytics
from .sponsor_analytics import RANGE_MONTHS, DEFAULT_RANGE, calculate_sponsor_analytics
from .sponsor_metrics import calculate_sponsor_metrics
from .stock_availability import calculate_stock_availability
from .stock_impact import calculate_stock_impact

logger = logging.getLogger(__name__)

MONITOR_INVOICE_LIMIT = 100
FARM_INSIGHTS_TTL = 60


def cached_response(name, build, error_message, ttl=None, **params):
    """
    Serve an analytics payload from the cache, computing it on a miss.
    ``params`` are part of the cache key.
    Any failure while loading or reducing rows becomes a 500.
    """
    try:
        data, cache_key = get_cached_analytics(name, **params)
        if data is None:
            data = build()
            cache_analytics(cache_key, data, ttl)
        else:
            logger.debug(f"Serving cached {name} analytics")
        return Response(data)
    except Exception as e:
        logger.error(f"Error in {name} analytics: {str(e)}", exc_info=True)
        return Response({'error': error_message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def inventory_monitor(request):
    """Supplier, product, stock and health analytics over the newest invoices"""
    def build():
        return calculate_inventory_analytics(
            suppliers=records.supplier_records(),
            products=records.product_records(),
            medical_stock=records.medical_stock_records(),
            food_stock=records.food_stock_records(),
            invoices=records.invoice_records(limit=MONITOR_INVOICE_LIMIT),
            medicine_units=records.medicine_unit_records(),
            now=timezone.now(),
        )
    return cached_response('inventory-monitor', build, 'Failed to fetch inventory analytics')


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def invoice_analytics(request):
    """Spending, supplier, category and product analytics over all invoices"""
    def build():
        return calculate_invoice_analytics(records.invoice_records())
    return cached_response('invoice-analytics', build, 'Failed to fetch invoice analytics')


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def stock_availability(request):
    """Availability scores and alerts for medicine and feed stock"""
    def build():
        return calculate_stock_availability(
            records.medical_stock_records(),
            records.food_stock_records(),
            records.medicine_unit_records(),
            now=timezone.now(),
        )
    return cached_response('stock-availability', build, 'Failed to fetch stock availability')


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def stock_impact(request):
    """Estimated impact of purchased stock"""
    def build():
        return calculate_stock_impact(
            records.invoice_records(),
            records.food_stock_records(),
            records.medical_stock_records(),
            records.medicine_unit_records(),
        )
    return cached_response('stock-impact', build, 'Failed to fetch stock impact data')


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def registration_analytics(request):
    """Audience analytics over registration wizard responses"""
    def build():
        return calculate_registration_analytics(records.registration_records())
    return cached_response('registration-analytics', build, 'Failed to fetch registration analytics')


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def farm_insights(request):
    """Sensor station, stock and barley plate overview"""
    def build():
        now = timezone.now()
        latest, day_old = records.station_snapshots(now)
        return calculate_farm_insights(
            latest_readings=latest,
            day_old_readings=day_old,
            food_stock=records.food_stock_records(),
            medical_stock=records.medical_stock_records(),
            plates=records.plate_records(),
            now=now,
        )
    return cached_response('farm-insights', build, 'Failed to fetch farm insights', ttl=FARM_INSIGHTS_TTL)


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def sponsor_metrics(request):
    """Contribution totals, recent activity and goals for the requesting sponsor"""
    user = request.user

    def build():
        interests, expectations = records.sponsor_interests(user)
        return calculate_sponsor_metrics(
            records.invoice_records(),
            records.food_stock_records(),
            records.medical_stock_records(),
            interests=interests,
            expectations=expectations,
        )
    return cached_response('sponsor-metrics', build, 'Failed to fetch metrics', user_id=user.pk)


@api_view(['GET'])
@permission_classes([IsSponsorOrAdmin])
def sponsor_analytics(request):
    """Stock trends, device activity, spending and impact over ?range=3months|6months|1year"""
    range_name = request.query_params.get('range', DEFAULT_RANGE)
    if range_name not in RANGE_MONTHS:
        return Response(
            {'error': f"range must be one of: {', '.join(RANGE_MONTHS)}"},
            status=status.HTTP_400_BAD_REQUEST,
        )

    def build():
        now = timezone.now()
        latest, _ = records.station_snapshots(now)
        return calculate_sponsor_analytics(
            invoices=records.invoice_records(),
            food_stock=records.food_stock_records(),
            medical_stock=records.medical_stock_records(),
            latest_readings=latest,
            now=now,
            range_name=range_name,
        )
    return cached_response(
        'sponsor-analytics', build, 'Failed to fetch analytics', ttl=FARM_INSIGHTS_TTL, range=range_name,
    )
