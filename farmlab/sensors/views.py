import logging
from datetime import timedelta

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone

from farmlab.core.cache_signals import suspend_cache_signals
from .microclimate import compute_microclimate_metrics
from .models import SensorReading
from .serializers import SensorReadingSerializer, MicroclimateQuerySerializer
from .timeseries import (
    METRICS, METRIC_LABELS, WINDOW_DAYS, WINDOW_MINIMUM, WINDOW_LIMIT,
    select_station_window, data_range, hourly_nearest,
    filter_range, metric_summary, reported_metrics
)

logger = logging.getLogger(__name__)

MAX_SUMMARY_HOURS = 24 * 365


def station_ids():
    return list(
        SensorReading.objects.order_by('station_id').values_list('station_id', flat=True).distinct()
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sensor_reading_ingest(request):
    """Store one reading or a batch of readings"""
    many = isinstance(request.data, list)
    serializer = SensorReadingSerializer(data=request.data, many=many)
    if serializer.is_valid():
        with suspend_cache_signals():
            serializer.save()
        logger.debug(f"Stored {len(request.data) if many else 1} sensor reading(s)")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sensor_station_list(request):
    """Latest reading of every station"""
    stations = []
    for station_id in station_ids():
        latest = SensorReading.objects.filter(station_id=station_id).order_by('-recorded_at').first()
        if latest is not None:
            stations.append(latest.to_record())
    return Response({'sensor_stations': stations})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sensor_station_detail(request, station_id):
    """Readings of one station for charting"""
    cutoff = timezone.now() - timedelta(days=WINDOW_DAYS)
    readings = SensorReading.objects.filter(station_id=station_id)

    recent = [r.to_record() for r in readings.filter(recorded_at__gte=cutoff).order_by('recorded_at')]
    older = []
    if len(recent) < WINDOW_MINIMUM:
        older = [r.to_record() for r in readings.filter(recorded_at__lt=cutoff).order_by('-recorded_at')[:WINDOW_LIMIT]]

    window = select_station_window(recent, older)
    return Response({
        'station_id': station_id,
        'readings': window,
        'metrics': reported_metrics(window),
        'data_range': data_range(window),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sensor_station_summary(request, station_id):
    """Readings of the last hours with min/max/avg per metric"""
    try:
        hours = int(request.query_params.get('hours', 24))
    except (TypeError, ValueError):
        return Response({'error': 'hours must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    if not 0 < hours <= MAX_SUMMARY_HOURS:
        return Response(
            {'error': f'hours must be between 1 and {MAX_SUMMARY_HOURS}'}, status=status.HTTP_400_BAD_REQUEST
        )

    metrics = [m for m in request.query_params.get('metrics', '').split(',') if m]
    unknown = [m for m in metrics if m not in METRICS]
    if unknown:
        return Response({'error': f"Unknown metrics: {', '.join(unknown)}"}, status=status.HTTP_400_BAD_REQUEST)
    metrics = metrics or list(METRICS)

    now = timezone.now()
    end = int(now.timestamp())
    start = end - hours * 3600
    readings = SensorReading.objects.filter(
        station_id=station_id, recorded_at__gte=now - timedelta(hours=hours), recorded_at__lte=now
    ).order_by('recorded_at')
    records = [r.to_record() for r in readings]
    series = filter_range(records, start, end)
    return Response({
        'station_id': station_id,
        'hours': hours,
        'labels': {m: METRIC_LABELS[m] for m in metrics},
        'readings': [
            {'timestamp': r['timestamp'], 'datetime': r['datetime'], **{m: r.get(m) for m in metrics}}
            for r in series
        ],
        'statistics': metric_summary(series, metrics),
        'data_range': data_range(series),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sensor_station_comparison(request):
    """Hourly series of the last 24 hours for every station"""
    now = int(timezone.now().timestamp())
    since = timezone.now() - timedelta(hours=24)
    station_data = []
    for station_id in station_ids():
        readings = [
            r.to_record() for r in SensorReading.objects.filter(
                station_id=station_id, recorded_at__gte=since
            ).order_by('recorded_at')
        ]
        station_data.append({
            'station_id': station_id,
            'hourly_data': hourly_nearest(readings, now),
        })
    logger.info(f"Comparison data built for {len(station_data)} sensor stations")
    return Response({'station_data': station_data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def microclimate_metrics(request):
    """Microclimate indicators for an inside/outside pair of readings"""
    serializer = MicroclimateQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    return Response(compute_microclimate_metrics(data['ti'], data['hi'], data['to'], data['ho']))
