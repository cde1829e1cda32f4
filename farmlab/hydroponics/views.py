import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.db.models import Count, Sum
from django.shortcuts import get_object_or_404

from farmlab.analytics.rounding import round_half_up
from farmlab.core.utils import create_audit_log
from .models import BarleyPlate
from .serializers import BarleyPlateSerializer

logger = logging.getLogger(__name__)


def plate_number_taken(farm_id, plate_number, exclude_pk=None):
    queryset = BarleyPlate.objects.filter(farm_id=farm_id, plate_number=plate_number)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return queryset.exists()


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def barley_plate_list_create(request):
    """List plates of a farm or start a new plate"""
    if request.method == 'GET':
        farm_id = request.query_params.get('farm_id', settings.DEFAULT_FARM_ID)
        plates = BarleyPlate.objects.filter(farm_id=farm_id)
        status_filter = request.query_params.get('status', None)
        if status_filter and status_filter != 'all':
            plates = plates.filter(status=status_filter)
        serializer = BarleyPlateSerializer(plates.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = BarleyPlateSerializer(data=request.data)
        if serializer.is_valid():
            farm_id = serializer.validated_data.get('farm_id') or settings.DEFAULT_FARM_ID
            plate_number = serializer.validated_data['plate_number']
            if plate_number_taken(farm_id, plate_number):
                return Response(
                    {'error': f'Plate number {plate_number} already exists for this farm'},
                    status=status.HTTP_409_CONFLICT
                )
            plate = serializer.save(created_by=request.user, farm_id=farm_id)
            create_audit_log(request, 'create', 'BarleyPlate', plate.pk, object_name=plate.plate_number)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def barley_plate_detail(request, pk):
    """Retrieve, update or delete a plate"""
    plate = get_object_or_404(BarleyPlate, pk=pk)

    if request.method == 'GET':
        serializer = BarleyPlateSerializer(plate)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = BarleyPlateSerializer(plate, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            farm_id = serializer.validated_data.get('farm_id', plate.farm_id)
            plate_number = serializer.validated_data.get('plate_number', plate.plate_number)
            if plate_number_taken(farm_id, plate_number, exclude_pk=plate.pk):
                return Response(
                    {'error': f'Plate number {plate_number} already exists for this farm'},
                    status=status.HTTP_409_CONFLICT
                )
            previous_status = plate.status
            plate = serializer.save()
            action = 'harvest' if plate.status == 'harvested' and previous_status != 'harvested' else 'update'
            create_audit_log(
                request, action, 'BarleyPlate', plate.pk,
                changes={'status': {'old': previous_status, 'new': plate.status}},
                object_name=plate.plate_number
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'BarleyPlate', plate.pk, object_name=plate.plate_number)
        plate.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def barley_plate_summary(request):
    """Status counts and harvest readiness for a farm"""
    farm_id = request.query_params.get('farm_id', settings.DEFAULT_FARM_ID)
    plates = BarleyPlate.objects.filter(farm_id=farm_id)

    by_status = {choice: 0 for choice, _ in BarleyPlate.STATUS_CHOICES}
    for row in plates.values('status').annotate(count=Count('id')):
        by_status[row['status']] = row['count']

    harvested = [p for p in plates.filter(status='harvested', actual_harvest_date__isnull=False)]
    growing_days = [(p.actual_harvest_date - p.start_date).days for p in harvested]

    return Response({
        'farm_id': farm_id,
        'total_plates': sum(by_status.values()),
        'by_status': by_status,
        'ready_for_harvest': sum(1 for p in plates.exclude(status='harvested') if p.is_ready_for_harvest()),
        'total_seed_weight': plates.aggregate(total=Sum('seed_weight'))['total'] or 0,
        'average_growing_days': round_half_up(sum(growing_days) / len(growing_days), 1) if growing_days else None,
    })
