import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from farmlab.catalog.models import Product
from farmlab.core.filters import apply_filters
from farmlab.core.utils import create_audit_log, field_changes
from .filters import FoodStockFilter, MedicalStockFilter, MedicineUnitFilter, PlantStockFilter
from .models import FoodStock, MedicalStock, MedicineUnit, PlantStock, PlantStockUnit
from .serializers import (
    FoodStockSerializer, MedicalStockSerializer,
    StockAdjustSerializer, MedicineUnitSerializer,
    PlantStockSerializer, PlantStockAddSerializer, PlantStockUnitSerializer
)

logger = logging.getLogger(__name__)


def adjust_stock(request, model):
    """
    Add or remove a single unit of stock for a product.

    Incrementing a product without stock creates its row with quantity 1.
    Decrementing never takes the quantity below zero.
    """
    serializer = StockAdjustSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    product = get_object_or_404(Product, pk=serializer.validated_data['product'])
    action = serializer.validated_data['action']

    with transaction.atomic():
        stock = model.objects.select_for_update().filter(product=product).order_by('created_at').first()

        if action == 'increment':
            if stock is None:
                stock = model.objects.create(product=product, quantity=1)
            else:
                stock.quantity += 1
                stock.save(update_fields=['quantity', 'updated_at'])
        else:  # decrement
            if stock is None:
                return Response({'error': 'Stock not found'}, status=status.HTTP_404_NOT_FOUND)
            if stock.quantity <= 0:
                return Response({'error': 'No units to remove'}, status=status.HTTP_400_BAD_REQUEST)
            stock.quantity -= 1
            stock.save(update_fields=['quantity', 'updated_at'])

    create_audit_log(
        request, 'stock_adjust', model.__name__, stock.pk,
        changes={'action': action, 'quantity': stock.quantity},
        object_name=product.name
    )
    logger.info(f"{model.__name__} {action} for {product.name}: quantity now {stock.quantity}")
    return Response({'success': True, 'quantity': stock.quantity})


# FoodStock views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def food_stock_list_create(request):
    """List feed stock or add a new stock row"""
    if request.method == 'GET':
        stocks = apply_filters(FoodStockFilter, request, FoodStock.objects.select_related('product'))
        serializer = FoodStockSerializer(stocks, many=True)
        return Response(serializer.data)
    else:
        serializer = FoodStockSerializer(data=request.data)
        if serializer.is_valid():
            stock = serializer.save()
            create_audit_log(request, 'create', 'FoodStock', stock.pk, object_name=stock.product.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def food_stock_adjust(request):
    """Increment or decrement feed stock by one unit"""
    return adjust_stock(request, FoodStock)


# MedicalStock views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medical_stock_list_create(request):
    """List medical stock or add a new stock row"""
    if request.method == 'GET':
        stocks = apply_filters(MedicalStockFilter, request, MedicalStock.objects.select_related('product'))
        serializer = MedicalStockSerializer(stocks, many=True)
        return Response(serializer.data)
    else:
        serializer = MedicalStockSerializer(data=request.data)
        if serializer.is_valid():
            stock = serializer.save()
            create_audit_log(request, 'create', 'MedicalStock', stock.pk, object_name=stock.product.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def medical_stock_adjust(request):
    """Increment or decrement medical stock by one unit"""
    return adjust_stock(request, MedicalStock)


# MedicineUnit views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medicine_unit_list_create(request):
    """List medicine units or register a new one"""
    if request.method == 'GET':
        units = apply_filters(MedicineUnitFilter, request, MedicineUnit.objects.select_related('product'))
        serializer = MedicineUnitSerializer(units, many=True)
        return Response(serializer.data)
    else:
        serializer = MedicineUnitSerializer(data=request.data)
        if serializer.is_valid():
            unit = serializer.save()
            create_audit_log(request, 'create', 'MedicineUnit', unit.pk, object_name=unit.custom_id)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def medicine_unit_detail(request, pk):
    """Retrieve, update or delete a medicine unit"""
    unit = get_object_or_404(MedicineUnit, pk=pk)

    if request.method == 'GET':
        serializer = MedicineUnitSerializer(unit)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = MedicineUnitSerializer(unit, data=request.data, partial=True)
        if serializer.is_valid():
            extra = {}
            # First use is stamped once
            if serializer.validated_data.get('is_used') and not unit.first_usage_date \
                    and 'first_usage_date' not in serializer.validated_data:
                extra['first_usage_date'] = timezone.localdate()
            serializer.save(**extra)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'MedicineUnit', unit.pk, object_name=unit.custom_id)
        unit.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# PlantStock views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def plant_stock_list_create(request):
    """
    List plant stock, or add stock for a plant product.

    Adding to a product that already has stock raises its quantity. With a
    ``location`` every added unit is also tracked as planted there.
    """
    if request.method == 'GET':
        stocks = apply_filters(
            PlantStockFilter, request,
            PlantStock.objects.select_related('product').prefetch_related('units')
        )
        serializer = PlantStockSerializer(stocks, many=True)
        return Response(serializer.data)

    serializer = PlantStockAddSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    product = Product.objects.filter(pk=serializer.validated_data['product']).first()
    if product is None:
        return Response({'error': 'Product not found'}, status=status.HTTP_404_NOT_FOUND)
    if product.category not in PlantStock.PLANT_CATEGORIES:
        return Response({'error': 'Product is not a plant product'}, status=status.HTTP_400_BAD_REQUEST)

    quantity = serializer.validated_data['quantity']
    location = serializer.validated_data.get('location', '').strip()

    with transaction.atomic():
        stock, created = PlantStock.objects.select_for_update().get_or_create(product=product)
        stock.quantity += quantity
        stock.save(update_fields=['quantity', 'updated_at'])
        if location:
            today = timezone.localdate()
            PlantStockUnit.objects.bulk_create([
                PlantStockUnit(stock=stock, location=location, planted_at=today)
                for _ in range(quantity)
            ])

    create_audit_log(
        request, 'create' if created else 'stock_adjust', 'PlantStock', stock.pk,
        changes={'added': quantity, 'quantity': stock.quantity, 'location': location},
        object_name=product.name
    )
    logger.info(f"Plant stock for {product.name}: +{quantity}, quantity now {stock.quantity}")
    return Response(
        PlantStockSerializer(stock).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def plant_stock_detail(request, pk):
    """Retrieve, correct the quantity of, or delete a plant stock"""
    stock = get_object_or_404(PlantStock.objects.select_related('product'), pk=pk)

    if request.method == 'GET':
        return Response(PlantStockSerializer(stock).data)
    elif request.method == 'PATCH':
        serializer = PlantStockSerializer(stock, data=request.data, partial=True)
        if serializer.is_valid():
            changes = field_changes(stock, serializer.validated_data)
            serializer.save()
            create_audit_log(request, 'update', 'PlantStock', stock.pk, changes=changes, object_name=stock.product.name)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'PlantStock', stock.pk, object_name=stock.product.name)
        stock.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def plant_stock_unit_update(request, pk):
    """Move a planted unit through its growth status"""
    unit = get_object_or_404(PlantStockUnit.objects.select_related('stock__product'), pk=pk)
    serializer = PlantStockUnitSerializer(unit, data=request.data, partial=True)
    if serializer.is_valid():
        changes = field_changes(unit, serializer.validated_data)
        serializer.save()
        create_audit_log(
            request, 'harvest' if unit.status == 'harvested' and 'status' in changes else 'update',
            'PlantStockUnit', unit.pk, changes=changes, object_name=unit.stock.product.name
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
