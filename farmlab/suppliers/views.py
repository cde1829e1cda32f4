from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404

from farmlab.core.utils import create_audit_log, field_changes
from .models import Supplier
from .serializers import SupplierSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        suppliers = Supplier.objects.all()
        search = request.query_params.get('search', None)
        if search:
            suppliers = suppliers.filter(
                Q(name__icontains=search) |
                Q(enterprise_name__icontains=search) |
                Q(city__icontains=search) |
                Q(email__icontains=search) |
                Q(category__icontains=search)
            )
        category = request.query_params.get('category', None)
        if category:
            suppliers = suppliers.filter(category=category)
        serializer = SupplierSerializer(suppliers.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save()
            create_audit_log(request, 'create', 'Supplier', supplier.pk, object_name=supplier.enterprise_name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = field_changes(supplier, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request, 'update', 'Supplier', supplier.pk,
                changes=changes,
                object_name=supplier.enterprise_name
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Supplier', supplier.pk, object_name=supplier.enterprise_name)
        supplier.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
