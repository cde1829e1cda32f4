import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from farmlab.core.filters import apply_filters
from farmlab.core.utils import create_audit_log, field_changes
from .filters import ProductFilter
from .models import Product
from .serializers import ProductSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List products with filters or create a new product"""
    if request.method == 'GET':
        products = apply_filters(ProductFilter, request, Product.objects.all())
        serializer = ProductSerializer(products, many=True)
        return Response(serializer.data)
    else:
        name = request.data.get('name')
        category = request.data.get('category')
        if not name or not category:
            return Response({'error': 'Name and category are required'}, status=status.HTTP_400_BAD_REQUEST)
        if Product.objects.filter(name=name, category=category).exists():
            return Response({'error': 'Product already exists'}, status=status.HTTP_400_BAD_REQUEST)

        serializer = ProductSerializer(data=request.data)
        if serializer.is_valid():
            product = serializer.save()
            create_audit_log(request, 'create', 'Product', product.pk, object_name=product.name)
            logger.info(f"Product created: {product.name} ({product.category})")
            return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        serializer = ProductSerializer(product)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = field_changes(product, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request, 'update', 'Product', product.pk,
                changes=changes,
                object_name=product.name
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'Product', product.pk, object_name=product.name)
        product.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_categories(request):
    """Product categories with their animal/plant group"""
    return Response([
        {'value': value, 'label': label, 'group': value.split('_', 1)[0]}
        for value, label in Product.CATEGORY_CHOICES
    ])
