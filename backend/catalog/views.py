from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import F, Q
from django.shortcuts import get_object_or_404
from .models import Product
from .serializers import ProductSerializer, LowStockItemSerializer
from .filters import ProductFilter


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List all products or create a new product"""
    if request.method == 'GET':
        filterset = ProductFilter(request.query_params, queryset=Product.objects.all())
        queryset = filterset.qs.order_by('name', 'id')
        serializer = ProductSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = ProductSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
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
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        product.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def low_stock_alerts(request):
    """Products at or below their reorder threshold, most depleted first"""
    queryset = Product.objects.filter(
        Q(current_stock__lte=F('reorder_threshold')) | Q(current_stock__isnull=True)
    )
    category = request.query_params.get('category', None)
    if category:
        queryset = queryset.filter(category__iexact=category)

    def fill_ratio(product):
        stock = product.current_stock or 0
        return (stock / product.reorder_threshold if product.reorder_threshold else 0, product.name)

    items = sorted(queryset, key=fill_ratio)
    serializer = LowStockItemSerializer(items, many=True)
    return Response({
        'count': len(items),
        'items': serializer.data,
    })
