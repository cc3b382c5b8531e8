import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.utils import paginated_response
from .filters import PurchaseOrderFilter
from .models import PurchaseOrder
from .serializers import PurchaseOrderSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders (latest order date first) or create a new one"""
    if request.method == 'GET':
        queryset = PurchaseOrder.objects.select_related('product')
        filterset = PurchaseOrderFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = filterset.qs.order_by('-order_date', '-created_at')
        return paginated_response(request, queryset, PurchaseOrderSerializer)
    else:  # POST
        serializer = PurchaseOrderSerializer(data=request.data)
        if serializer.is_valid():
            order = serializer.save()
            logger.info(f"Created purchase order {order.id} for {order.quantity_ordered} x {order.product.name}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, update or delete a purchase order"""
    order = get_object_or_404(PurchaseOrder.objects.select_related('product'), pk=pk)

    if request.method == 'GET':
        serializer = PurchaseOrderSerializer(order)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        previous_status = order.status
        serializer = PurchaseOrderSerializer(order, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            order = serializer.save()
            if order.status != previous_status:
                logger.info(f"Purchase order {order.id} status {previous_status} -> {order.status}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
