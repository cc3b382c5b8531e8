import logging

from django.db.models import Sum
from django.db.models.functions import TruncMonth
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.utils import paginated_response
from backend.forecasts.models import Forecast
from .filters import SaleFilter
from .models import Sale
from .serializers import SaleSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List recorded sales (latest sale date first) or record a new sale"""
    if request.method == 'GET':
        filterset = SaleFilter(request.query_params, queryset=Sale.objects.select_related('product'))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = filterset.qs.order_by('-sale_date', '-created_at')
        return paginated_response(request, queryset, SaleSerializer)
    else:  # POST
        serializer = SaleSerializer(data=request.data)
        if serializer.is_valid():
            sale = serializer.save()
            logger.info(f"Recorded sale of {sale.quantity} x {sale.product.name} on {sale.sale_date}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve, update or delete a sale"""
    sale = get_object_or_404(Sale.objects.select_related('product'), pk=pk)

    if request.method == 'GET':
        serializer = SaleSerializer(sale)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SaleSerializer(sale, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        sale.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_summary(request):
    """Totals for the sales matching the list filters"""
    filterset = SaleFilter(request.query_params, queryset=Sale.objects.all())
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    queryset = filterset.qs
    totals = queryset.aggregate(total_quantity=Sum('quantity'))
    count = queryset.count()
    total_quantity = totals['total_quantity'] or 0
    return Response({
        'count': count,
        'total_quantity': total_quantity,
        'average_quantity': round(total_quantity / count, 1) if count else 0,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_trends(request):
    """Units sold against forecast demand per month, oldest month first"""
    try:
        months = int(request.query_params.get('months', 6))
    except ValueError:
        return Response({'error': 'months must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    if months < 1:
        return Response({'error': 'months must be at least 1'}, status=status.HTTP_400_BAD_REQUEST)

    monthly_sales = Sale.objects.annotate(
        month=TruncMonth('sale_date')
    ).values('month').annotate(
        total=Sum('quantity')
    ).order_by('month')
    monthly_forecast = Forecast.objects.annotate(
        month=TruncMonth('forecast_date')
    ).values('month').annotate(
        total=Sum('predicted_demand')
    ).order_by('month')

    trends = {}
    for row in monthly_sales:
        trends.setdefault(row['month'], {'sales': 0, 'forecast': 0})['sales'] = row['total'] or 0
    for row in monthly_forecast:
        trends.setdefault(row['month'], {'sales': 0, 'forecast': 0})['forecast'] = row['total'] or 0

    recent = sorted(trends)[-months:]
    return Response([
        {
            'month': month.strftime('%Y-%m'),
            'label': month.strftime('%b'),
            'sales': trends[month]['sales'],
            'forecast': trends[month]['forecast'],
        }
        for month in recent
    ])
