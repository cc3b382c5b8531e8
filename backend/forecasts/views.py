from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .models import Forecast
from .serializers import ForecastSerializer
from .filters import ForecastFilter


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def forecast_list_create(request):
    """List demand forecasts (latest forecast date first) or add one"""
    if request.method == 'GET':
        filterset = ForecastFilter(request.query_params, queryset=Forecast.objects.select_related('product'))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = filterset.qs.order_by('-forecast_date', '-created_at')
        serializer = ForecastSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = ForecastSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def forecast_detail(request, pk):
    """Retrieve, update or delete a forecast"""
    forecast = get_object_or_404(Forecast.objects.select_related('product'), pk=pk)

    if request.method == 'GET':
        serializer = ForecastSerializer(forecast)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ForecastSerializer(forecast, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        forecast.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
