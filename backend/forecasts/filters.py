import django_filters
from django.db.models import Q
from .models import Forecast


class ForecastFilter(django_filters.FilterSet):
    """Filters for the forecast list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    product = django_filters.UUIDFilter(field_name='product_id')
    date_from = django_filters.DateFilter(field_name='forecast_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='forecast_date', lookup_expr='lte')

    class Meta:
        model = Forecast
        fields = ['search', 'product', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        """Match product name or forecasting algorithm"""
        if not value or not value.strip():
            return queryset
        search = value.strip()
        return queryset.filter(Q(product__name__icontains=search) | Q(algorithm_used__icontains=search))
