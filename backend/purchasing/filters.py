import django_filters
from django.db.models import Q
from .models import PurchaseOrder


class PurchaseOrderFilter(django_filters.FilterSet):
    """Filters for the purchase order list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    product = django_filters.UUIDFilter(field_name='product_id')
    status = django_filters.CharFilter(method='filter_status', label='Status')
    date_from = django_filters.DateFilter(field_name='order_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='order_date', lookup_expr='lte')

    class Meta:
        model = PurchaseOrder
        fields = ['search', 'product', 'status', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        """Match product name or order status"""
        if not value or not value.strip():
            return queryset
        search = value.strip()
        return queryset.filter(Q(product__name__icontains=search) | Q(status__icontains=search))

    def filter_status(self, queryset, name, value):
        """Exact status; 'pending' also matches orders with no status"""
        if not value:
            return queryset
        value = value.lower()
        if value == 'pending':
            return queryset.filter(Q(status='pending') | Q(status__isnull=True) | Q(status=''))
        return queryset.filter(status=value)
