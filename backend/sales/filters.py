import django_filters
from django.db.models import Q
from .models import Sale


class SaleFilter(django_filters.FilterSet):
    """Filters for the sales list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    product = django_filters.UUIDFilter(field_name='product_id')
    date_from = django_filters.DateFilter(field_name='sale_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='sale_date', lookup_expr='lte')

    class Meta:
        model = Sale
        fields = ['search', 'product', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        """Match product name, product category or sale location"""
        if not value or not value.strip():
            return queryset
        search = value.strip()
        return queryset.filter(
            Q(product__name__icontains=search) |
            Q(product__category__icontains=search) |
            Q(location__icontains=search)
        )
