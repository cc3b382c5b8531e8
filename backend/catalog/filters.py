import django_filters
from django.db.models import F, Q
from .models import Product


def _is_true(value):
    """Handle string 'true'/'false' query params"""
    if isinstance(value, str):
        return value.lower() == 'true'
    return bool(value)


class ProductFilter(django_filters.FilterSet):
    """Filters for the product list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')

    # Stock status filters
    low_stock = django_filters.CharFilter(method='filter_low_stock', label='Low Stock')
    out_of_stock = django_filters.CharFilter(method='filter_out_of_stock', label='Out of Stock')

    class Meta:
        model = Product
        fields = ['search', 'category', 'low_stock', 'out_of_stock']

    def filter_search(self, queryset, name, value):
        """Match the search string against product names and categories"""
        if not value or not value.strip():
            return queryset
        search = value.strip()
        return queryset.filter(Q(name__icontains=search) | Q(category__icontains=search))

    def filter_low_stock(self, queryset, name, value):
        """Products with 0 < stock <= reorder threshold"""
        if value is None or value == '':
            return queryset
        if _is_true(value):
            return queryset.filter(current_stock__gt=0, current_stock__lte=F('reorder_threshold'))
        return queryset

    def filter_out_of_stock(self, queryset, name, value):
        """Products with no stock (zero or never recorded)"""
        if value is None or value == '':
            return queryset
        if _is_true(value):
            return queryset.filter(Q(current_stock=0) | Q(current_stock__isnull=True))
        return queryset
