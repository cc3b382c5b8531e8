from django.contrib import admin
from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity', 'sale_date', 'location', 'created_at']
    list_filter = ['sale_date', 'location']
    search_fields = ['product__name', 'product__category', 'location']
    ordering = ['-sale_date', '-created_at']
    raw_id_fields = ['product']
    readonly_fields = ['id', 'created_at']
