from django.contrib import admin
from .models import PurchaseOrder


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity_ordered', 'order_date', 'expected_arrival_date', 'status', 'created_at']
    list_filter = ['status', 'order_date']
    search_fields = ['product__name', 'status']
    ordering = ['-order_date', '-created_at']
    raw_id_fields = ['product']
    readonly_fields = ['id', 'created_at', 'updated_at']
