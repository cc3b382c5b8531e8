from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'current_stock', 'reorder_threshold', 'lead_time_days', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['name', 'category']
    ordering = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']
