from django.contrib import admin
from .models import Forecast


@admin.register(Forecast)
class ForecastAdmin(admin.ModelAdmin):
    list_display = ['product', 'forecast_date', 'predicted_demand', 'confidence_level', 'algorithm_used', 'created_at']
    list_filter = ['forecast_date', 'algorithm_used']
    search_fields = ['product__name', 'algorithm_used']
    ordering = ['-forecast_date', '-created_at']
    raw_id_fields = ['product']
    readonly_fields = ['id', 'created_at']
