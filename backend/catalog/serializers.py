from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    stock_status = serializers.CharField(source='get_stock_status', read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'category', 'current_stock', 'reorder_threshold', 'lead_time_days',
                  'stock_status', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_lead_time_days(self, value):
        if value is None or value < 1:
            raise serializers.ValidationError("Lead time must be at least 1 day")
        return value

    def validate_current_stock(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Stock cannot be negative")
        return value

    def validate_reorder_threshold(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Reorder threshold cannot be negative")
        return value


class LowStockItemSerializer(serializers.ModelSerializer):
    """Dashboard row for a product at or below its reorder threshold"""
    urgency = serializers.CharField(source='get_restock_urgency', read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'category', 'current_stock', 'reorder_threshold', 'lead_time_days', 'urgency']
        read_only_fields = fields
