from rest_framework import serializers
from .models import Sale


class SaleSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_category = serializers.CharField(source='product.category', read_only=True)

    class Meta:
        model = Sale
        fields = ['id', 'product', 'product_name', 'product_category', 'sale_date', 'quantity',
                  'location', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_quantity(self, value):
        if value is None or value < 1:
            raise serializers.ValidationError("Quantity must be at least 1")
        return value

    def validate_location(self, value):
        # Blank locations are stored as null
        if value is not None:
            value = value.strip()
        return value or None
