from rest_framework import serializers
from .models import PurchaseOrder


class PurchaseOrderSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    status_label = serializers.CharField(source='get_status_label', read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = ['id', 'product', 'product_name', 'order_date', 'quantity_ordered', 'expected_arrival_date',
                  'status', 'status_label', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_quantity_ordered(self, value):
        if value is None or value < 1:
            raise serializers.ValidationError("Quantity ordered must be at least 1")
        return value

    def validate(self, attrs):
        order_date = attrs.get('order_date', getattr(self.instance, 'order_date', None))
        arrival = attrs.get('expected_arrival_date', getattr(self.instance, 'expected_arrival_date', None))
        if order_date and arrival and arrival < order_date:
            raise serializers.ValidationError({
                'expected_arrival_date': "Expected arrival cannot be before the order date"
            })
        return attrs
