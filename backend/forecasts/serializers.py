from rest_framework import serializers
from .models import Forecast


class ForecastSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    confidence_band = serializers.CharField(source='get_confidence_band', read_only=True, allow_null=True)

    class Meta:
        model = Forecast
        fields = ['id', 'product', 'product_name', 'forecast_date', 'predicted_demand', 'confidence_level',
                  'confidence_band', 'algorithm_used', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_predicted_demand(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("Predicted demand cannot be negative")
        return value

    def validate_confidence_level(self, value):
        if value is not None and not 0 <= value <= 100:
            raise serializers.ValidationError("Confidence level must be between 0 and 100")
        return value
