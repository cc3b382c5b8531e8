import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from backend.catalog.models import Product


class Forecast(models.Model):
    """Predicted demand for one product on a date"""
    CONFIDENCE_HIGH = 80
    CONFIDENCE_MEDIUM = 60

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='forecasts')
    forecast_date = models.DateField()
    predicted_demand = models.IntegerField(validators=[MinValueValidator(0)])
    # Percentage, 0-100
    confidence_level = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    algorithm_used = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.product.name} {self.forecast_date}: {self.predicted_demand}"

    def get_confidence_band(self):
        """high (>= 80), medium (>= 60), low, or None when no confidence was recorded"""
        if not self.confidence_level:
            return None
        if self.confidence_level >= self.CONFIDENCE_HIGH:
            return 'high'
        if self.confidence_level >= self.CONFIDENCE_MEDIUM:
            return 'medium'
        return 'low'

    class Meta:
        db_table = 'forecasts'
        ordering = ['-forecast_date', '-created_at']
        indexes = [
            models.Index(fields=['product', 'forecast_date'], name='idx_forecast_product_date'),
        ]
