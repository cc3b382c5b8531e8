import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """Product master with its current stock position"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    category = models.CharField(max_length=100, db_index=True)
    # Missing stock is treated as zero by the alert engine
    current_stock = models.IntegerField(null=True, blank=True, default=0, validators=[MinValueValidator(0)])
    reorder_threshold = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    lead_time_days = models.IntegerField(default=7, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def get_stock_status(self):
        """Classify stock the same way the notification engine does"""
        stock = self.current_stock or 0
        threshold = self.reorder_threshold or 0
        if stock == 0:
            return 'out_of_stock'
        if stock <= threshold:
            return 'critical' if stock <= threshold * 0.5 else 'low'
        return 'ok'

    def get_restock_urgency(self):
        """high when out of stock or at half the threshold or less, medium when otherwise low"""
        status = self.get_stock_status()
        if status in ('out_of_stock', 'critical'):
            return 'high'
        if status == 'low':
            return 'medium'
        return None

    class Meta:
        db_table = 'products'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['category', 'name'], name='idx_product_category_name'),
        ]
