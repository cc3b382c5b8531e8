import uuid

from django.core.validators import MinValueValidator
from django.db import models
from backend.catalog.models import Product


class Sale(models.Model):
    """Units of one product sold on a given day"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='sales')
    sale_date = models.DateField()
    quantity = models.IntegerField(validators=[MinValueValidator(1)])
    location = models.CharField(max_length=200, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.product.name} x{self.quantity} on {self.sale_date}"

    class Meta:
        db_table = 'sales'
        ordering = ['-sale_date', '-created_at']
        indexes = [
            models.Index(fields=['-sale_date', '-created_at'], name='idx_sale_date_created'),
            models.Index(fields=['product', 'sale_date'], name='idx_sale_product_date'),
        ]
