import uuid

from django.core.validators import MinValueValidator
from django.db import models
from backend.catalog.models import Product


class PurchaseOrder(models.Model):
    """Replenishment order for one product"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('ordered', 'Ordered'),
        ('shipped', 'Shipped'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='purchase_orders')
    order_date = models.DateField()
    quantity_ordered = models.IntegerField(validators=[MinValueValidator(1)])
    expected_arrival_date = models.DateField(null=True, blank=True)
    # Rows written without a status read as pending
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"PO {self.product.name} x{self.quantity_ordered} ({self.get_status_label()})"

    def get_status_label(self):
        return (self.status or 'pending').capitalize()

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-order_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['product', 'status'], name='idx_po_product_status'),
            models.Index(fields=['-order_date', '-created_at'], name='idx_po_date_created'),
        ]
