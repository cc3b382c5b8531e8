from django.urls import path
from .views import purchase_order_list_create, purchase_order_detail

urlpatterns = [
    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/<uuid:pk>/', purchase_order_detail, name='purchase-order-detail'),
]
