from django.urls import path
from .views import sale_list_create, sale_detail, sales_summary, sales_trends

urlpatterns = [
    path('sales/', sale_list_create, name='sale-list-create'),
    path('sales/summary/', sales_summary, name='sales-summary'),
    path('sales/trends/', sales_trends, name='sales-trends'),
    path('sales/<uuid:pk>/', sale_detail, name='sale-detail'),
]
