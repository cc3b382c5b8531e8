from django.urls import path
from .views import forecast_list_create, forecast_detail

urlpatterns = [
    path('forecasts/', forecast_list_create, name='forecast-list-create'),
    path('forecasts/<uuid:pk>/', forecast_detail, name='forecast-detail'),
]
