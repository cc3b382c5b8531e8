"""
URL configuration for backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Stock Dashboard Admin Panel"
admin.site.site_title = "Stock Dashboard Admin Portal"
admin.site.index_title = "Inventory Administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.catalog.urls')),
    path('api/v1/', include('backend.sales.urls')),
    path('api/v1/', include('backend.purchasing.urls')),
    path('api/v1/', include('backend.forecasts.urls')),
    path('api/v1/', include('backend.alerts.urls')),
    path('api/v1/', include('backend.ai_parser.urls')),
]
