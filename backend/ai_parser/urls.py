from django.urls import path
from .views import ai_parse

urlpatterns = [
    path('ai-parser/', ai_parse, name='ai-parser'),
]
