from django.apps import AppConfig


class AiParserConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.ai_parser'
