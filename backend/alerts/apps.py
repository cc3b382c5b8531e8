import atexit

from django.apps import AppConfig


class AlertsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.alerts'

    def ready(self):
        """Import signals when app is ready"""
        import backend.alerts.signals  # noqa: F401
        from .sessions import registry
        atexit.register(registry.close_all)
