"""Tear down a user's alert session when they log out"""
from django.contrib.auth.signals import user_logged_out
from django.dispatch import receiver

from .sessions import registry, session_key_for_user


@receiver(user_logged_out)
def close_alert_session(sender, request, user, **kwargs):
    if user is not None and user.pk is not None:
        registry.close(session_key_for_user(user))
