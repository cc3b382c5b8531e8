from django.urls import path
from .views import (
    notification_list, notification_mark_read, notification_mark_all_read,
    notification_check, notification_session_end,
)

urlpatterns = [
    path('notifications/', notification_list, name='notification-list'),
    path('notifications/read-all/', notification_mark_all_read, name='notification-mark-all-read'),
    path('notifications/check/', notification_check, name='notification-check'),
    path('notifications/session/', notification_session_end, name='notification-session-end'),
    path('notifications/<str:notification_id>/read/', notification_mark_read, name='notification-mark-read'),
]
