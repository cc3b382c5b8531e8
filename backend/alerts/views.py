from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .serializers import NotificationSerializer
from .sessions import registry, session_key_for_user

EMPTY_MESSAGE = "No notifications at this time. Your inventory is looking healthy."


def _center_for(request):
    return registry.open(session_key_for_user(request.user)).center


def _notification_payload(center):
    notifications = center.notifications
    return {
        'unread_count': center.unread_count,
        'notifications': NotificationSerializer(notifications, many=True).data,
        'empty_message': None if notifications else EMPTY_MESSAGE,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    """Notification log (newest first) and the unread badge count"""
    return Response(_notification_payload(_center_for(request)))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, notification_id):
    """Mark one notification read; unknown ids are ignored"""
    center = _center_for(request)
    center.mark_read(notification_id)
    return Response(_notification_payload(center))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    center = _center_for(request)
    center.mark_all_read()
    return Response(_notification_payload(center))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_check(request):
    """Run a stock check now instead of waiting for the next tick"""
    center = _center_for(request)
    center.run_cycle()
    return Response(_notification_payload(center))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def notification_session_end(request):
    """Stop this user's scheduler and drop the in-memory log"""
    registry.close(session_key_for_user(request.user))
    return Response(status=status.HTTP_204_NO_CONTENT)
