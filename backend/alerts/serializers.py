from rest_framework import serializers


class NotificationSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    type = serializers.CharField(source='category', read_only=True)
    title = serializers.CharField(read_only=True)
    message = serializers.CharField(read_only=True)
    severity = serializers.CharField(read_only=True)
    timestamp = serializers.DateTimeField(source='created_at', read_only=True)
    read = serializers.BooleanField(read_only=True)
    product_id = serializers.CharField(read_only=True, allow_null=True)
