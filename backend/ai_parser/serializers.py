from rest_framework import serializers
from .services import ANALYSIS_TYPES


class AnalysisRequestSerializer(serializers.Serializer):
    text = serializers.CharField(trim_whitespace=False)
    type = serializers.ChoiceField(choices=ANALYSIS_TYPES)
    fileName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    fileType = serializers.CharField(required=False, allow_blank=True, allow_null=True)
