import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .serializers import AnalysisRequestSerializer
from .services import analyze, error_payload, AIParserError

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ai_parse(request):
    """Analyze free text or extracted file content with the language model"""
    serializer = AnalysisRequestSerializer(data=request.data)
    if not serializer.is_valid():
        payload = error_payload('Invalid request')
        payload['details'] = serializer.errors
        return Response(payload, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = analyze(
            data['text'],
            data['type'],
            file_name=data.get('fileName'),
            file_type=data.get('fileType'),
        )
    except AIParserError as e:
        logger.error(f"Error in ai-parser: {str(e)}")
        return Response(error_payload(str(e)), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result)
