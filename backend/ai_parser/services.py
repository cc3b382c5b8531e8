"""
AI-assisted text and document analysis.

Sends the user's text (or extracted file content) to the Gemini
``generateContent`` endpoint and scores the answer with a simple
confidence heuristic.
"""
import os
import logging
from typing import Optional, Dict, Any

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

GEMINI_API_URL = getattr(
    settings,
    'GEMINI_API_URL',
    os.getenv('GEMINI_API_URL', 'https://generativelanguage.googleapis.com/v1beta/models')
)

TEXT_ANALYSIS = 'text_analysis'
FILE_ANALYSIS = 'file_analysis'
ANALYSIS_TYPES = (TEXT_ANALYSIS, FILE_ANALYSIS)

NO_ANALYSIS = 'No analysis available'
ERROR_ANALYSIS = 'Error occurred during processing'

GENERATION_CONFIG = {
    'temperature': 0.3,
    'topK': 40,
    'topP': 0.95,
    'maxOutputTokens': 8192,
}

# Confidence heuristic
BASE_CONFIDENCE = 75
MAX_CONFIDENCE = 95
STRUCTURE_MARKERS = ('Amount:', 'Date:', 'Quantity:')


class AIParserError(Exception):
    """The analysis could not be produced (configuration, transport or vendor error)"""


def build_prompt(text: str, analysis_type: str, file_name: Optional[str] = None,
                 file_type: Optional[str] = None) -> str:
    if analysis_type == FILE_ANALYSIS:
        return (
            f'Analyze the following document content from file "{file_name}" ({file_type}). '
            'Extract and structure any relevant business information like invoices, receipts, '
            'inventory data, sales data, etc. Return the analysis in a clear, structured format:'
            f'\n\nContent: {text}'
        )
    return (
        'Analyze the following text and extract structured information. If it appears to be a '
        'business document (invoice, receipt, purchase order, etc.), extract relevant data like '
        'amounts, dates, items, quantities, etc. Return the analysis in a clear, structured format:'
        f'\n\nText: {text}'
    )


def compute_confidence(analysis: str, analysis_type: str) -> int:
    """Score an analysis between 75 and 95"""
    confidence = BASE_CONFIDENCE
    if len(analysis) > 100:
        confidence += 10
    if any(marker in analysis for marker in STRUCTURE_MARKERS):
        confidence += 10
    if analysis_type == FILE_ANALYSIS:
        confidence += 5
    return min(confidence, MAX_CONFIDENCE)


def extract_analysis(data: Dict[str, Any]) -> str:
    """Pull the first candidate's text out of a generateContent response"""
    try:
        text = data['candidates'][0]['content']['parts'][0]['text']
    except (KeyError, IndexError, TypeError):
        return NO_ANALYSIS
    return text or NO_ANALYSIS


def call_gemini(prompt: str) -> Dict[str, Any]:
    api_key = getattr(settings, 'GEMINI_API_KEY', '')
    if not api_key:
        raise AIParserError('Gemini API key not configured')

    model = getattr(settings, 'GEMINI_MODEL', 'gemini-1.5-flash-latest')
    url = f"{GEMINI_API_URL}/{model}:generateContent"
    body = {
        'contents': [{'parts': [{'text': prompt}]}],
        'generationConfig': GENERATION_CONFIG,
    }
    try:
        response = requests.post(
            url,
            params={'key': api_key},
            json=body,
            headers={'Content-Type': 'application/json'},
            timeout=getattr(settings, 'GEMINI_TIMEOUT', 60),
        )
    except requests.exceptions.RequestException as e:
        raise AIParserError(f'Gemini API request failed: {str(e)}') from e

    if not response.ok:
        logger.error(f"Gemini API error: {response.text}")
        raise AIParserError(f'Gemini API error: {response.status_code}')

    try:
        return response.json()
    except ValueError as e:
        raise AIParserError('Gemini API returned invalid JSON') from e


def analyze(text: str, analysis_type: str, file_name: Optional[str] = None,
            file_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Run an analysis and build the response payload.

    Raises:
        AIParserError: when the model could not be reached or rejected the call
    """
    logger.info(f"Processing {analysis_type} with Gemini API")
    prompt = build_prompt(text, analysis_type, file_name, file_type)
    data = call_gemini(prompt)
    logger.info("Gemini API response received")

    analysis = extract_analysis(data)
    return {
        'analysis': analysis,
        'confidence': compute_confidence(analysis, analysis_type),
        'type': analysis_type,
        'processed': True,
    }


def error_payload(message: str) -> Dict[str, Any]:
    return {
        'error': message or 'Failed to process with AI',
        'analysis': ERROR_ANALYSIS,
        'confidence': 0,
    }
