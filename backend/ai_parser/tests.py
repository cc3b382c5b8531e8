"""
Test suite for the AI parser
Tests: prompt construction, confidence scoring, response extraction and the endpoint
"""
from unittest import mock

import requests
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.ai_parser import services


def gemini_response(text=None, status_code=200):
    response = mock.Mock(status_code=status_code, ok=status_code < 400, text='vendor says no')
    if text is None:
        response.json.return_value = {'candidates': []}
    else:
        response.json.return_value = {'candidates': [{'content': {'parts': [{'text': text}]}}]}
    return response


class ConfidenceTests(SimpleTestCase):

    def test_base_confidence(self):
        self.assertEqual(services.compute_confidence('short', 'text_analysis'), 75)

    def test_long_analysis(self):
        self.assertEqual(services.compute_confidence('x' * 101, 'text_analysis'), 85)
        self.assertEqual(services.compute_confidence('x' * 100, 'text_analysis'), 75)

    def test_structure_markers(self):
        for marker in ('Amount:', 'Date:', 'Quantity:'):
            self.assertEqual(services.compute_confidence(f'{marker} 5', 'text_analysis'), 85)

    def test_file_analysis_bonus_and_cap(self):
        self.assertEqual(services.compute_confidence('short', 'file_analysis'), 80)
        self.assertEqual(services.compute_confidence('Amount: ' + 'x' * 200, 'file_analysis'), 95)


class PromptTests(SimpleTestCase):

    def test_text_prompt(self):
        prompt = services.build_prompt('Invoice #12', 'text_analysis')
        self.assertTrue(prompt.startswith('Analyze the following text'))
        self.assertTrue(prompt.endswith('Text: Invoice #12'))

    def test_file_prompt(self):
        prompt = services.build_prompt('row1', 'file_analysis', 'stock.csv', 'text/csv')
        self.assertIn('from file "stock.csv" (text/csv)', prompt)
        self.assertTrue(prompt.endswith('Content: row1'))

    def test_extract_analysis(self):
        self.assertEqual(services.extract_analysis({'candidates': [{'content': {'parts': [{'text': 'ok'}]}}]}), 'ok')
        self.assertEqual(services.extract_analysis({}), 'No analysis available')
        self.assertEqual(services.extract_analysis({'candidates': []}), 'No analysis available')


@override_settings(GEMINI_API_KEY='test-key', GEMINI_MODEL='gemini-test', GEMINI_TIMEOUT=5)
class AIParserAPITests(TestCase):
    """Test the AI parser endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    @mock.patch('backend.ai_parser.services.requests.post')
    def test_text_analysis(self, mock_post):
        mock_post.return_value = gemini_response('Amount: 120.00\nDate: 2024-01-01')
        response = self.client.post('/api/v1/ai-parser/', {'text': 'Invoice', 'type': 'text_analysis'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {
            'analysis': 'Amount: 120.00\nDate: 2024-01-01',
            'confidence': 85,
            'type': 'text_analysis',
            'processed': True,
        })
        args, kwargs = mock_post.call_args
        self.assertTrue(args[0].endswith('/gemini-test:generateContent'))
        self.assertEqual(kwargs['params'], {'key': 'test-key'})
        self.assertEqual(kwargs['json']['generationConfig']['temperature'], 0.3)
        self.assertEqual(kwargs['timeout'], 5)

    @mock.patch('backend.ai_parser.services.requests.post')
    def test_file_analysis_without_candidates(self, mock_post):
        mock_post.return_value = gemini_response(None)
        data = {'text': 'a,b', 'type': 'file_analysis', 'fileName': 'stock.csv', 'fileType': 'text/csv'}
        response = self.client.post('/api/v1/ai-parser/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['analysis'], 'No analysis available')
        self.assertEqual(response.data['confidence'], 80)

    @mock.patch('backend.ai_parser.services.requests.post')
    def test_vendor_error(self, mock_post):
        mock_post.return_value = gemini_response('x', status_code=503)
        with self.assertLogs('backend.ai_parser', level='ERROR'):
            response = self.client.post('/api/v1/ai-parser/', {'text': 'x', 'type': 'text_analysis'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Gemini API error: 503')
        self.assertEqual(response.data['analysis'], 'Error occurred during processing')
        self.assertEqual(response.data['confidence'], 0)

    @mock.patch('backend.ai_parser.services.requests.post')
    def test_transport_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout('timed out')
        response = self.client.post('/api/v1/ai-parser/', {'text': 'x', 'type': 'text_analysis'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['confidence'], 0)

    @override_settings(GEMINI_API_KEY='')
    @mock.patch('backend.ai_parser.services.requests.post')
    def test_missing_api_key(self, mock_post):
        response = self.client.post('/api/v1/ai-parser/', {'text': 'x', 'type': 'text_analysis'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Gemini API key not configured')
        mock_post.assert_not_called()

    def test_invalid_type(self):
        response = self.client.post('/api/v1/ai-parser/', {'text': 'x', 'type': 'ocr'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['confidence'], 0)
        self.assertIn('type', response.data['details'])

    def test_empty_text(self):
        response = self.client.post('/api/v1/ai-parser/', {'text': '', 'type': 'text_analysis'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
