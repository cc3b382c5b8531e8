"""
Test suite for Forecasts module
Tests: forecast creation, confidence validation and bands, search filters
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.forecasts.models import Forecast


class ForecastModelTests(TestCase):

    def test_confidence_band(self):
        cases = [
            (None, None),
            (Decimal('0'), None),
            (Decimal('45'), 'low'),
            (Decimal('60'), 'medium'),
            (Decimal('79.99'), 'medium'),
            (Decimal('80'), 'high'),
        ]
        for confidence, expected in cases:
            forecast = Forecast(forecast_date=date(2024, 5, 1), predicted_demand=10, confidence_level=confidence)
            self.assertEqual(forecast.get_confidence_band(), expected, confidence)


class ForecastAPITests(TestCase):
    """Test Forecast API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Premium Headphones')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/forecasts/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_forecast(self):
        data = {
            'product': str(self.product.id),
            'forecast_date': '2024-06-01',
            'predicted_demand': 120,
            'confidence_level': '85.5',
            'algorithm_used': 'ARIMA',
        }
        response = self.client.post('/api/v1/forecasts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['confidence_band'], 'high')
        self.assertEqual(response.data['product_name'], 'Premium Headphones')

    def test_create_forecast_without_confidence(self):
        data = {'product': str(self.product.id), 'forecast_date': '2024-06-01', 'predicted_demand': 0}
        response = self.client.post('/api/v1/forecasts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['confidence_level'])
        self.assertIsNone(response.data['confidence_band'])

    def test_invalid_values(self):
        data = {
            'product': str(self.product.id),
            'forecast_date': '2024-06-01',
            'predicted_demand': -1,
            'confidence_level': '120',
        }
        response = self.client.post('/api/v1/forecasts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('predicted_demand', response.data)
        self.assertIn('confidence_level', response.data)

    def test_list_latest_forecast_first(self):
        TestDataFactory.create_forecast(product=self.product, forecast_date=date(2024, 6, 1))
        TestDataFactory.create_forecast(product=self.product, forecast_date=date(2024, 7, 1))
        response = self.client.get('/api/v1/forecasts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([f['forecast_date'] for f in response.data], ['2024-07-01', '2024-06-01'])

    def test_search_by_product_or_algorithm(self):
        other = TestDataFactory.create_product(name='Wireless Mouse')
        TestDataFactory.create_forecast(product=self.product, algorithm_used='Prophet')
        TestDataFactory.create_forecast(product=other, algorithm_used='Moving Average')

        response = self.client.get('/api/v1/forecasts/', {'search': 'headphones'})
        self.assertEqual([f['product_name'] for f in response.data], ['Premium Headphones'])

        response = self.client.get('/api/v1/forecasts/', {'search': 'moving'})
        self.assertEqual([f['product_name'] for f in response.data], ['Wireless Mouse'])

    def test_filter_by_date_range(self):
        TestDataFactory.create_forecast(product=self.product, forecast_date=date(2024, 5, 1))
        TestDataFactory.create_forecast(product=self.product, forecast_date=date(2024, 8, 1))
        response = self.client.get('/api/v1/forecasts/', {'date_from': '2024-06-01', 'date_to': '2024-12-31'})
        self.assertEqual([f['forecast_date'] for f in response.data], ['2024-08-01'])

    def test_update_and_delete_forecast(self):
        forecast = TestDataFactory.create_forecast(product=self.product, confidence_level=Decimal('50'))
        response = self.client.patch(f'/api/v1/forecasts/{forecast.id}/', {'confidence_level': '65'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confidence_band'], 'medium')

        response = self.client.delete(f'/api/v1/forecasts/{forecast.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Forecast.objects.filter(pk=forecast.pk).exists())
