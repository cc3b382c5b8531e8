"""
Test suite for Sales module
Tests: recording sales, validation, search and date filters, summary totals
and monthly sales vs forecast trends
"""
from datetime import date

from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.sales.models import Sale


class SaleModelTests(TestCase):

    def test_sale_str(self):
        product = TestDataFactory.create_product(name='Wireless Mouse')
        sale = TestDataFactory.create_sale(product=product, quantity=3, sale_date=date(2024, 5, 1))
        self.assertEqual(str(sale), 'Wireless Mouse x3 on 2024-05-01')

    def test_default_ordering_latest_first(self):
        product = TestDataFactory.create_product()
        older = TestDataFactory.create_sale(product=product, sale_date=date(2024, 1, 1))
        newer = TestDataFactory.create_sale(product=product, sale_date=date(2024, 2, 1))
        self.assertEqual(list(Sale.objects.all()), [newer, older])


class SaleAPITests(TestCase):
    """Test Sale API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.mouse = TestDataFactory.create_product(name='Wireless Mouse', category='Electronics')
        self.cable = TestDataFactory.create_product(name='USB Cable', category='Cables')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/sales/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_record_sale(self):
        data = {'product': str(self.mouse.id), 'sale_date': '2024-05-01', 'quantity': 4, 'location': 'Main Street'}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['product_name'], 'Wireless Mouse')
        self.assertEqual(response.data['product_category'], 'Electronics')
        self.assertEqual(response.data['location'], 'Main Street')
        self.assertEqual(Sale.objects.filter(product=self.mouse).count(), 1)

    def test_record_sale_does_not_change_stock(self):
        data = {'product': str(self.mouse.id), 'sale_date': '2024-05-01', 'quantity': 4}
        self.client.post('/api/v1/sales/', data, format='json')
        self.mouse.refresh_from_db()
        self.assertEqual(self.mouse.current_stock, 100)

    def test_blank_location_stored_as_null(self):
        data = {'product': str(self.mouse.id), 'sale_date': '2024-05-01', 'quantity': 1, 'location': '  '}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['location'])

    def test_record_sale_invalid_quantity(self):
        data = {'product': str(self.mouse.id), 'sale_date': '2024-05-01', 'quantity': 0}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_record_sale_unknown_product(self):
        data = {'product': '00000000-0000-0000-0000-000000000000', 'sale_date': '2024-05-01', 'quantity': 1}
        response = self.client.post('/api/v1/sales/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product', response.data)

    def test_list_sales_latest_first_with_pagination(self):
        for day in range(1, 4):
            TestDataFactory.create_sale(product=self.mouse, sale_date=date(2024, 5, day))
        response = self.client.get('/api/v1/sales/', {'limit': 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['next'], 2)
        self.assertEqual([s['sale_date'] for s in response.data['results']], ['2024-05-03', '2024-05-02'])

        response = self.client.get('/api/v1/sales/', {'limit': 2, 'page': 2})
        self.assertEqual([s['sale_date'] for s in response.data['results']], ['2024-05-01'])
        self.assertIsNone(response.data['next'])

    def test_search_matches_product_category_and_location(self):
        TestDataFactory.create_sale(product=self.mouse, location='Airport Kiosk')
        TestDataFactory.create_sale(product=self.cable, location='Main Street')

        response = self.client.get('/api/v1/sales/', {'search': 'electronics'})
        self.assertEqual([s['product_name'] for s in response.data['results']], ['Wireless Mouse'])

        response = self.client.get('/api/v1/sales/', {'search': 'main'})
        self.assertEqual([s['product_name'] for s in response.data['results']], ['USB Cable'])

    def test_filter_by_product_and_dates(self):
        TestDataFactory.create_sale(product=self.mouse, sale_date=date(2024, 1, 15))
        TestDataFactory.create_sale(product=self.mouse, sale_date=date(2024, 3, 15))
        TestDataFactory.create_sale(product=self.cable, sale_date=date(2024, 3, 20))

        response = self.client.get('/api/v1/sales/', {'product': str(self.mouse.id), 'date_from': '2024-02-01'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['sale_date'], '2024-03-15')

    def test_invalid_filter_value(self):
        response = self.client.get('/api/v1/sales/', {'date_from': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_from', response.data)

    def test_update_and_delete_sale(self):
        sale = TestDataFactory.create_sale(product=self.mouse, quantity=2)
        response = self.client.patch(f'/api/v1/sales/{sale.id}/', {'quantity': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 5)

        response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Sale.objects.filter(pk=sale.pk).exists())

    def test_summary(self):
        TestDataFactory.create_sale(product=self.mouse, quantity=3)
        TestDataFactory.create_sale(product=self.mouse, quantity=4)
        TestDataFactory.create_sale(product=self.cable, quantity=10)

        response = self.client.get('/api/v1/sales/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'count': 3, 'total_quantity': 17, 'average_quantity': 5.7})

        response = self.client.get('/api/v1/sales/summary/', {'search': 'mouse'})
        self.assertEqual(response.data, {'count': 2, 'total_quantity': 7, 'average_quantity': 3.5})

    def test_summary_without_sales(self):
        response = self.client.get('/api/v1/sales/summary/')
        self.assertEqual(response.data, {'count': 0, 'total_quantity': 0, 'average_quantity': 0})


class SalesTrendsAPITests(TestCase):
    """Monthly units sold against forecast demand"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product()

    def test_monthly_totals(self):
        TestDataFactory.create_sale(product=self.product, quantity=5, sale_date=date(2024, 1, 3))
        TestDataFactory.create_sale(product=self.product, quantity=3, sale_date=date(2024, 1, 28))
        TestDataFactory.create_sale(product=self.product, quantity=4, sale_date=date(2024, 2, 10))
        TestDataFactory.create_forecast(product=self.product, predicted_demand=10, forecast_date=date(2024, 2, 1))
        TestDataFactory.create_forecast(product=self.product, predicted_demand=7, forecast_date=date(2024, 3, 1))

        response = self.client.get('/api/v1/sales/trends/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [
            {'month': '2024-01', 'label': 'Jan', 'sales': 8, 'forecast': 0},
            {'month': '2024-02', 'label': 'Feb', 'sales': 4, 'forecast': 10},
            {'month': '2024-03', 'label': 'Mar', 'sales': 0, 'forecast': 7},
        ])

        response = self.client.get('/api/v1/sales/trends/', {'months': 1})
        self.assertEqual([row['month'] for row in response.data], ['2024-03'])

    def test_invalid_months(self):
        response = self.client.get('/api/v1/sales/trends/', {'months': 'six'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/sales/trends/', {'months': 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
