"""
Test suite for Catalog module
Tests: product CRUD, validation, stock status and stock filters
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.catalog.models import Product


class ProductModelTests(TestCase):
    """Test Product model methods"""

    def test_product_str(self):
        product = TestDataFactory.create_product(name='Wireless Mouse')
        self.assertEqual(str(product), 'Wireless Mouse')

    def test_stock_status(self):
        cases = [
            (0, 10, 'out_of_stock'),
            (None, 10, 'out_of_stock'),
            (4, 10, 'critical'),
            (5, 10, 'critical'),
            (8, 10, 'low'),
            (10, 10, 'low'),
            (11, 10, 'ok'),
        ]
        for stock, threshold, expected in cases:
            product = Product(name='P', category='C', current_stock=stock, reorder_threshold=threshold)
            self.assertEqual(product.get_stock_status(), expected, (stock, threshold))


class ProductAPITests(TestCase):
    """Test Product API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_product(self):
        data = {
            'name': 'Laptop Stand',
            'category': 'Accessories',
            'current_stock': 12,
            'reorder_threshold': 25,
            'lead_time_days': 5,
        }
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stock_status'], 'critical')
        self.assertTrue(Product.objects.filter(name='Laptop Stand').exists())

    def test_create_product_invalid_lead_time(self):
        data = {'name': 'Bad', 'category': 'X', 'current_stock': 1, 'reorder_threshold': 1, 'lead_time_days': 0}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('lead_time_days', response.data)

    def test_create_product_negative_stock(self):
        data = {'name': 'Bad', 'category': 'X', 'current_stock': -1, 'reorder_threshold': 1, 'lead_time_days': 2}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_stock', response.data)

    def test_list_products(self):
        TestDataFactory.create_product(name='B Product')
        TestDataFactory.create_product(name='A Product')
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data], ['A Product', 'B Product'])

    def test_filter_low_stock(self):
        low = TestDataFactory.create_product(name='Low', current_stock=5, reorder_threshold=10)
        TestDataFactory.create_product(name='Out', current_stock=0, reorder_threshold=10)
        TestDataFactory.create_product(name='Fine', current_stock=50, reorder_threshold=10)
        response = self.client.get('/api/v1/products/?low_stock=true')
        self.assertEqual([p['id'] for p in response.data], [str(low.id)])

    def test_filter_out_of_stock(self):
        TestDataFactory.create_product(name='Low', current_stock=5, reorder_threshold=10)
        TestDataFactory.create_product(name='Out', current_stock=0, reorder_threshold=10)
        TestDataFactory.create_product(name='Unknown', current_stock=None, reorder_threshold=10)
        response = self.client.get('/api/v1/products/?out_of_stock=true')
        self.assertEqual(sorted(p['name'] for p in response.data), ['Out', 'Unknown'])

    def test_search_and_category(self):
        TestDataFactory.create_product(name='USB Cable', category='Cables')
        TestDataFactory.create_product(name='Wireless Mouse', category='Electronics')
        response = self.client.get('/api/v1/products/?search=cable')
        self.assertEqual([p['name'] for p in response.data], ['USB Cable'])
        response = self.client.get('/api/v1/products/?category=electronics')
        self.assertEqual([p['name'] for p in response.data], ['Wireless Mouse'])

    def test_update_and_delete_product(self):
        product = TestDataFactory.create_product(current_stock=100, reorder_threshold=10)
        response = self.client.patch(f'/api/v1/products/{product.id}/', {'current_stock': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock_status'], 'critical')

        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())

    def test_get_missing_product(self):
        response = self.client.get('/api/v1/products/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class LowStockAlertsAPITests(TestCase):
    """Dashboard list of products needing restock"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_lists_products_at_or_below_threshold_most_depleted_first(self):
        TestDataFactory.create_product(name='Laptop Stand', category='Accessories', current_stock=12, reorder_threshold=25)
        TestDataFactory.create_product(name='USB Cable', category='Cables', current_stock=8, reorder_threshold=15)
        TestDataFactory.create_product(name='Wireless Mouse', category='Electronics', current_stock=5, reorder_threshold=20)
        TestDataFactory.create_product(name='Keyboard', current_stock=0, reorder_threshold=10)
        TestDataFactory.create_product(name='Monitor', current_stock=30, reorder_threshold=10)

        response = self.client.get('/api/v1/products/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 4)
        items = response.data['items']
        self.assertEqual([i['name'] for i in items], ['Keyboard', 'Wireless Mouse', 'Laptop Stand', 'USB Cable'])
        self.assertEqual([i['urgency'] for i in items], ['high', 'high', 'high', 'medium'])

    def test_unrecorded_stock_is_listed(self):
        TestDataFactory.create_product(name='Unknown', current_stock=None, reorder_threshold=5)
        response = self.client.get('/api/v1/products/low-stock/')
        self.assertEqual(response.data['items'][0]['urgency'], 'high')

    def test_category_filter(self):
        TestDataFactory.create_product(name='USB Cable', category='Cables', current_stock=8, reorder_threshold=15)
        TestDataFactory.create_product(name='Wireless Mouse', category='Electronics', current_stock=5, reorder_threshold=20)
        response = self.client.get('/api/v1/products/low-stock/', {'category': 'cables'})
        self.assertEqual([i['name'] for i in response.data['items']], ['USB Cable'])

    def test_empty_when_stock_is_healthy(self):
        TestDataFactory.create_product(current_stock=50, reorder_threshold=10)
        response = self.client.get('/api/v1/products/low-stock/')
        self.assertEqual(response.data, {'count': 0, 'items': []})

    def test_restock_urgency(self):
        self.assertEqual(Product(current_stock=9, reorder_threshold=10).get_restock_urgency(), 'medium')
        self.assertEqual(Product(current_stock=5, reorder_threshold=10).get_restock_urgency(), 'high')
        self.assertIsNone(Product(current_stock=11, reorder_threshold=10).get_restock_urgency())
