"""
Test suite for Purchasing module
Tests: purchase order creation, status handling, arrival date validation,
search and status filters, updates and deletion
"""
from datetime import date

from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.purchasing.models import PurchaseOrder


class PurchaseOrderModelTests(TestCase):
    """Test PurchaseOrder model methods"""

    def test_status_label(self):
        order = TestDataFactory.create_purchase_order(status='shipped')
        self.assertEqual(order.get_status_label(), 'Shipped')

    def test_missing_status_reads_as_pending(self):
        order = TestDataFactory.create_purchase_order(status=None)
        self.assertEqual(order.get_status_label(), 'Pending')

    def test_purchase_order_str(self):
        product = TestDataFactory.create_product(name='Laptop Stand')
        order = TestDataFactory.create_purchase_order(product=product, quantity_ordered=25)
        self.assertEqual(str(order), 'PO Laptop Stand x25 (Pending)')


class PurchaseOrderAPITests(TestCase):
    """Test PurchaseOrder API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Laptop Stand', current_stock=12, reorder_threshold=25)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/purchase-orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_purchase_order_defaults_to_pending(self):
        data = {
            'product': str(self.product.id),
            'order_date': '2024-05-01',
            'quantity_ordered': 30,
            'expected_arrival_date': '2024-05-08',
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['status_label'], 'Pending')
        self.assertEqual(response.data['product_name'], 'Laptop Stand')

    def test_arrival_before_order_date_rejected(self):
        data = {
            'product': str(self.product.id),
            'order_date': '2024-05-10',
            'quantity_ordered': 30,
            'expected_arrival_date': '2024-05-01',
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('expected_arrival_date', response.data)

    def test_partial_update_checks_arrival_against_stored_order_date(self):
        order = TestDataFactory.create_purchase_order(product=self.product, order_date=date(2024, 5, 10))
        response = self.client.patch(
            f'/api/v1/purchase-orders/{order.id}/', {'expected_arrival_date': '2024-05-01'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_quantity_and_status(self):
        data = {'product': str(self.product.id), 'order_date': '2024-05-01', 'quantity_ordered': 0, 'status': 'lost'}
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity_ordered', response.data)
        self.assertIn('status', response.data)

    def test_list_latest_order_first(self):
        TestDataFactory.create_purchase_order(product=self.product, order_date=date(2024, 4, 1))
        TestDataFactory.create_purchase_order(product=self.product, order_date=date(2024, 5, 1))
        response = self.client.get('/api/v1/purchase-orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual([o['order_date'] for o in response.data['results']], ['2024-05-01', '2024-04-01'])

    def test_status_filter_treats_missing_status_as_pending(self):
        pending = TestDataFactory.create_purchase_order(product=self.product, status='pending')
        unset = TestDataFactory.create_purchase_order(product=self.product, status=None)
        TestDataFactory.create_purchase_order(product=self.product, status='delivered')

        response = self.client.get('/api/v1/purchase-orders/', {'status': 'Pending'})
        self.assertEqual({o['id'] for o in response.data['results']}, {str(pending.id), str(unset.id)})

        response = self.client.get('/api/v1/purchase-orders/', {'status': 'delivered'})
        self.assertEqual(response.data['count'], 1)

    def test_search_by_product_name_or_status(self):
        other = TestDataFactory.create_product(name='Wireless Mouse')
        TestDataFactory.create_purchase_order(product=self.product, status='shipped')
        TestDataFactory.create_purchase_order(product=other, status='ordered')

        response = self.client.get('/api/v1/purchase-orders/', {'search': 'mouse'})
        self.assertEqual([o['product_name'] for o in response.data['results']], ['Wireless Mouse'])

        response = self.client.get('/api/v1/purchase-orders/', {'search': 'ship'})
        self.assertEqual([o['product_name'] for o in response.data['results']], ['Laptop Stand'])

    def test_invalid_product_filter(self):
        response = self.client.get('/api/v1/purchase-orders/', {'product': 'not-a-uuid'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_status_and_delete(self):
        order = TestDataFactory.create_purchase_order(product=self.product)
        with self.assertLogs('backend.purchasing.views', level='INFO') as logs:
            response = self.client.patch(f'/api/v1/purchase-orders/{order.id}/', {'status': 'shipped'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status_label'], 'Shipped')
        self.assertIn('pending -> shipped', logs.output[0])

        response = self.client.delete(f'/api/v1/purchase-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PurchaseOrder.objects.filter(pk=order.pk).exists())

    def test_detail_not_found(self):
        response = self.client.get('/api/v1/purchase-orders/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
