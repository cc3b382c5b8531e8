"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.catalog.models import Product
from backend.sales.models import Sale
from backend.purchasing.models import PurchaseOrder
from backend.forecasts.models import Forecast
from datetime import date
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )
        return user

    @staticmethod
    def create_product(name=None, category=None, current_stock=100, reorder_threshold=10, lead_time_days=7):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        return Product.objects.create(
            name=name,
            category=category or 'General',
            current_stock=current_stock,
            reorder_threshold=reorder_threshold,
            lead_time_days=lead_time_days
        )

    @staticmethod
    def create_sale(product=None, quantity=1, sale_date=None, location=None):
        """Create a test sale"""
        if not product:
            product = TestDataFactory.create_product()
        return Sale.objects.create(
            product=product,
            quantity=quantity,
            sale_date=sale_date or date.today(),
            location=location
        )

    @staticmethod
    def create_purchase_order(product=None, quantity_ordered=10, order_date=None, expected_arrival_date=None,
                              status='pending'):
        """Create a test purchase order"""
        if not product:
            product = TestDataFactory.create_product()
        return PurchaseOrder.objects.create(
            product=product,
            quantity_ordered=quantity_ordered,
            order_date=order_date or date.today(),
            expected_arrival_date=expected_arrival_date,
            status=status
        )

    @staticmethod
    def create_forecast(product=None, predicted_demand=50, forecast_date=None, confidence_level=None,
                        algorithm_used=None):
        """Create a test forecast"""
        if not product:
            product = TestDataFactory.create_product()
        return Forecast.objects.create(
            product=product,
            predicted_demand=predicted_demand,
            forecast_date=forecast_date or date.today(),
            confidence_level=confidence_level,
            algorithm_used=algorithm_used
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
