"""
Product data sources for the stock alert engine.

A source lists every product with its current stock, reorder threshold and
lead time. Any failure to obtain that snapshot is raised as
``DataSourceUnavailable``; sources never retry.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

logger = logging.getLogger(__name__)


class DataSourceUnavailable(Exception):
    """The product snapshot could not be obtained (network, auth, query or schema error)"""


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    current_stock: Optional[int] = None
    reorder_threshold: Optional[int] = None
    lead_time_days: Optional[int] = None

    @classmethod
    def from_row(cls, row):
        """Build a snapshot from a ``products`` row dict"""
        if row.get('id') in (None, ''):
            raise KeyError('id')
        return cls(
            id=str(row['id']),
            name=row.get('name') or '',
            current_stock=row.get('current_stock'),
            reorder_threshold=row.get('reorder_threshold'),
            lead_time_days=row.get('lead_time_days'),
        )


class ProductSource:
    """Interface: ``list_products()`` returns snapshots in a stable order"""

    def list_products(self) -> List[ProductSnapshot]:
        raise NotImplementedError


class DatabaseProductSource(ProductSource):
    """Reads the ``products`` table through the Django ORM"""

    FIELDS = ('id', 'name', 'current_stock', 'reorder_threshold', 'lead_time_days')

    def list_products(self) -> List[ProductSnapshot]:
        from backend.catalog.models import Product

        try:
            rows = list(Product.objects.order_by('created_at', 'id').values(*self.FIELDS))
        except DatabaseError as e:
            raise DataSourceUnavailable(f"Product query failed: {str(e)}") from e
        return [ProductSnapshot.from_row(row) for row in rows]


class SupabaseProductSource(ProductSource):
    """Reads products from a hosted Postgres REST endpoint (PostgREST / Supabase)"""

    def __init__(self, base_url=None, api_key=None, timeout=None, session=None):
        self.base_url = (base_url if base_url is not None else getattr(settings, 'SUPABASE_URL', '')).rstrip('/')
        self.api_key = api_key if api_key is not None else getattr(settings, 'SUPABASE_KEY', '')
        self.timeout = timeout if timeout is not None else settings.STOCK_ALERTS.get('REQUEST_TIMEOUT', 10)
        self.session = session or requests.Session()

    def list_products(self) -> List[ProductSnapshot]:
        if not self.base_url or not self.api_key:
            raise DataSourceUnavailable("SUPABASE_URL and SUPABASE_KEY must be configured")

        url = f"{self.base_url}/rest/v1/products"
        headers = {
            'apikey': self.api_key,
            'Authorization': f'Bearer {self.api_key}',
            'Accept': 'application/json',
        }
        try:
            response = self.session.get(url, params={'select': '*'}, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise DataSourceUnavailable(f"Product request failed: {str(e)}") from e
        except ValueError as e:
            raise DataSourceUnavailable("Product response is not valid JSON") from e

        if not isinstance(payload, list):
            raise DataSourceUnavailable(f"Unexpected products payload: {type(payload).__name__}")
        try:
            return [ProductSnapshot.from_row(row) for row in payload]
        except (KeyError, AttributeError) as e:
            raise DataSourceUnavailable("Product row is missing an id") from e


PRODUCT_SOURCES = {
    'database': DatabaseProductSource,
    'supabase': SupabaseProductSource,
}


def get_product_source(name=None) -> ProductSource:
    """Instantiate the configured product source"""
    name = name or settings.STOCK_ALERTS.get('PRODUCT_SOURCE', 'database')
    try:
        source_class = PRODUCT_SOURCES[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown STOCK_ALERTS['PRODUCT_SOURCE'] {name!r}; expected one of {sorted(PRODUCT_SOURCES)}"
        )
    logger.debug(f"Using {source_class.__name__} for stock alerts")
    return source_class()
