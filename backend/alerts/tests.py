"""
Test suite for the stock alert engine
Tests: classification, log merging and bounds, read state, the notification
center, scheduling, session ownership, product sources and the REST surface
"""
import threading
import time
from datetime import datetime, timedelta, timezone as dt_timezone
from io import StringIO
from unittest import mock

import requests
from django.contrib.auth.signals import user_logged_out
from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.catalog.models import Product
from backend.alerts import notifications as nt
from backend.alerts.center import NotificationCenter
from backend.alerts.scheduler import AlertScheduler, create_background_scheduler
from backend.alerts.sessions import AlertSessionRegistry, idle_timeout_seconds, registry
from backend.alerts.sources import (
    DataSourceUnavailable, DatabaseProductSource, ProductSnapshot, SupabaseProductSource,
    get_product_source,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=dt_timezone.utc)

ALERT_SETTINGS = {
    'INTERVAL_SECONDS': 300,
    'LOG_LIMIT': 50,
    'PRODUCT_SOURCE': 'database',
    'REQUEST_TIMEOUT': 10,
    'AUTOSTART': False,
}


def snap(pid, stock, threshold, lead_time=5, name=None):
    return ProductSnapshot(
        id=pid, name=name or f'Product {pid}', current_stock=stock,
        reorder_threshold=threshold, lead_time_days=lead_time,
    )


def ids(notifications):
    return [n.id for n in notifications]


def wait_for(predicate, timeout=5):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.01)
    return True


class FakeSource:
    """In-memory product source"""

    def __init__(self, products=None, error=None):
        self.products = list(products or [])
        self.error = error
        self.calls = 0

    def list_products(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)


class GatedSource:
    """Returns one snapshot per call; the first call blocks until released"""

    def __init__(self, *snapshots):
        self.snapshots = list(snapshots)
        self.calls = 0
        self.entered = threading.Event()
        self.release = threading.Event()

    def list_products(self):
        self.calls += 1
        products = self.snapshots[self.calls - 1]
        if self.calls == 1:
            self.entered.set()
            self.release.wait(5)
        return list(products)


class EvaluateTests(SimpleTestCase):
    """Classification of product snapshots into notifications"""

    def test_out_of_stock_emits_only_critical_and_system(self):
        """Zero stock gives out-of-stock alert with no reorder companion"""
        batch = nt.evaluate([snap('p1', 0, 10, 5)], created_at=NOW, cycle_stamp=1)
        self.assertEqual(ids(batch), ['out-of-stock-p1', 'system-1'])
        self.assertEqual(batch[0].category, nt.CATEGORY_CRITICAL_STOCK)
        self.assertEqual(batch[0].severity, nt.SEVERITY_ERROR)
        self.assertEqual(batch[0].message, 'Product p1 is completely out of stock!')
        self.assertNotIn(nt.CATEGORY_REORDER_NEEDED, [n.category for n in batch])

    def test_half_threshold_is_critical_with_reorder(self):
        batch = nt.evaluate([snap('p2', 4, 10, 3)], created_at=NOW, cycle_stamp=1)
        self.assertEqual(ids(batch), ['critical-stock-p2', 'reorder-p2', 'system-1'])
        self.assertEqual(batch[0].severity, nt.SEVERITY_ERROR)
        self.assertEqual(batch[0].message, 'Product p2 has only 4 units left (critical level)')
        self.assertEqual(batch[1].severity, nt.SEVERITY_INFO)
        self.assertEqual(batch[1].message, 'Consider reordering Product p2 (Lead time: 3 days)')

    def test_above_half_threshold_is_low_with_reorder(self):
        batch = nt.evaluate([snap('p3', 8, 10, 7)], created_at=NOW, cycle_stamp=1)
        self.assertEqual(ids(batch), ['low-stock-p3', 'reorder-p3', 'system-1'])
        self.assertEqual(batch[0].category, nt.CATEGORY_LOW_STOCK)
        self.assertEqual(batch[0].severity, nt.SEVERITY_WARNING)
        self.assertEqual(batch[0].message, 'Product p3 is running low (8 units remaining)')
        self.assertIn('Lead time: 7 days', batch[1].message)

    def test_healthy_stock_produces_nothing(self):
        """A cycle with no product alerts has no system summary either"""
        self.assertEqual(nt.evaluate([snap('p4', 20, 10, None)], created_at=NOW), [])

    def test_empty_snapshot(self):
        self.assertEqual(nt.evaluate([], created_at=NOW), [])

    def test_boundaries(self):
        """Stock equal to the threshold is low; exactly half is critical"""
        batch = nt.evaluate([snap('a', 10, 10), snap('b', 5, 10), snap('c', 11, 10)],
                            created_at=NOW, cycle_stamp=7)
        self.assertEqual(ids(batch), ['low-stock-a', 'reorder-a', 'critical-stock-b', 'reorder-b', 'system-7'])

    def test_missing_values_default_to_zero(self):
        batch = nt.evaluate([snap('m', None, 10), snap('n', 3, None)], created_at=NOW, cycle_stamp=1)
        self.assertEqual(ids(batch), ['out-of-stock-m', 'system-1'])

    def test_zero_threshold_with_zero_stock(self):
        batch = nt.evaluate([snap('z', 0, 0)], created_at=NOW, cycle_stamp=1)
        self.assertEqual(ids(batch), ['out-of-stock-z', 'system-1'])

    def test_order_follows_products_and_system_counts_entries(self):
        products = [snap('x', 8, 10), snap('y', 50, 10), snap('w', 0, 3)]
        batch = nt.evaluate(products, created_at=NOW, cycle_stamp=42)
        self.assertEqual(ids(batch), ['low-stock-x', 'reorder-x', 'out-of-stock-w', 'system-42'])
        system = batch[-1]
        self.assertEqual(system.category, nt.CATEGORY_SYSTEM)
        self.assertEqual(system.title, 'Inventory Check Complete')
        self.assertEqual(system.message, 'Found 3 items requiring attention')
        self.assertIsNone(system.product_id)

    def test_deterministic(self):
        products = [snap('p2', 4, 10), snap('p3', 8, 10), snap('p1', 0, 10)]
        first = nt.evaluate(products, created_at=NOW, cycle_stamp=5)
        second = nt.evaluate(products, created_at=NOW, cycle_stamp=5)
        self.assertEqual(first, second)

    def test_product_ids_stable_across_cycles(self):
        products = [snap('p2', 4, 10)]
        first = nt.evaluate(products)
        second = nt.evaluate(products)
        self.assertEqual(ids(first)[:-1], ids(second)[:-1])
        self.assertNotEqual(first[-1].id, second[-1].id)

    def test_all_entries_unread_with_cycle_timestamp(self):
        batch = nt.evaluate([snap('p2', 4, 10)], created_at=NOW, cycle_stamp=1)
        self.assertTrue(all(not n.read for n in batch))
        self.assertTrue(all(n.created_at == NOW for n in batch))
        self.assertEqual([n.product_id for n in batch], ['p2', 'p2', None])

    def test_forecast_category_never_produced(self):
        products = [snap(str(i), stock, 10) for i, stock in enumerate([0, 1, 5, 8, 10, 11])]
        categories = {n.category for n in nt.evaluate(products)}
        self.assertNotIn(nt.CATEGORY_FORECAST_ALERT, categories)

    def test_cycle_stamps_strictly_increase(self):
        stamps = [nt.next_cycle_stamp() for _ in range(100)]
        self.assertEqual(stamps, sorted(set(stamps)))


class NotificationLogTests(SimpleTestCase):
    """Merging into the bounded log and read-state mutations"""

    def test_merge_prepends_new_batch(self):
        log = nt.evaluate([snap('a', 8, 10)], created_at=NOW, cycle_stamp=1)
        batch = nt.evaluate([snap('b', 0, 10)], created_at=NOW, cycle_stamp=2)
        merged = nt.merge(log, batch)
        self.assertEqual(ids(merged), ['out-of-stock-b', 'system-2', 'low-stock-a', 'reorder-a', 'system-1'])

    def test_unchanged_snapshot_only_adds_system_entry(self):
        products = [snap('p2', 4, 10, 3)]
        log = nt.merge([], nt.evaluate(products, created_at=NOW, cycle_stamp=1))
        log = nt.merge(log, nt.evaluate(products, created_at=NOW, cycle_stamp=2))
        self.assertEqual(ids(log), ['system-2', 'critical-stock-p2', 'reorder-p2', 'system-1'])

    def test_duplicate_never_replaces_read_entry(self):
        products = [snap('p3', 8, 10)]
        log = nt.merge([], nt.evaluate(products, created_at=NOW, cycle_stamp=1))
        log = nt.mark_read(log, 'low-stock-p3')
        log = nt.merge(log, nt.evaluate(products, created_at=NOW, cycle_stamp=2))
        entries = [n for n in log if n.id == 'low-stock-p3']
        self.assertEqual(len(entries), 1)
        self.assertTrue(entries[0].read)

    def test_state_change_produces_fresh_entry(self):
        log = nt.merge([], nt.evaluate([snap('p', 8, 10)], created_at=NOW, cycle_stamp=1))
        log = nt.merge(log, nt.evaluate([snap('p', 3, 10)], created_at=NOW, cycle_stamp=2))
        self.assertEqual(ids(log)[:2], ['critical-stock-p', 'system-2'])
        self.assertIn('low-stock-p', ids(log))

    def test_log_is_bounded_to_most_recent(self):
        log = []
        for stamp in range(1, 61):
            log = nt.merge(log, nt.evaluate([snap(f'p{stamp}', 0, 5)], created_at=NOW, cycle_stamp=stamp))
            self.assertLessEqual(len(log), 50)
        self.assertEqual(len(log), 50)
        expected = []
        for stamp in range(60, 35, -1):
            expected.extend([f'out-of-stock-p{stamp}', f'system-{stamp}'])
        self.assertEqual(ids(log), expected)

    def test_merge_truncates_oversized_batch(self):
        batch = nt.evaluate([snap(f'p{i}', 4, 10) for i in range(30)], created_at=NOW, cycle_stamp=1)
        merged = nt.merge([], batch)
        self.assertEqual(ids(merged), ids(batch)[:50])

    def test_merge_with_custom_limit(self):
        batch = nt.evaluate([snap('a', 4, 10)], created_at=NOW, cycle_stamp=1)
        self.assertEqual(len(nt.merge([], batch, limit=2)), 2)

    def test_mark_read_single_entry(self):
        log = nt.merge([], nt.evaluate([snap('p2', 4, 10)], created_at=NOW, cycle_stamp=1))
        log = nt.mark_read(log, 'reorder-p2')
        self.assertEqual([n.read for n in log], [False, True, False])
        self.assertEqual(nt.count_unread(log), 2)

    def test_mark_read_unknown_id_leaves_log_unchanged(self):
        log = nt.merge([], nt.evaluate([snap('p2', 4, 10)], created_at=NOW, cycle_stamp=1))
        self.assertEqual(nt.mark_read(log, 'missing'), log)

    def test_mark_all_read(self):
        log = nt.merge([], nt.evaluate([snap('p2', 4, 10), snap('p1', 0, 3)], created_at=NOW, cycle_stamp=1))
        log = nt.mark_all_read(log)
        self.assertTrue(all(n.read for n in log))
        self.assertEqual(nt.count_unread(log), 0)

    def test_mark_read_is_one_way(self):
        log = nt.merge([], nt.evaluate([snap('p1', 0, 3)], created_at=NOW, cycle_stamp=1))
        log = nt.mark_all_read(log)
        log = nt.mark_read(log, 'out-of-stock-p1')
        self.assertTrue(all(n.read for n in log))


class NotificationCenterTests(SimpleTestCase):
    """Center state, including the one-cycle lag of the unread counter"""

    def test_unread_count_lags_one_cycle(self):
        center = NotificationCenter(source=FakeSource([snap('p2', 4, 10)]), limit=50)

        added = center.run_cycle()
        self.assertEqual(ids(added)[:2], ['critical-stock-p2', 'reorder-p2'])
        self.assertEqual(len(center.notifications), 3)
        # Counter was computed from the empty pre-merge log
        self.assertEqual(center.unread_count, 0)

        added = center.run_cycle()
        self.assertEqual(len(added), 1)
        self.assertEqual(added[0].category, nt.CATEGORY_SYSTEM)
        self.assertEqual(len(center.notifications), 4)
        self.assertEqual(center.unread_count, 3)
        self.assertEqual(nt.count_unread(center.notifications), 4)

    def test_unavailable_source_skips_cycle(self):
        source = FakeSource([snap('p1', 0, 10)])
        center = NotificationCenter(source=source, limit=50)
        center.run_cycle()
        center.run_cycle()
        before_log, before_count = center.notifications, center.unread_count

        source.error = DataSourceUnavailable('connection refused')
        with self.assertLogs('backend.alerts.center', level='WARNING') as logs:
            self.assertEqual(center.run_cycle(), [])
        self.assertIn('connection refused', logs.output[0])
        self.assertEqual(center.notifications, before_log)
        self.assertEqual(center.unread_count, before_count)

        source.error = None
        self.assertEqual(len(center.run_cycle()), 1)

    def test_mark_read_decrements_only_on_flip(self):
        center = NotificationCenter(source=FakeSource([snap('p2', 4, 10)]), limit=50)
        center.run_cycle()
        center.run_cycle()
        self.assertEqual(center.unread_count, 3)

        self.assertTrue(center.mark_read('critical-stock-p2'))
        self.assertEqual(center.unread_count, 2)
        self.assertFalse(center.mark_read('critical-stock-p2'))
        self.assertFalse(center.mark_read('nope'))
        self.assertEqual(center.unread_count, 2)

    def test_mark_read_counter_never_negative(self):
        center = NotificationCenter(source=FakeSource([snap('p1', 0, 10)]), limit=50)
        center.run_cycle()
        self.assertEqual(center.unread_count, 0)
        center.mark_read('out-of-stock-p1')
        self.assertEqual(center.unread_count, 0)

    def test_mark_all_read(self):
        center = NotificationCenter(source=FakeSource([snap('p2', 4, 10)]), limit=50)
        center.run_cycle()
        center.run_cycle()
        center.mark_all_read()
        self.assertEqual(center.unread_count, 0)
        self.assertTrue(all(n.read for n in center.notifications))

    def test_log_limit(self):
        source = FakeSource()
        center = NotificationCenter(source=source, limit=5)
        for i in range(10):
            source.products = [snap(f'p{i}', 0, 1)]
            center.run_cycle()
        self.assertEqual(len(center.notifications), 5)
        self.assertEqual(center.notifications[0].id, 'out-of-stock-p9')

    def test_zero_limit_keeps_log_empty(self):
        center = NotificationCenter(source=FakeSource([snap('p1', 0, 10)]), limit=0)
        self.assertEqual(center.limit, 0)
        center.run_cycle()
        self.assertEqual(center.notifications, [])

    @override_settings(STOCK_ALERTS=ALERT_SETTINGS)
    def test_default_limit_from_settings(self):
        center = NotificationCenter(source=FakeSource())
        self.assertEqual(center.limit, 50)

    def test_concurrent_cycles_merge_in_fetch_order(self):
        # The slow first fetch sees stock 8/10; the second fetch sees it sold out
        source = GatedSource([snap('p', 8, 10)], [snap('p', 0, 10)])
        center = NotificationCenter(source=source, limit=50)

        scheduled = threading.Thread(target=center.run_cycle)
        scheduled.start()
        self.assertTrue(source.entered.wait(5))

        manual = threading.Thread(target=center.run_cycle)
        manual.start()
        manual.join(0.2)
        # The second cycle waits instead of fetching alongside the first
        self.assertTrue(manual.is_alive())
        self.assertEqual(source.calls, 1)

        source.release.set()
        scheduled.join(5)
        manual.join(5)

        log = center.notifications
        self.assertEqual(ids(log)[:1], ['out-of-stock-p'])
        self.assertEqual(ids(log)[2:4], ['low-stock-p', 'reorder-p'])
        stamps = [int(n.id.split('-')[1]) for n in log if n.category == nt.CATEGORY_SYSTEM]
        self.assertEqual(len(stamps), 2)
        self.assertGreater(stamps[0], stamps[1])


class CountingCenter:
    """Center stub that records cycles and can fail on demand"""

    def __init__(self, target=1, fail_first=False):
        self.count = 0
        self.target = target
        self.fail_first = fail_first
        self.reached = threading.Event()

    def run_cycle(self):
        self.count += 1
        if self.count >= self.target:
            self.reached.set()
        if self.fail_first and self.count == 1:
            raise RuntimeError('boom')
        return []


class AlertSchedulerTests(SimpleTestCase):

    def test_runs_once_at_start(self):
        center = CountingCenter(target=1)
        scheduler = AlertScheduler(center, interval=3600)
        scheduler.start()
        try:
            self.assertTrue(center.reached.wait(5))
            self.assertTrue(scheduler.is_running)
        finally:
            scheduler.stop()
        self.assertFalse(scheduler.is_running)
        self.assertEqual(center.count, 1)
        self.assertEqual(scheduler.cycles_run, 1)

    def test_repeats_every_interval(self):
        center = CountingCenter(target=3)
        scheduler = AlertScheduler(center, interval=0.05)
        scheduler.start()
        try:
            self.assertTrue(center.reached.wait(5))
        finally:
            scheduler.stop()
        self.assertGreaterEqual(center.count, 3)

    def test_failed_cycle_keeps_schedule(self):
        center = CountingCenter(target=2, fail_first=True)
        scheduler = AlertScheduler(center, interval=0.05)
        with self.assertLogs('backend.alerts.scheduler', level='ERROR'):
            scheduler.start()
            try:
                self.assertTrue(center.reached.wait(5))
            finally:
                scheduler.stop()

    def test_start_twice_and_stop_twice(self):
        center = CountingCenter(target=1)
        scheduler = AlertScheduler(center, interval=3600)
        scheduler.stop()
        scheduler.start()
        first_job = scheduler._job
        scheduler.start()
        self.assertIs(scheduler._job, first_job)
        self.assertTrue(center.reached.wait(5))
        scheduler.stop()
        scheduler.stop()
        self.assertEqual(center.count, 1)

    def test_restart_after_stop(self):
        center = CountingCenter(target=2)
        scheduler = AlertScheduler(center, interval=3600)
        scheduler.start()
        self.assertTrue(wait_for(lambda: center.count >= 1))
        scheduler.stop()
        self.assertFalse(scheduler.is_running)
        scheduler.start()
        try:
            self.assertTrue(center.reached.wait(5))
        finally:
            scheduler.stop()
        self.assertEqual(center.count, 2)

    def test_job_on_shared_scheduler(self):
        background = create_background_scheduler()
        try:
            center = CountingCenter(target=1)
            scheduler = AlertScheduler(center, interval=3600, name='stock-alerts[shared]', scheduler=background)
            scheduler.start()
            self.assertTrue(center.reached.wait(5))
            job = background.get_job('stock-alerts[shared]')
            self.assertEqual(job.max_instances, 1)
            scheduler.stop()
            self.assertIsNone(background.get_job('stock-alerts[shared]'))
            # A shared scheduler is left running for other jobs
            self.assertTrue(background.running)
        finally:
            background.shutdown()


@override_settings(STOCK_ALERTS=ALERT_SETTINGS)
class AlertSessionRegistryTests(SimpleTestCase):

    def setUp(self):
        self.clock = mock.Mock(return_value=1000.0)
        self.registry = AlertSessionRegistry(
            source_factory=lambda: FakeSource([snap('p1', 0, 10)]),
            clock=self.clock,
        )

    def tearDown(self):
        self.registry.close_all()
        registry.close_all()

    def test_open_is_idempotent_per_key(self):
        first = self.registry.open('user:1')
        self.assertIs(self.registry.open('user:1'), first)
        self.assertIsNot(self.registry.open('user:2').center, first.center)
        self.assertEqual(len(self.registry), 2)

    def test_close_forgets_session(self):
        self.registry.open('user:1')
        self.assertTrue(self.registry.close('user:1'))
        self.assertIsNone(self.registry.get('user:1'))
        self.assertFalse(self.registry.close('user:1'))

    def test_autostart_runs_first_cycle(self):
        settings_on = dict(ALERT_SETTINGS, AUTOSTART=True, INTERVAL_SECONDS=3600)
        with override_settings(STOCK_ALERTS=settings_on):
            session = self.registry.open('user:1')
            self.assertTrue(wait_for(lambda: session.scheduler.cycles_run >= 1))
        self.assertEqual(session.scheduler.cycles_run, 1)
        self.assertEqual(len(session.center.notifications), 2)

    def test_sessions_share_one_background_scheduler(self):
        settings_on = dict(ALERT_SETTINGS, AUTOSTART=True, INTERVAL_SECONDS=3600)
        with override_settings(STOCK_ALERTS=settings_on):
            first = self.registry.open('user:1')
            second = self.registry.open('user:2')
        background = self.registry._scheduler
        self.assertIs(first.scheduler._scheduler, background)
        self.assertIs(second.scheduler._scheduler, background)
        job_ids = {job.id for job in background.get_jobs()}
        self.assertEqual(job_ids, {'stock-alerts[user:1]', 'stock-alerts[user:2]', 'stock-alerts-idle-sweep'})

        self.registry.close_all()
        self.assertIsNone(self.registry._scheduler)
        self.assertFalse(background.running)

    def test_close_removes_scheduled_job(self):
        settings_on = dict(ALERT_SETTINGS, AUTOSTART=True, INTERVAL_SECONDS=3600)
        with override_settings(STOCK_ALERTS=settings_on):
            session = self.registry.open('user:1')
        self.assertTrue(session.scheduler.is_running)
        self.registry.close('user:1')
        self.assertFalse(session.scheduler.is_running)
        self.assertIsNone(self.registry._scheduler.get_job('stock-alerts[user:1]'))

    def test_idle_sessions_are_closed(self):
        with override_settings(STOCK_ALERTS=dict(ALERT_SETTINGS, SESSION_IDLE_SECONDS=60)):
            self.registry.open('user:1')
            self.clock.return_value = 1030.0
            self.registry.open('user:2')

            self.clock.return_value = 1070.0
            self.assertEqual(self.registry.close_idle(), 1)
            self.assertIsNone(self.registry.get('user:1'))
            self.assertIsNotNone(self.registry.get('user:2'))

    def test_open_refreshes_idle_timer(self):
        with override_settings(STOCK_ALERTS=dict(ALERT_SETTINGS, SESSION_IDLE_SECONDS=60)):
            first = self.registry.open('user:1')
            self.clock.return_value = 1050.0
            self.assertIs(self.registry.open('user:1'), first)

            self.clock.return_value = 1100.0
            self.assertEqual(self.registry.close_idle(), 0)

            # An expired session is replaced by a fresh one on the next request
            self.clock.return_value = 1200.0
            self.assertIsNot(self.registry.open('user:1'), first)
            self.assertEqual(len(self.registry), 1)

    @override_settings(SIMPLE_JWT={'ACCESS_TOKEN_LIFETIME': timedelta(minutes=5)})
    def test_idle_timeout_defaults_to_access_token_lifetime(self):
        self.assertEqual(idle_timeout_seconds(), 300)
        with override_settings(STOCK_ALERTS=dict(ALERT_SETTINGS, SESSION_IDLE_SECONDS=90)):
            self.assertEqual(idle_timeout_seconds(), 90)

    def test_logout_signal_closes_session(self):
        registry.open('user:99')
        user = mock.Mock(pk=99)
        user_logged_out.send(sender=type(user), request=None, user=user)
        self.assertIsNone(registry.get('user:99'))


class SupabaseProductSourceTests(SimpleTestCase):

    def make_source(self, response=None, error=None):
        session = mock.Mock()
        if error is not None:
            session.get.side_effect = error
        else:
            session.get.return_value = response
        return SupabaseProductSource(base_url='https://db.example.co/', api_key='secret', timeout=3, session=session), session

    def make_response(self, payload, status_code=200):
        response = mock.Mock(status_code=status_code)
        response.json.return_value = payload
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(f'{status_code} error')
        return response

    def test_lists_products(self):
        rows = [
            {'id': 'a1', 'name': 'Mouse', 'current_stock': 5, 'reorder_threshold': 20, 'lead_time_days': 4, 'category': 'x'},
            {'id': 'b2', 'name': 'Cable', 'current_stock': None, 'reorder_threshold': 15, 'lead_time_days': 2},
        ]
        source, session = self.make_source(self.make_response(rows))
        products = source.list_products()
        self.assertEqual(products[0], ProductSnapshot('a1', 'Mouse', 5, 20, 4))
        self.assertIsNone(products[1].current_stock)

        args, kwargs = session.get.call_args
        self.assertEqual(args[0], 'https://db.example.co/rest/v1/products')
        self.assertEqual(kwargs['params'], {'select': '*'})
        self.assertEqual(kwargs['headers']['apikey'], 'secret')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer secret')
        self.assertEqual(kwargs['timeout'], 3)

    def test_http_error(self):
        source, _ = self.make_source(self.make_response({'message': 'JWT expired'}, status_code=401))
        with self.assertRaises(DataSourceUnavailable):
            source.list_products()

    def test_network_error(self):
        source, _ = self.make_source(error=requests.exceptions.ConnectionError('down'))
        with self.assertRaises(DataSourceUnavailable):
            source.list_products()

    def test_invalid_json(self):
        response = self.make_response(None)
        response.json.side_effect = ValueError('bad json')
        source, _ = self.make_source(response)
        with self.assertRaises(DataSourceUnavailable):
            source.list_products()

    def test_unexpected_payload_shape(self):
        source, _ = self.make_source(self.make_response({'rows': []}))
        with self.assertRaises(DataSourceUnavailable):
            source.list_products()

    def test_row_without_id(self):
        source, _ = self.make_source(self.make_response([{'name': 'Ghost'}]))
        with self.assertRaises(DataSourceUnavailable):
            source.list_products()

    def test_not_configured(self):
        source = SupabaseProductSource(base_url='', api_key='', session=mock.Mock())
        with self.assertRaises(DataSourceUnavailable):
            source.list_products()

    def test_get_product_source(self):
        self.assertIsInstance(get_product_source('database'), DatabaseProductSource)
        self.assertIsInstance(get_product_source('supabase'), SupabaseProductSource)
        with self.assertRaises(ImproperlyConfigured):
            get_product_source('spreadsheet')


class DatabaseProductSourceTests(TestCase):

    def test_lists_products_in_creation_order(self):
        first = TestDataFactory.create_product(name='Wireless Mouse', current_stock=5, reorder_threshold=20, lead_time_days=4)
        second = TestDataFactory.create_product(name='USB Cable', current_stock=None, reorder_threshold=15)
        Product.objects.filter(pk=second.pk).update(created_at=first.created_at + timedelta(seconds=1))
        products = DatabaseProductSource().list_products()
        self.assertEqual([p.id for p in products], [str(first.id), str(second.id)])
        self.assertEqual(products[0], ProductSnapshot(str(first.id), 'Wireless Mouse', 5, 20, 4))
        self.assertIsNone(products[1].current_stock)

    def test_database_error_is_unavailable(self):
        with mock.patch('backend.catalog.models.Product.objects.order_by', side_effect=DatabaseError('no such table')):
            with self.assertRaises(DataSourceUnavailable):
                DatabaseProductSource().list_products()

    def test_center_over_database(self):
        product = TestDataFactory.create_product(current_stock=0, reorder_threshold=10)
        center = NotificationCenter(source=DatabaseProductSource(), limit=50)
        added = center.run_cycle()
        self.assertEqual(added[0].id, f'out-of-stock-{product.id}')
        self.assertEqual(added[0].product_id, str(product.id))


@override_settings(STOCK_ALERTS=ALERT_SETTINGS)
class NotificationAPITests(TestCase):
    """Test notification center endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def tearDown(self):
        registry.close_all()

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_empty_log(self):
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unread_count'], 0)
        self.assertEqual(response.data['notifications'], [])
        self.assertIn('looking healthy', response.data['empty_message'])

    def test_check_and_read_flow(self):
        product = TestDataFactory.create_product(name='Laptop Stand', current_stock=4, reorder_threshold=10, lead_time_days=3)

        response = self.client.post('/api/v1/notifications/check/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entries = response.data['notifications']
        self.assertEqual([e['id'] for e in entries[:2]], [f'critical-stock-{product.id}', f'reorder-{product.id}'])
        self.assertTrue(entries[2]['id'].startswith('system-'))
        self.assertEqual(entries[0]['type'], 'critical_stock')
        self.assertEqual(entries[0]['severity'], 'error')
        self.assertEqual(entries[0]['product_id'], str(product.id))
        self.assertIsNone(entries[2]['product_id'])
        self.assertFalse(entries[0]['read'])
        self.assertIsNone(response.data['empty_message'])
        self.assertEqual(response.data['unread_count'], 0)

        response = self.client.post('/api/v1/notifications/check/')
        self.assertEqual(len(response.data['notifications']), 4)
        self.assertEqual(response.data['unread_count'], 3)

        response = self.client.post(f'/api/v1/notifications/critical-stock-{product.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unread_count'], 2)
        read_entry = [e for e in response.data['notifications'] if e['id'] == f'critical-stock-{product.id}'][0]
        self.assertTrue(read_entry['read'])

        response = self.client.post('/api/v1/notifications/read-all/')
        self.assertEqual(response.data['unread_count'], 0)
        self.assertTrue(all(e['read'] for e in response.data['notifications']))

    def test_mark_unknown_notification(self):
        TestDataFactory.create_product(current_stock=0)
        before = self.client.post('/api/v1/notifications/check/').data
        response = self.client.post('/api/v1/notifications/does-not-exist/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, before)

    def test_sessions_are_per_user(self):
        TestDataFactory.create_product(current_stock=0)
        self.client.post('/api/v1/notifications/check/')

        other = AuthenticatedAPIClient()
        other.authenticate_user(TestDataFactory.create_user())
        response = other.get('/api/v1/notifications/')
        self.assertEqual(response.data['notifications'], [])

    def test_end_session(self):
        TestDataFactory.create_product(current_stock=0)
        self.client.post('/api/v1/notifications/check/')
        response = self.client.delete('/api/v1/notifications/session/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertIsNone(registry.get(f'user:{self.user.pk}'))
        self.assertEqual(self.client.get('/api/v1/notifications/').data['notifications'], [])

    def test_logout_closes_session(self):
        self.client.get('/api/v1/notifications/')
        response = self.client.post('/api/v1/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertIsNone(registry.get(f'user:{self.user.pk}'))


class RunStockAlertsCommandTests(TestCase):

    def test_single_check(self):
        TestDataFactory.create_product(name='Wireless Mouse', current_stock=0, reorder_threshold=20)
        TestDataFactory.create_product(name='USB Cable', current_stock=8, reorder_threshold=10)
        out = StringIO()
        call_command('run_stock_alerts', '--once', '--source', 'database', stdout=out)
        output = out.getvalue()
        self.assertIn('Wireless Mouse is completely out of stock!', output)
        self.assertIn('USB Cable is running low (8 units remaining)', output)
        self.assertIn('Found 3 items requiring attention', output)

    def test_single_check_nothing_to_report(self):
        TestDataFactory.create_product(current_stock=100, reorder_threshold=10)
        out = StringIO()
        call_command('run_stock_alerts', '--once', stdout=out)
        self.assertIn('No new notifications', out.getvalue())
