"""
Stock notification derivation and the bounded notification log.

Everything in this module is a pure function over plain values: the
classification of a product snapshot into notifications, merging a batch
into the log, and the read-state mutations. State and timing live in
``backend.alerts.center`` and ``backend.alerts.scheduler``.
"""
import threading
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone as dt_timezone
from typing import Iterable, List, Optional

# Notification categories
CATEGORY_CRITICAL_STOCK = 'critical_stock'
CATEGORY_LOW_STOCK = 'low_stock'
CATEGORY_REORDER_NEEDED = 'reorder_needed'
CATEGORY_FORECAST_ALERT = 'forecast_alert'  # declared for clients, never produced
CATEGORY_SYSTEM = 'system'

CATEGORY_CHOICES = [
    (CATEGORY_LOW_STOCK, 'Low Stock'),
    (CATEGORY_CRITICAL_STOCK, 'Critical Stock'),
    (CATEGORY_REORDER_NEEDED, 'Reorder Needed'),
    (CATEGORY_FORECAST_ALERT, 'Forecast Alert'),
    (CATEGORY_SYSTEM, 'System'),
]

# Severities
SEVERITY_ERROR = 'error'
SEVERITY_WARNING = 'warning'
SEVERITY_INFO = 'info'
SEVERITY_SUCCESS = 'success'

SEVERITY_CHOICES = [
    (SEVERITY_INFO, 'Info'),
    (SEVERITY_WARNING, 'Warning'),
    (SEVERITY_ERROR, 'Error'),
    (SEVERITY_SUCCESS, 'Success'),
]

# Severity is a function of category, never set independently
CATEGORY_SEVERITY = {
    CATEGORY_CRITICAL_STOCK: SEVERITY_ERROR,
    CATEGORY_LOW_STOCK: SEVERITY_WARNING,
    CATEGORY_REORDER_NEEDED: SEVERITY_INFO,
    CATEGORY_FORECAST_ALERT: SEVERITY_WARNING,
    CATEGORY_SYSTEM: SEVERITY_INFO,
}

# Stock at or below this fraction of the threshold is critical
CRITICAL_RATIO = 0.5

DEFAULT_LOG_LIMIT = 50


@dataclass(frozen=True)
class Notification:
    id: str
    category: str
    title: str
    message: str
    created_at: datetime
    read: bool = False
    product_id: Optional[str] = None

    @property
    def severity(self) -> str:
        return CATEGORY_SEVERITY[self.category]


_stamp_lock = threading.Lock()
_last_stamp = 0


def next_cycle_stamp() -> int:
    """Millisecond timestamp for a cycle, strictly increasing within the process"""
    global _last_stamp
    with _stamp_lock:
        stamp = max(time.time_ns() // 1_000_000, _last_stamp + 1)
        _last_stamp = stamp
        return stamp


def _lead_time_text(lead_time_days):
    return 'unknown' if lead_time_days is None else str(lead_time_days)


def _product_notifications(product, created_at: datetime) -> List[Notification]:
    """Ordered decision list for one product: stock alert first, then reorder"""
    stock = product.current_stock or 0
    threshold = product.reorder_threshold or 0
    pid = str(product.id)

    if stock == 0:
        # No reorder companion here: only the stock <= threshold branch emits one
        return [Notification(
            id=f'out-of-stock-{pid}',
            category=CATEGORY_CRITICAL_STOCK,
            title='Out of Stock Alert',
            message=f'{product.name} is completely out of stock!',
            created_at=created_at,
            product_id=pid,
        )]

    if stock > threshold:
        return []

    if stock <= threshold * CRITICAL_RATIO:
        alert = Notification(
            id=f'critical-stock-{pid}',
            category=CATEGORY_CRITICAL_STOCK,
            title='Critical Stock Level',
            message=f'{product.name} has only {stock} units left (critical level)',
            created_at=created_at,
            product_id=pid,
        )
    else:
        alert = Notification(
            id=f'low-stock-{pid}',
            category=CATEGORY_LOW_STOCK,
            title='Low Stock Warning',
            message=f'{product.name} is running low ({stock} units remaining)',
            created_at=created_at,
            product_id=pid,
        )

    reorder = Notification(
        id=f'reorder-{pid}',
        category=CATEGORY_REORDER_NEEDED,
        title='Reorder Recommended',
        message=f'Consider reordering {product.name} (Lead time: {_lead_time_text(product.lead_time_days)} days)',
        created_at=created_at,
        product_id=pid,
    )
    return [alert, reorder]


def evaluate(products: Iterable, created_at: Optional[datetime] = None,
             cycle_stamp: Optional[int] = None) -> List[Notification]:
    """
    Derive this cycle's notifications from a product snapshot.

    Args:
        products: product snapshots in data-source order
        created_at: timestamp stamped on every notification of the cycle
        cycle_stamp: unique cycle number used in the system notification id;
            a fresh increasing stamp is taken when omitted

    Returns:
        Per-product notifications in product order, followed by one
        ``system`` summary when anything was produced.
    """
    if created_at is None:
        created_at = datetime.now(dt_timezone.utc)

    batch = []
    for product in products:
        batch.extend(_product_notifications(product, created_at))

    if batch:
        if cycle_stamp is None:
            cycle_stamp = next_cycle_stamp()
        batch.append(Notification(
            id=f'system-{cycle_stamp}',
            category=CATEGORY_SYSTEM,
            title='Inventory Check Complete',
            message=f'Found {len(batch)} items requiring attention',
            created_at=created_at,
        ))
    return batch


def merge(log: List[Notification], new_batch: Iterable[Notification],
          limit: int = DEFAULT_LOG_LIMIT) -> List[Notification]:
    """Prepend unseen notifications to the log and keep the newest ``limit``.

    Ids already in the log are dropped, read or not; existing entries are
    never replaced.
    """
    existing_ids = {n.id for n in log}
    unique_new = [n for n in new_batch if n.id not in existing_ids]
    return (unique_new + list(log))[:limit]


def mark_read(log: List[Notification], notification_id: str) -> List[Notification]:
    return [replace(n, read=True) if n.id == notification_id and not n.read else n for n in log]


def mark_all_read(log: List[Notification]) -> List[Notification]:
    return [n if n.read else replace(n, read=True) for n in log]


def count_unread(log: Iterable[Notification]) -> int:
    return sum(1 for n in log if not n.read)
