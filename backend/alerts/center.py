"""Per-session holder of the notification log and its unread counter."""
import logging
import threading
from typing import List, Optional

from django.conf import settings

from .notifications import Notification, evaluate, merge, mark_read, mark_all_read, count_unread
from .sources import DataSourceUnavailable, ProductSource, get_product_source

logger = logging.getLogger(__name__)


class NotificationCenter:
    """
    Owns one notification log (newest first, bounded) and the unread badge count.

    The counter is refreshed from the log as it was *before* the cycle's
    batch is merged, so after a cycle it lags the log by one cycle until the
    next cycle or a read mutation. Clients reading ``unread_count`` see
    that lag.

    At most one cycle is in flight per center: a manual check and a
    scheduled tick queue behind each other, so the batch merged last always
    comes from the most recent product snapshot.
    """

    def __init__(self, source: Optional[ProductSource] = None, limit: Optional[int] = None):
        self.source = source or get_product_source()
        self.limit = limit if limit is not None else settings.STOCK_ALERTS.get('LOG_LIMIT', 50)
        self._log: List[Notification] = []
        self._unread_count = 0
        self._lock = threading.Lock()
        # Held for the whole fetch + evaluate + merge; _lock only guards state
        self._cycle_lock = threading.Lock()

    @property
    def notifications(self) -> List[Notification]:
        with self._lock:
            return list(self._log)

    @property
    def unread_count(self) -> int:
        with self._lock:
            return self._unread_count

    def run_cycle(self) -> List[Notification]:
        """Evaluate the current products and merge the result into the log.

        Returns the notifications that were actually added. A data source
        failure skips the cycle and leaves log and counter untouched.
        """
        with self._cycle_lock:
            try:
                products = self.source.list_products()
            except DataSourceUnavailable as e:
                logger.warning(f"Stock check skipped, product data unavailable: {str(e)}")
                return []

            batch = evaluate(products)
            with self._lock:
                previous = self._log
                self._log = merge(previous, batch, self.limit)
                self._unread_count = count_unread(previous)
                known_ids = {n.id for n in previous}

        added = [n for n in batch if n.id not in known_ids]
        logger.info(
            f"Stock check complete: {len(products)} products, "
            f"{len(batch)} notifications derived, {len(added)} new"
        )
        return added

    def mark_read(self, notification_id: str) -> bool:
        """Mark one entry read. Unknown or already-read ids are a no-op.

        Returns True when an unread entry was flipped.
        """
        with self._lock:
            was_unread = any(n.id == notification_id and not n.read for n in self._log)
            if not was_unread:
                return False
            self._log = mark_read(self._log, notification_id)
            self._unread_count = max(0, self._unread_count - 1)
            return True

    def mark_all_read(self) -> None:
        with self._lock:
            self._log = mark_all_read(self._log)
            self._unread_count = 0
