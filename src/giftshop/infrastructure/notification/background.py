"""Fire-and-forget delivery of order confirmations.

``BackgroundNotificationDispatcher`` puts each order on a queue and
returns immediately; one daemon worker thread hands the orders to the
real dispatcher.  Delivery failures are logged by the worker and never
reach the code that placed the order.
"""

from __future__ import annotations

import logging
import queue
import threading

from giftshop.domain.model.order import Order
from giftshop.domain.ports.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

_STOP = object()


class BackgroundNotificationDispatcher(NotificationDispatcher):

    def __init__(self, inner: NotificationDispatcher, max_pending: int = 1000) -> None:
        self._inner = inner
        self._queue: queue.Queue = queue.Queue(maxsize=max_pending)
        self._worker = threading.Thread(
            target=self._run, name="notification-dispatcher", daemon=True
        )
        self._worker.start()

    def send_order_confirmation(self, order: Order) -> None:
        try:
            self._queue.put_nowait(order)
        except queue.Full:
            logger.error(
                "Notification queue full; confirmation for order %s dropped", order.id
            )

    def drain(self) -> None:
        """Block until every queued confirmation has been attempted."""
        self._queue.join()

    def close(self, timeout: float | None = 30.0) -> None:
        """Finish the queued work, then stop the worker."""
        self._queue.put(_STOP)
        self._worker.join(timeout)

    def _run(self) -> None:
        while True:
            order = self._queue.get()
            try:
                if order is _STOP:
                    return
                self._inner.send_order_confirmation(order)
            except Exception:
                logger.error(
                    "Confirmation for order %s could not be delivered",
                    getattr(order, "id", "?"), exc_info=True,
                )
            finally:
                self._queue.task_done()
