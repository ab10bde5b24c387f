"""In-process locks serialising checkouts.

A checkout holds its user's lock for the whole placement, so a cart is
turned into at most one order. It also holds one lock per product in the
cart, always taken in sorted id order, so two checkouts competing for the
same stock run one after the other and never deadlock.
"""

from contextlib import ExitStack, contextmanager
from threading import Lock, RLock


class CheckoutLocks:
    def __init__(self):
        self._registry_lock = Lock()
        self._user_locks: dict[str, RLock] = {}
        self._product_locks: dict[str, RLock] = {}

    def _lock_for(self, registry, key) -> RLock:
        with self._registry_lock:
            lock = registry.get(key)
            if lock is None:
                lock = registry[key] = RLock()
            return lock

    @contextmanager
    def user(self, user_id):
        lock = self._lock_for(self._user_locks, str(user_id))
        with lock:
            yield

    @contextmanager
    def products(self, product_ids):
        keys = sorted({str(product_id) for product_id in product_ids})
        with ExitStack() as stack:
            for key in keys:
                stack.enter_context(self._lock_for(self._product_locks, key))
            yield


checkout_locks = CheckoutLocks()
