"""Per-record locks serializing multi-step writes inside one process."""
import threading
from contextlib import contextmanager
from typing import Dict, Tuple

_registry_lock = threading.Lock()
_record_locks: Dict[Tuple[str, int], threading.Lock] = {}


@contextmanager
def record_lock(kind: str, record_id: int):
     """
     Hold the lock for one record, e.g. record_lock("shop", 3).

     Locks are created on first use and kept for the life of the process.
     """
     key = (kind, record_id)
     with _registry_lock:
          lock = _record_locks.setdefault(key, threading.Lock())
     with lock:
          yield
