from collections.abc import Callable
from datetime import datetime

# Clinic-local wall clock; injected so tests can freeze "now"
Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now()
