"""
Payment lifecycle: confirm, cancel, expire.

    from pakasir import payment as PY

    lifecycle = PY.PaymentLifecycle(orders, ledger, settings=settings)
    lifecycle.track(order)
    await lifecycle.confirm(order.id)
"""

from pakasir.payment._lifecycle import (
    ALLOWED_TRANSITIONS,
    can_transition,
    transition,
    PaymentLifecycle,
)
from pakasir.payment._watcher import ExpiryWatcher
from pakasir._qris import build_qris_payload, verify_qris_payload, crc16_ccitt

__all__ = (
    # State machine
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "transition",
    "PaymentLifecycle",
    # Timer
    "ExpiryWatcher",
    # QRIS
    "build_qris_payload",
    "verify_qris_payload",
    "crc16_ccitt",
)
