"""
Error taxonomy: every failure the engine reports as a value.

Hard failures travel as Error(PosError). Soft conditions (a clamped
quantity, a dropped coupon) travel as Notice values inside Ok payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from pakasir._types import ItemId


# ═══════════════════════════════════════════════════════════════════════════════
# Error Kinds
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    """Kinds of engine errors."""

    # Validation: caller-correctable
    EMPTY_CART = auto()
    INCOMPLETE_BUYER_INFO = auto()
    INVALID_CODE = auto()
    INACTIVE = auto()
    BELOW_MINIMUM = auto()
    INSUFFICIENT_BUNDLE_MEMBERS = auto()
    UNKNOWN_RESELLER = auto()
    # Capacity
    OUT_OF_STOCK = auto()
    # Conflict
    STOCK_CONFLICT = auto()
    INVALID_TRANSITION = auto()
    # Lookup / backend
    NOT_FOUND = auto()
    STORE_ERROR = auto()


VALIDATION_KINDS = frozenset({
    ErrorKind.EMPTY_CART,
    ErrorKind.INCOMPLETE_BUYER_INFO,
    ErrorKind.INVALID_CODE,
    ErrorKind.INACTIVE,
    ErrorKind.BELOW_MINIMUM,
    ErrorKind.INSUFFICIENT_BUNDLE_MEMBERS,
    ErrorKind.UNKNOWN_RESELLER,
})


@dataclass(frozen=True, slots=True)
class PosError:
    """
    Engine operation error.

    item_id / code carry the offending reference when there is one,
    so a UI can highlight the exact line or coupon field.
    """

    kind: ErrorKind
    message: str
    item_id: ItemId | None = None
    code: str | None = None

    @property
    def is_validation(self) -> bool:
        return self.kind in VALIDATION_KINDS

    def __str__(self) -> str:
        return f"{self.kind.name}: {self.message}"


class Errors:
    @staticmethod
    def empty_cart() -> PosError:
        return PosError(ErrorKind.EMPTY_CART, "cart has no lines")

    @staticmethod
    def incomplete_buyer_info(missing: tuple[str, ...]) -> PosError:
        return PosError(
            ErrorKind.INCOMPLETE_BUYER_INFO,
            f"missing buyer fields: {', '.join(missing)}",
        )

    @staticmethod
    def invalid_code(code: str) -> PosError:
        return PosError(ErrorKind.INVALID_CODE, f"coupon {code!r} does not exist", code=code)

    @staticmethod
    def inactive(code: str) -> PosError:
        return PosError(ErrorKind.INACTIVE, f"coupon {code!r} is not active", code=code)

    @staticmethod
    def below_minimum(code: str, subtotal: int, minimum: int) -> PosError:
        return PosError(
            ErrorKind.BELOW_MINIMUM,
            f"coupon {code!r} needs a subtotal of at least {minimum}, got {subtotal}",
            code=code,
        )

    @staticmethod
    def insufficient_bundle_members(groups: int, required: int) -> PosError:
        return PosError(
            ErrorKind.INSUFFICIENT_BUNDLE_MEMBERS,
            f"bundle needs {required} distinct groups, got {groups}",
        )

    @staticmethod
    def unknown_reseller(reseller_id: str) -> PosError:
        return PosError(ErrorKind.UNKNOWN_RESELLER, f"reseller {reseller_id!r} is not registered")

    @staticmethod
    def out_of_stock(item_id: ItemId) -> PosError:
        return PosError(ErrorKind.OUT_OF_STOCK, f"item {item_id!r} is out of stock", item_id=item_id)

    @staticmethod
    def stock_conflict(item_id: ItemId, requested: int, available: int) -> PosError:
        return PosError(
            ErrorKind.STOCK_CONFLICT,
            f"item {item_id!r}: requested {requested}, only {available} available",
            item_id=item_id,
        )

    @staticmethod
    def invalid_transition(order_id: str, current: str, target: str) -> PosError:
        return PosError(
            ErrorKind.INVALID_TRANSITION,
            f"order {order_id!r} cannot move {current} -> {target}",
        )

    @staticmethod
    def not_found(entity: str, ref: str) -> PosError:
        return PosError(ErrorKind.NOT_FOUND, f"{entity} {ref!r} not found", item_id=ref if entity in ("item", "cart line") else None)

    @staticmethod
    def store_error(message: str) -> PosError:
        return PosError(ErrorKind.STORE_ERROR, message)


# ═══════════════════════════════════════════════════════════════════════════════
# Notices: soft, warning-level outcomes
# ═══════════════════════════════════════════════════════════════════════════════


class NoticeKind(Enum):
    QUANTITY_CLAMPED = auto()  # requested more than is available
    BUNDLE_CLEARED = auto()  # manual mutation dropped an assembled bundle
    COUPON_CLEARED = auto()  # manual mutation dropped a coupon (strict mode)
    COUPON_DROPPED = auto()  # coupon no longer eligible after re-validation


@dataclass(frozen=True, slots=True)
class Notice:
    kind: NoticeKind
    message: str
    item_id: ItemId | None = None
    requested: int | None = None
    applied: int | None = None


__all__ = (
    "ErrorKind",
    "VALIDATION_KINDS",
    "PosError",
    "Errors",
    "NoticeKind",
    "Notice",
)
