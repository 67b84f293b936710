"""
Engine settings: behavior configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from types import MappingProxyType

from pakasir._types import Clock, PaymentMethod


# ═══════════════════════════════════════════════════════════════════════════════
# Defaults
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_BUNDLE_TIERS: Mapping[int, int] = MappingProxyType({2: 5, 3: 10, 4: 15})
"""Distinct product groups → discount percent. Larger counts use the top tier."""

DEFAULT_BUYER_FIELDS: Mapping[PaymentMethod, tuple[str, ...]] = MappingProxyType({
    PaymentMethod.CASH: ("name",),
    PaymentMethod.QRIS: ("name",),
    PaymentMethod.TRANSFER: ("name",),
    PaymentMethod.WHATSAPP: ("name", "phone"),
})


# ═══════════════════════════════════════════════════════════════════════════════
# Settings: Full Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Engine configuration.

    Fluent builder pattern: chain methods to configure.

    Example:
        settings = (
            Settings()
            .with_payment_ttl(minutes=10)
            .with_tick_interval(0.5)
            .with_merchant("TOKO BUDI", city="BANDUNG")
        )

    Note: Immutable. Each method returns new Settings, so one instance
    can be shared between a facade, its lifecycle and its watcher.
    """

    payment_ttl: timedelta = timedelta(seconds=300)
    tick_interval: float = 1.0
    thousands_marker: str = "k"
    bundle_tiers: Mapping[int, int] = DEFAULT_BUNDLE_TIERS
    min_bundle_groups: int = 2
    # Note: False keeps an applied coupon across manual cart edits and
    # re-validates it on every reprice. True drops it on any manual edit.
    clear_coupon_on_mutation: bool = False
    required_buyer_fields: Mapping[PaymentMethod, tuple[str, ...]] = DEFAULT_BUYER_FIELDS
    merchant_name: str = "FUTO DIGITAL"
    merchant_city: str = "JAKARTA"
    store_retry_attempts: int = 3
    store_retry_delay: float = 0.05
    clock: Clock = field(default=datetime.now)

    def __post_init__(self) -> None:
        if self.payment_ttl <= timedelta(0):
            raise ValueError("payment_ttl must be positive")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        if self.min_bundle_groups < 1:
            raise ValueError("min_bundle_groups must be >= 1")
        if self.store_retry_attempts < 1:
            raise ValueError("store_retry_attempts must be >= 1")

    def with_payment_ttl(
        self,
        *,
        seconds: float | None = None,
        minutes: float | None = None,
        delta: timedelta | None = None,
    ) -> Settings:
        """
        Set the asynchronous payment window.

        Example:
            .with_payment_ttl(seconds=300)  # QRIS default
            .with_payment_ttl(minutes=15)
        """
        if delta is None:
            delta = timedelta(seconds=(seconds or 0) + (minutes or 0) * 60)
        return replace(self, payment_ttl=delta)

    def with_tick_interval(self, seconds: float) -> Settings:
        """How often the expiry watcher re-checks a pending payment."""
        return replace(self, tick_interval=seconds)

    def with_thousands_marker(self, marker: str) -> Settings:
        return replace(self, thousands_marker=marker)

    def with_bundle_tiers(self, tiers: Mapping[int, int], *, min_groups: int | None = None) -> Settings:
        """
        Replace the bundle discount schedule.

        Example:
            .with_bundle_tiers({2: 5, 3: 10, 4: 15})
        """
        return replace(
            self,
            bundle_tiers=MappingProxyType(dict(tiers)),
            min_bundle_groups=self.min_bundle_groups if min_groups is None else min_groups,
        )

    def with_clear_coupon_on_mutation(self, clear: bool = True) -> Settings:
        return replace(self, clear_coupon_on_mutation=clear)

    def with_required_buyer_fields(self, method: PaymentMethod, *fields: str) -> Settings:
        """
        Set which buyer fields a checkout channel demands.

        Example:
            .with_required_buyer_fields(PaymentMethod.TRANSFER, "name", "email")
        """
        updated = dict(self.required_buyer_fields)
        updated[method] = tuple(fields)
        return replace(self, required_buyer_fields=MappingProxyType(updated))

    def with_merchant(self, name: str, *, city: str | None = None) -> Settings:
        return replace(self, merchant_name=name, merchant_city=city or self.merchant_city)

    def with_store_retry(self, attempts: int, *, delay: float | None = None) -> Settings:
        """Attempts (total, not extra) for transient store failures."""
        return replace(
            self,
            store_retry_attempts=attempts,
            store_retry_delay=self.store_retry_delay if delay is None else delay,
        )

    def with_clock(self, clock: Clock) -> Settings:
        return replace(self, clock=clock)

    def buyer_fields_for(self, method: PaymentMethod) -> tuple[str, ...]:
        return self.required_buyer_fields.get(method, ("name",))


__all__ = (
    "DEFAULT_BUNDLE_TIERS",
    "DEFAULT_BUYER_FIELDS",
    "Settings",
)
