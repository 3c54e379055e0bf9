"""Per-call options for resolving a parsed expression."""

from __future__ import annotations

from dataclasses import dataclass

from timephrase.models.instant import Instant


@dataclass(frozen=True)
class ResolverConfig:
    """
    Flags that steer disambiguation.

    ``default_to_past`` picks the nearest matching day at or before now for
    under-specified expressions like "Tuesday"; when false the nearest at or
    after now wins. Pay periods are ``pay_period_length`` days long and
    counted from ``pay_period_start``, which has no default.
    """

    default_to_past: bool = True
    monday_starts_week: bool = True
    pay_period_length: int = 14
    pay_period_start: Instant | None = None

    def __post_init__(self) -> None:
        if self.pay_period_length < 1:
            raise ValueError("pay_period_length must be at least one day")
