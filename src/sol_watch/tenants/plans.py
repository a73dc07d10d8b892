"""Plan tiers — watched-address quota and command cooldown per tier."""

from __future__ import annotations

import enum


class PlanTier(enum.StrEnum):
    """Subscription tier of a tenant."""

    FREE = "FREE"
    PRO = "PRO"
    ELITE = "ELITE"

    @property
    def max_addresses(self) -> int:
        """Maximum number of addresses the tenant may watch."""
        return _MAX_ADDRESSES[self]

    @property
    def command_cooldown(self) -> float:
        """Minimum delay between two chat commands, in seconds.

        Informational: reported by ``GET /v1/tenants/{id}`` for the chat front
        end, which throttles its own commands. The HTTP routes do not apply it.
        """
        return _COMMAND_COOLDOWNS[self]


_MAX_ADDRESSES: dict[PlanTier, int] = {
    PlanTier.FREE: 2,
    PlanTier.PRO: 10,
    PlanTier.ELITE: 50,
}

_COMMAND_COOLDOWNS: dict[PlanTier, float] = {
    PlanTier.FREE: 10.0,
    PlanTier.PRO: 3.0,
    PlanTier.ELITE: 1.0,
}

DEFAULT_PLAN = PlanTier.FREE
