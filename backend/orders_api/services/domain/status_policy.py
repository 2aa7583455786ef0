"""
Order status transition policies.

The permissive policy (default) accepts any status change. The strict policy
follows ORDER_TRANSITIONS and keeps delivery-only states for delivery orders.
Selected with the ORDER_TRANSITION_POLICY setting.
"""

from __future__ import annotations

from typing import Protocol

from shared.config.constants import (
    DELIVERY_ONLY_STATUSES,
    ORDER_TRANSITIONS,
    OrderType,
)


class TransitionPolicy(Protocol):
    name: str

    def allows(self, from_status: str, to_status: str, order_type: str) -> bool:
        ...


class PermissivePolicy:
    name = "permissive"

    def allows(self, from_status: str, to_status: str, order_type: str) -> bool:
        return True


class StrictPolicy:
    name = "strict"

    def allows(self, from_status: str, to_status: str, order_type: str) -> bool:
        if to_status not in ORDER_TRANSITIONS.get(from_status, []):
            return False
        if to_status in DELIVERY_ONLY_STATUSES and order_type != OrderType.DELIVERY.value:
            return False
        return True


_POLICIES: dict[str, TransitionPolicy] = {
    PermissivePolicy.name: PermissivePolicy(),
    StrictPolicy.name: StrictPolicy(),
}


def get_transition_policy(name: str) -> TransitionPolicy:
    """Look up a policy by name. Unknown names raise KeyError."""
    return _POLICIES[name]
