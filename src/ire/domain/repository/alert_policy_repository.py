"""Abstract repository for per-product AlertPolicy settings."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ire.domain.model.alert import AlertPolicy


class AlertPolicyRepository(ABC):

    @abstractmethod
    def get(self, product_id: str) -> AlertPolicy | None:
        """Return the policy for a product, or None if defaults apply."""

    @abstractmethod
    def save(self, policy: AlertPolicy) -> None:
        """Persist a new or updated policy."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Drop the policy for a product."""
