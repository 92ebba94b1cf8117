"""Abstract repository for InventoryForecast rows."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ire.domain.model.forecast import InventoryForecast


class ForecastRepository(ABC):

    @abstractmethod
    def replace(
        self,
        product_id: str,
        start: date,
        end: date,
        forecasts: list[InventoryForecast],
    ) -> None:
        """Drop a product's rows dated ``start..end`` inclusive, then store ``forecasts``."""

    @abstractmethod
    def list_for_product(
        self,
        product_id: str,
        since: date | None = None,
        until: date | None = None,
    ) -> list[InventoryForecast]:
        """Return a product's rows ordered by forecast date."""
