"""Application service: Run Forecast use case (batch)."""

from __future__ import annotations

from ire.domain.exceptions import ValidationError
from ire.domain.model.value_objects import ForecastMethod
from ire.domain.service.forecast_estimator import ForecastEstimator


def parse_method(raw: str | None) -> ForecastMethod | None:
    if raw is None:
        return None
    try:
        return ForecastMethod(raw)
    except ValueError:
        raise ValidationError(f"Unknown forecast method '{raw}'")


class RunForecastHandler:

    def __init__(self, estimator: ForecastEstimator) -> None:
        self._estimator = estimator

    def handle(
        self,
        product_id: str | None = None,
        method: str | None = None,
    ) -> dict[str, int]:
        """Recompute forecasts and return the rows written per product."""
        chosen = parse_method(method)
        if product_id is not None:
            return {product_id: len(self._estimator.estimate(product_id, chosen))}
        return self._estimator.run_all(chosen)
