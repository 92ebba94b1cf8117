"""Application services: forecast and replenishment queries."""

from __future__ import annotations

from datetime import date

from ire.application.dto import ForecastLineDTO, ReplenishmentDTO
from ire.domain.service.forecast_estimator import ForecastEstimator


class ShowForecastHandler:

    def __init__(self, estimator: ForecastEstimator) -> None:
        self._estimator = estimator

    def handle(
        self,
        product_id: str,
        since: date | None = None,
        until: date | None = None,
    ) -> list[ForecastLineDTO]:
        return [
            ForecastLineDTO(
                forecast_date=row.forecast_date.isoformat(),
                projected_stock=row.projected_stock,
                projected_sales=row.projected_sales,
                method=row.forecast_method.value,
                confidence=row.confidence,
            )
            for row in self._estimator.list_forecasts(product_id, since, until)
        ]


class ShowReplenishmentHandler:

    def __init__(self, estimator: ForecastEstimator) -> None:
        self._estimator = estimator

    def handle(self, product_id: str, lead_time_days: int = 7) -> ReplenishmentDTO:
        velocity = self._estimator.sales_velocity(product_id)
        advice = self._estimator.replenishment_advice(product_id, lead_time_days)
        return ReplenishmentDTO(
            product_id=product_id,
            current_stock=advice.current_stock,
            daily_average=velocity.daily_average,
            weekly_average=velocity.weekly_average,
            monthly_average=velocity.monthly_average,
            trend=velocity.trend,
            days_until_stockout=advice.days_until_stockout,
            forecasted_stockout=(
                advice.forecasted_stockout.isoformat()
                if advice.forecasted_stockout
                else "-"
            ),
            recommended_reorder_quantity=advice.recommended_reorder_quantity,
            lead_time_days=advice.lead_time_days,
        )
