"""JSON-file-backed implementation of ForecastRepository."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from ire.domain.model.forecast import InventoryForecast
from ire.domain.model.value_objects import ForecastMethod
from ire.domain.repository.forecast_repository import ForecastRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_date,
    dump_datetime,
    load_date,
    load_datetime,
)


class JsonForecastRepository(ForecastRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def replace(
        self,
        product_id: str,
        start: date,
        end: date,
        forecasts: list[InventoryForecast],
    ) -> None:
        first, last = dump_date(start), dump_date(end)
        with self._file.lock:
            # ISO dates compare correctly as strings
            records = [
                raw
                for raw in self._file.load()
                if not (
                    raw["product_id"] == product_id
                    and first <= raw["forecast_date"] <= last
                )
            ]
            records.extend(self._to_raw(f) for f in forecasts)
            self._file.persist(records)

    def list_for_product(
        self,
        product_id: str,
        since: date | None = None,
        until: date | None = None,
    ) -> list[InventoryForecast]:
        rows = []
        for raw in self._file.load():
            if raw["product_id"] != product_id:
                continue
            forecast = self._to_domain(raw)
            if since and forecast.forecast_date < since:
                continue
            if until and forecast.forecast_date > until:
                continue
            rows.append(forecast)
        return sorted(rows, key=lambda f: f.forecast_date)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(forecast: InventoryForecast) -> dict:
        return {
            "product_id": forecast.product_id,
            "forecast_date": dump_date(forecast.forecast_date),
            "projected_stock": forecast.projected_stock,
            "projected_sales": forecast.projected_sales,
            "forecast_method": forecast.forecast_method.value,
            "confidence": forecast.confidence,
            "created_at": dump_datetime(forecast.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryForecast:
        return InventoryForecast(
            product_id=raw["product_id"],
            forecast_date=load_date(raw["forecast_date"]),
            projected_stock=raw["projected_stock"],
            projected_sales=raw["projected_sales"],
            forecast_method=ForecastMethod(raw["forecast_method"]),
            confidence=raw["confidence"],
            created_at=load_datetime(raw["created_at"]),
        )
