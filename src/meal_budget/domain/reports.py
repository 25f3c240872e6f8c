"""Report domain models."""

from dataclasses import dataclass, field
from enum import StrEnum

REPORT_METRICS: tuple[str, ...] = ("calories", "protein", "carbs", "fat", "cost")

ALL_PEOPLE = "all"


class ReportType(StrEnum):
    """Supported report periods."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class MetricSeries:
    """Planned and consumed values for one metric, aligned with labels."""

    planned: tuple[float, ...] = ()
    consumed: tuple[float, ...] = ()


@dataclass(frozen=True)
class Report:
    """Planned vs. consumed time series over a date range."""

    labels: tuple[str, ...] = ()
    datasets: dict[str, MetricSeries] = field(
        default_factory=lambda: {metric: MetricSeries() for metric in REPORT_METRICS}
    )

    def is_empty(self) -> bool:
        """Return True when the report carries no dates."""
        return not self.labels

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation."""
        return {
            "labels": list(self.labels),
            "datasets": {
                metric: {
                    "planned": list(series.planned),
                    "consumed": list(series.consumed),
                }
                for metric, series in self.datasets.items()
            },
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "Report":
        """Rebuild a report from its serialised representation."""
        raw_datasets = payload.get("datasets")
        if not isinstance(raw_datasets, dict):
            raw_datasets = {}
        datasets = {}
        for metric in REPORT_METRICS:
            raw = raw_datasets.get(metric) or {}
            datasets[metric] = MetricSeries(
                planned=tuple(float(value) for value in raw.get("planned", [])),
                consumed=tuple(float(value) for value in raw.get("consumed", [])),
            )
        labels = payload.get("labels") or []
        return cls(labels=tuple(str(label) for label in labels), datasets=datasets)
