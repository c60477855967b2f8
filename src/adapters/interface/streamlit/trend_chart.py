"""Net worth trend presentation logic for the Streamlit UI.

This module contains pure, testable transformations from the snapshot
history recorded by ``SnapshotRecorder`` to a trend series and a Plotly
line figure. The recorder does not guarantee chronological order, so the
series is always rebuilt from snapshots sorted by date.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from src.domain.models.finance import Snapshot

if TYPE_CHECKING:  # pragma: no cover
    import plotly.graph_objects as go


MIN_TREND_POINTS = 2

NET_WORTH_COLOR = "#3B82F6"
ASSETS_COLOR = "#10B981"
LIABILITIES_COLOR = "#EF4444"


@dataclass(frozen=True)
class TrendSeries:
    """Chronological series derived from snapshots.

    Attributes:
        dates: Snapshot days, ascending.
        net_worth: Net worth per snapshot.
        total_assets: Total assets per snapshot.
        total_liabilities: Total liabilities per snapshot.
        change: Net worth of the last snapshot minus the first one.
        change_percent: ``change`` relative to the first net worth, when
            that is not zero.
    """

    dates: list[date] = field(default_factory=list)
    net_worth: list[Decimal] = field(default_factory=list)
    total_assets: list[Decimal] = field(default_factory=list)
    total_liabilities: list[Decimal] = field(default_factory=list)
    change: Decimal = Decimal("0")
    change_percent: Decimal | None = None

    @property
    def has_enough_data(self) -> bool:
        """True once at least two snapshots can be compared."""
        return len(self.dates) >= MIN_TREND_POINTS


def build_trend_series(snapshots: Iterable[Snapshot]) -> TrendSeries:
    """Sort snapshots by date and build the chart series.

    With fewer than two snapshots the series is still returned and
    ``has_enough_data`` is False; callers show a hint instead of a chart.

    Args:
        snapshots: Snapshot history in any order.

    Returns:
        TrendSeries: Chronological series with the first-to-last change.
    """
    ordered = sorted(snapshots, key=lambda snapshot: snapshot.date)
    net_worth = [snapshot.net_worth for snapshot in ordered]
    change = Decimal("0")
    change_percent = None
    if len(ordered) >= MIN_TREND_POINTS:
        first, last = net_worth[0], net_worth[-1]
        change = last - first
        if first != 0:
            change_percent = (change / abs(first)) * Decimal("100")
    return TrendSeries(
        dates=[snapshot.date for snapshot in ordered],
        net_worth=net_worth,
        total_assets=[snapshot.total_assets for snapshot in ordered],
        total_liabilities=[snapshot.total_liabilities for snapshot in ordered],
        change=change,
        change_percent=change_percent,
    )


def build_trend_figure(series: TrendSeries) -> "go.Figure":
    """Build a Plotly line figure from a trend series.

    Args:
        series: Series with at least two points.

    Returns:
        Plotly figure ready to be displayed in Streamlit.
    """
    import plotly.graph_objects as go

    x_values = [day.isoformat() for day in series.dates]
    lines = (
        ("Net worth", series.net_worth, NET_WORTH_COLOR, 3),
        ("Assets", series.total_assets, ASSETS_COLOR, 2),
        ("Liabilities", series.total_liabilities, LIABILITIES_COLOR, 2),
    )
    fig = go.Figure()
    for name, values, color, width in lines:
        fig.add_trace(
            go.Scatter(
                x=x_values,
                y=[float(value) for value in values],
                name=name,
                mode="lines+markers",
                line=dict(color=color, width=width),
            )
        )
    fig.update_layout(
        margin=dict(l=8, r=8, t=8, b=8),
        height=360,
        hovermode="x unified",
        legend=dict(orientation="h", y=-0.15),
    )
    return fig


__all__ = [
    "MIN_TREND_POINTS",
    "TrendSeries",
    "build_trend_series",
    "build_trend_figure",
]
