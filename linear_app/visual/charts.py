"""Chart builders (Altair) for dashboard series and prompt-driven charts."""

from __future__ import annotations

import altair as alt
import pandas as pd

from linear_app.analytics.prompt.spec_chart import ChartPayload
from linear_app.core.config import DEFAULT_CHART_THEME
from linear_app.core.models import ChartSpec

Y_AXIS_TITLES = {
    "count": "Issues",
    "avgEstimate": "Average estimate",
    "sumEstimate": "Total estimate",
}


def streamlit_theme(theme: str | None) -> str | None:
    """Value for ``st.altair_chart(theme=...)``; None renders plain Altair styling."""
    return None if (theme or DEFAULT_CHART_THEME) == "altair" else "streamlit"


def throughput_chart(rows: list[dict[str, object]]) -> alt.Chart | None:
    if not rows:
        return None
    data = pd.DataFrame(rows)
    line = (
        alt.Chart(data)
        .mark_line(color="#1f77b4", point=True)
        .encode(
            x=alt.X("week:O", title="ISO week"),
            y=alt.Y("count:Q", title="Completed"),
            tooltip=[alt.Tooltip("week:O", title="Week"), alt.Tooltip("count:Q", title="Completed")],
        )
        .properties(height=260)
    )
    return line


def category_chart(
    rows: list[dict[str, object]],
    *,
    value_field: str = "count",
    title: str = "",
    color: str = "#d62728",
    x_title: str = "Bugs",
) -> alt.Chart | None:
    """Horizontal bar chart for name/count (or name/value) rows."""
    if not rows:
        return None
    data = pd.DataFrame(rows)
    return (
        alt.Chart(data)
        .mark_bar(color=color)
        .encode(
            y=alt.Y("name:N", sort="-x", title=None),
            x=alt.X(f"{value_field}:Q", title=x_title),
            tooltip=[alt.Tooltip("name:N", title="Bucket"), alt.Tooltip(f"{value_field}:Q", title="Count")],
        )
        .properties(title=title, height=max(120, 28 * len(data)))
    )


def crosstab_heatmap(rows: list[dict[str, object]]) -> alt.Chart | None:
    if not rows:
        return None
    data = pd.DataFrame(rows)
    base = alt.Chart(data).encode(
        x=alt.X("priority:N", title="Priority"),
        y=alt.Y("severity:N", title="Severity"),
    )
    cells = base.mark_rect().encode(
        color=alt.Color("count:Q", scale=alt.Scale(scheme="reds"), legend=alt.Legend(title="Bugs")),
        tooltip=["severity:N", "priority:N", "count:Q"],
    )
    labels = base.mark_text(baseline="middle").encode(text="count:Q")
    return (cells + labels).properties(height=220)


def spec_chart(payload: ChartPayload, spec: ChartSpec) -> alt.Chart | None:
    """Render a prompt-chart payload with the mark its spec asks for."""
    if not payload.data:
        return None
    y_title = Y_AXIS_TITLES.get(spec.y_axis, spec.y_axis)
    data = pd.DataFrame(payload.data)

    if spec.kind in ("pie", "donut"):
        inner = 60 if spec.kind == "donut" else 0
        return (
            alt.Chart(data)
            .mark_arc(innerRadius=inner)
            .encode(
                theta=alt.Theta("value:Q", title=y_title),
                color=alt.Color("name:N", title=spec.x_axis),
                tooltip=["name:N", "value:Q"],
            )
            .properties(title=spec.title)
        )

    if payload.group_names:
        data = data.melt(id_vars=[payload.x_key], var_name="series", value_name="value").dropna(subset=["value"])
        color = alt.Color("series:N", title=spec.group_by)
        value_field = "value"
    else:
        color = alt.value("#1f77b4")
        value_field = "y" if spec.kind == "scatter" else "value"

    chart = alt.Chart(data)
    if spec.kind == "line":
        chart = chart.mark_line(point=True)
    elif spec.kind == "scatter":
        chart = chart.mark_circle(size=80)
    else:
        chart = chart.mark_bar()
    return chart.encode(
        x=alt.X(f"{payload.x_key}:N", title=spec.x_axis),
        y=alt.Y(f"{value_field}:Q", title=y_title),
        color=color,
        tooltip=list(data.columns),
    ).properties(title=spec.title, height=320)
