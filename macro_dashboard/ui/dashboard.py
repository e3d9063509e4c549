"""Streamlit dashboard for macro series.

- Charts: stored series grouped by category on a shared daily axis
- Data Status: freshness and drift across series, manual refresh
"""

from datetime import datetime

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from macro_dashboard.config import ALL_SERIES, Settings
from macro_dashboard.config.series import CATEGORY_LABELS, SeriesConfig
from macro_dashboard.data.store import SeriesStore
from macro_dashboard.service import get_data_freshness, trigger_update
from macro_dashboard.sync.freshness import (
    CURRENT,
    DELAYED,
    check_synchronization,
    format_data_age,
    sync_status_badge,
    update_status,
)


STATUS_COLORS = {CURRENT: "#10b981", DELAYED: "#f59e0b"}
STALE_COLOR = "#ef4444"

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def load_frame(store: SeriesStore, configs: list[SeriesConfig]) -> pd.DataFrame:
    """Stored series side by side, one column per key, outer-joined on date."""
    columns = {}
    for config in configs:
        df = store.get_frame(config.key)
        if not df.empty:
            columns[config.key] = df["value"]

    if not columns:
        return pd.DataFrame()
    return pd.DataFrame(columns).sort_index()


def filter_period(
    frame: pd.DataFrame, year: int | None = None, months: list[int] | None = None
) -> pd.DataFrame:
    """Restrict to a calendar year and, optionally, some of its months."""
    if frame.empty or year is None:
        return frame
    frame = frame[frame.index.year == year]
    if months:
        frame = frame[frame.index.month.isin(months)]
    return frame


def render_category_chart(frame: pd.DataFrame, configs: list[SeriesConfig], title: str) -> None:
    """Render one category as a multi-line chart."""
    visible = [c for c in configs if c.key in frame.columns]
    if frame.empty or not visible:
        st.info(f"No {title.lower()} data for this period")
        return

    fig = go.Figure()
    for config in visible:
        values = frame[config.key].dropna()
        unit = config.unit or ""
        fig.add_trace(go.Scatter(
            x=values.index, y=values,
            mode="lines", line=dict(color=config.color, width=1.75),
            name=config.name,
            hovertemplate=f"{config.name}: %{{y:.2f}} {unit}<extra></extra>",
        ))

    fig.update_layout(
        height=320, margin=dict(l=0, r=20, t=30, b=0),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        legend=dict(
            orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1,
            font=dict(size=10, color="#94a3b8"), bgcolor="rgba(0,0,0,0)",
        ),
        title=dict(text=title, font=dict(size=12, color="#94a3b8"), x=0),
        xaxis=dict(showgrid=True, gridcolor="#1e293b", tickfont=dict(color="#64748b", size=10)),
        yaxis=dict(showgrid=True, gridcolor="#1e293b", tickfont=dict(color="#64748b", size=10)),
        hovermode="x unified",
    )
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def render_charts_tab(store: SeriesStore) -> None:
    frame = load_frame(store, list(ALL_SERIES))
    if frame.empty:
        st.error("No data available. Run: macro-dashboard fetch")
        return

    years = sorted(frame.index.year.unique(), reverse=True)
    col_year, col_months, col_categories = st.columns([1, 2, 3])
    with col_year:
        year = st.selectbox("Year", options=["All", *years], index=0)
    with col_months:
        selected_months = st.multiselect(
            "Months",
            options=list(range(1, 13)),
            format_func=lambda m: MONTH_LABELS[m - 1],
            disabled=year == "All",
        )
    with col_categories:
        categories = st.multiselect(
            "Categories",
            options=list(CATEGORY_LABELS),
            default=list(CATEGORY_LABELS),
            format_func=lambda c: CATEGORY_LABELS[c],
        )

    period = filter_period(frame, None if year == "All" else int(year), selected_months)

    c1, c2, c3 = st.columns(3)
    c1.metric("Active Series", f"{period.notna().any().sum()} of {len(ALL_SERIES)}")
    c2.metric("Unique Dates", f"{len(period.index):,}")
    c3.metric("Data Points", f"{int(period.notna().sum().sum()):,}")

    for category in categories:
        configs = [c for c in ALL_SERIES if c.category is category]
        render_category_chart(period, configs, CATEGORY_LABELS[category])


def render_status_tab(store: SeriesStore, settings: Settings) -> None:
    freshness = get_data_freshness(store)
    metadata = store.load_metadata()
    if freshness is None or metadata is None:
        st.warning("No metadata found. Run: macro-dashboard fetch")
        return

    status = update_status(freshness["isStale"], freshness["needsUpdate"])
    last_updated = datetime.combine(metadata.last_updated, datetime.min.time())
    st.markdown(
        f"""<div style="border-left: 4px solid {status['color']}; padding: 0.5rem 1rem;">
            <div style="color: {status['color']}; font-weight: 600;">{status['message']}</div>
            <div style="color: #94a3b8; font-size: 0.8rem;">
                Last updated {metadata.last_updated} ({format_data_age(last_updated)})
            </div>
        </div>""",
        unsafe_allow_html=True,
    )

    report = check_synchronization(metadata)
    if report is not None:
        badge = sync_status_badge(report)
        st.markdown(f"**Sync:** {badge['status']} ({badge['message']})")
        rows = [
            {
                "Series": s.key,
                "Latest": s.latest_date.isoformat(),
                "Records": s.record_count,
                "Days behind newest": (report.newest_date - s.latest_date).days,
                "Status": s.status,
            }
            for s in report.series_details
        ]
        table = pd.DataFrame(rows)
        st.dataframe(
            table.style.apply(
                lambda col: [f"color: {STATUS_COLORS.get(v, STALE_COLOR)}" for v in col],
                subset=["Status"],
            ),
            use_container_width=True,
            hide_index=True,
        )

    if st.button("Update data", disabled=not settings.has_api_key()):
        with st.spinner("Fetching new data from FRED..."):
            result = trigger_update(settings)
        if not result["success"]:
            st.error(result["error"])
        elif result["updated"]:
            st.success(
                f"Updated {', '.join(result['seriesUpdated'])} "
                f"({result['newRecords']} new records)"
            )
        else:
            st.info("All data is up to date")


def main() -> None:
    """Main dashboard entry point."""
    st.set_page_config(
        page_title="Macro Dashboard",
        page_icon="",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    st.markdown(
        """<div style="padding: 0.5rem 0 1rem 0; border-bottom: 1px solid #334155; margin-bottom: 1rem;">
            <h1 style="margin: 0; font-size: 1.5rem;">Macro Dashboard</h1>
            <div style="color: #64748b; font-size: 0.75rem; margin-top: 0.25rem;">
                Yields, inflation, volatility and currencies on one daily calendar. Data: FRED
            </div>
        </div>""",
        unsafe_allow_html=True,
    )

    settings = Settings()
    store = SeriesStore(settings.data_dir)

    tab1, tab2 = st.tabs(["Charts", "Data Status"])

    with tab1:
        render_charts_tab(store)

    with tab2:
        render_status_tab(store, settings)


if __name__ == "__main__":
    main()
