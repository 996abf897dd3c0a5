"""Index fund registry web UI (Streamlit).

Read-only view of one registry:

- Controller and status
- Current weights table with basis points and percent
- Allocation bar chart

Writes go through the pipelines; this app never mutates the registry.
"""

from __future__ import annotations

from pathlib import Path
import sys

import altair as alt
import pandas as pd
import streamlit as st

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import settings  # noqa: E402
from db.connections import create_registry_engine  # noqa: E402
from registry.weight_registry import TOTAL_WEIGHT_BPS  # noqa: E402
from services.registry_service import RegistryService  # noqa: E402
from transform.weight_updates import weights_frame  # noqa: E402


@st.cache_resource(show_spinner=False)
def _engine():
    return create_registry_engine()


@st.cache_data(ttl=10, show_spinner=False)
def _load_view(registry_id: str) -> tuple[str, str | None, int, pd.DataFrame]:
    registry = RegistryService(_engine(), registry_id=registry_id).load()
    holdings = pd.DataFrame(
        [
            {"asset_id": asset_id, "last_updated": holding.last_updated}
            for asset_id, holding in registry.assets.items()
        ],
        columns=["asset_id", "last_updated"],
    )
    weights = weights_frame(registry.get_weights()).merge(holdings, on="asset_id", how="left")
    return registry.status.value, registry.get_controller(), registry.rebalance_interval, weights


def _render_weights(weights: pd.DataFrame) -> None:
    if weights.empty:
        st.info("No assets registered yet.")
        return

    st.dataframe(weights, use_container_width=True, hide_index=True)
    chart = alt.Chart(weights).mark_bar(color="#2563eb").encode(
        x=alt.X("weight_pct:Q", title="Weight (%)"),
        y=alt.Y("asset_id:N", sort="-x", title="Asset"),
        tooltip=["asset_id", "weight", "weight_pct"],
    )
    st.altair_chart(chart, use_container_width=True)


def main() -> None:
    st.set_page_config(page_title="Index Fund Registry", layout="wide")
    st.title("Index Fund Registry")

    with st.sidebar:
        registry_id = st.text_input("Registry ID", value=settings.registry_id)
        if st.button("Refresh (clear cache)", use_container_width=True):
            st.cache_data.clear()
            st.rerun()

    status, controller, interval, weights = _load_view(registry_id)
    c1, c2, c3 = st.columns(3)
    c1.metric("Status", status)
    c2.metric("Controller", controller or "-")
    c3.metric("Rebalance interval (blocks)", f"{interval:,}")

    total = int(weights["weight"].sum()) if not weights.empty else 0
    st.caption(f"Total weight: {total} / {TOTAL_WEIGHT_BPS} bps")
    _render_weights(weights)


if __name__ == "__main__":
    main()
