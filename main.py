"""
Odour Dispersion Prediction Dashboard: Streamlit Interface.

Run with:  streamlit run main.py
"""

import sys
import os

# Ensure the project root is on the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import logging
from datetime import datetime, timezone

import streamlit as st
import streamlit.components.v1 as components

from data.interfaces import MockSiteDataProvider
from data.mock_data import DEMO_SITE_ID, get_wind_scenarios
from data.prediction_store import InMemoryPredictionStore
from data.weather import WeatherObservation
from models.dispersion import ModelVersion
from models.stability import dispersion_outlook, stability_label
from predictions.lifecycle import (
    IncompleteWeatherError,
    PredictionError,
    build_predictions,
    generate_predictions,
)
from predictions.playback import build_playback_frames
from visualization.compass_widget import compass_html
from visualization.plots import create_intensity_profile_figure, create_prediction_map_figure
from config import (
    DEFAULT_MODEL_VERSION,
    DEFAULT_PLAYBACK_SNAPSHOTS,
    DEFAULT_VALIDITY_HOURS,
    STABILITY_CLASSES,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ── Page Config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Odour Dispersion Predictions",
    page_icon="💨",
    layout="wide",
)

st.title("Odour Dispersion Predictions")
st.markdown(
    "Predicted odour footprints for each emission source on the site map, "
    "based on the latest weather observation."
)

provider = MockSiteDataProvider()
if "prediction_store" not in st.session_state:
    st.session_state.prediction_store = InMemoryPredictionStore()
store = st.session_state.prediction_store

sources = provider.get_emission_sources(DEMO_SITE_ID)
latest = provider.get_latest_weather(DEMO_SITE_ID)

# ── Sidebar Controls ─────────────────────────────────────────────────────────

st.sidebar.header("Model")

model_version = st.sidebar.radio(
    "Dispersion Model",
    [v.value for v in ModelVersion],
    index=[v.value for v in ModelVersion].index(DEFAULT_MODEL_VERSION),
    help="**plume-v2**: travel-time footprint with high/medium/low intensity "
         "contours. **gaussian-v1**: sigma-based footprint, no contours.",
)

validity_hours = st.sidebar.slider(
    "Validity Window (hours)",
    min_value=0.5,
    max_value=6.0,
    value=DEFAULT_VALIDITY_HOURS,
    step=0.5,
)

st.sidebar.header("Weather")

weather_mode = st.sidebar.radio("Weather Source", ["Latest observation", "What-if scenario"])

if weather_mode == "What-if scenario":
    scenarios = get_wind_scenarios()
    scenario_names = ["Custom"] + [s["name"] for s in scenarios]
    selected_scenario = st.sidebar.selectbox("Preset Scenario", scenario_names)
    if selected_scenario != "Custom":
        scenario = next(s for s in scenarios if s["name"] == selected_scenario)
    else:
        scenario = {"speed": 3.0, "direction": 270, "stability_class": "D"}

    wind_speed = st.sidebar.slider(
        "Wind Speed (m/s)", min_value=0.0, max_value=15.0,
        value=float(scenario["speed"]), step=0.5,
    )
    wind_direction = st.sidebar.slider(
        "Wind Direction (degrees, meteorological: direction wind comes FROM)",
        min_value=0, max_value=359, value=int(scenario["direction"]), step=5,
    )
    stability_class = st.sidebar.select_slider(
        "Atmospheric Stability (A=very unstable, F=stable)",
        options=list(STABILITY_CLASSES),
        value=scenario["stability_class"],
    )
    weather = WeatherObservation(
        site_id=DEMO_SITE_ID,
        recorded_at=datetime.now(timezone.utc),
        wind_speed_mps=wind_speed,
        wind_direction_deg=float(wind_direction),
        stability_class=stability_class,
    )
else:
    weather = latest

if weather is not None and weather.is_complete:
    st.sidebar.markdown("---")
    components.html(
        compass_html(weather.wind_direction_deg, weather.wind_speed_mps, weather.stability_class),
        height=230,
    )

# ── Generation ───────────────────────────────────────────────────────────────

now = datetime.now(timezone.utc)

if weather_mode == "Latest observation":
    if st.button("Generate predictions"):
        try:
            result = generate_predictions(
                DEMO_SITE_ID, provider, store,
                validity_hours=validity_hours, model_version=model_version,
            )
            st.success(result.message)
            if result.skipped:
                st.warning(f"Skipped {len(result.skipped)} source(s) with unusable geometry.")
        except IncompleteWeatherError as exc:
            st.error(f"No weather data: {exc}")
        except PredictionError as exc:
            st.error(f"Failed: {exc}")
    predictions = store.list_current(DEMO_SITE_ID, now)
    if not predictions:
        st.info("No current predictions. Generate a new batch from the latest weather.")
else:
    batch = build_predictions(
        DEMO_SITE_ID, sources, weather, now,
        validity_hours=validity_hours, model_version=model_version,
    )
    predictions = batch.predictions

# ── Map ──────────────────────────────────────────────────────────────────────

col_map, col_info = st.columns([3, 1])

with col_map:
    fig = create_prediction_map_figure(
        predictions, sources, weather=weather,
        title=f"{len(predictions)} footprint(s) | {model_version}",
    )
    st.plotly_chart(fig, use_container_width=True)

with col_info:
    st.subheader("Conditions")
    if weather is not None and weather.is_complete:
        st.metric("Wind", f"{weather.wind_speed_mps:.1f} m/s")
        st.metric("From", f"{weather.wind_direction_deg:.0f}°")
        st.metric("Stability", f"{weather.stability_class} ({stability_label(weather.stability_class)})")
        st.caption(dispersion_outlook(weather.stability_class))
        if weather.temperature_c is not None:
            st.metric("Temperature", f"{weather.temperature_c:.1f} °C")
    else:
        st.warning("Latest weather observation is incomplete.")

    st.subheader("Peak Intensity")
    names = {s.id: (s.name or s.id) for s in sources}
    for pred in sorted(predictions, key=lambda p: p.peak_intensity or 0, reverse=True):
        st.write(f"**{names.get(pred.source_id, pred.source_id)}**: {pred.peak_intensity}")

profiles = {
    names.get(p.source_id, p.source_id): p.geometry.intensity_profile
    for p in predictions
}
if any(profiles.values()):
    st.plotly_chart(create_intensity_profile_figure(profiles), use_container_width=True)

# ── Historical Playback ─────────────────────────────────────────────────────

st.header("Historical Playback")

history = provider.get_weather_history(DEMO_SITE_ID, limit=DEFAULT_PLAYBACK_SNAPSHOTS)
frames = build_playback_frames(DEMO_SITE_ID, sources, history, model_version=model_version)

if not frames:
    st.info("No historical weather data available")
else:
    frame_index = st.slider(
        "Snapshot",
        min_value=0,
        max_value=len(frames) - 1,
        value=len(frames) - 1,
        format="%d",
    )
    frame = frames[frame_index]
    st.caption(frame.recorded_at.strftime("%b %d, %H:%M UTC"))
    st.plotly_chart(
        create_prediction_map_figure(frame.predictions, sources, weather=frame.weather),
        use_container_width=True,
    )
