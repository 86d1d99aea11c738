from datetime import datetime, timezone

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from sepsis_screen.config import get_config
from sepsis_screen.dashboard import entry_timestamp, submit_reading
from sepsis_screen.db import init_db
from sepsis_screen.frames import alerts_frame, readings_frame, trend_frame
from sepsis_screen.log import configure_logging
from sepsis_screen.risk_engine import Observation
from sepsis_screen.service import patient_summary
from sepsis_screen.simulator import demo_scenario
from sepsis_screen.storage import list_patients

st.set_page_config(page_title="Sepsis Screening", layout="wide")

config = get_config()


@st.cache_resource
def get_session_factory():
    configure_logging(config.logging)
    return init_db(config.database.url)


Session = get_session_factory()

# ---- Sidebar controls ----
st.sidebar.title("Patient")

known = [p.external_id for p in list_patients(Session)]
patient_id = st.sidebar.text_input("Patient ID", value=known[0] if known else "P001").strip()
if known:
    st.sidebar.caption("Known patients: " + ", ".join(known[:10]))

auto = st.sidebar.toggle("Auto refresh", value=False)
interval_ms = st.sidebar.slider("Refresh interval (ms)", 2000, 30000, 5000, step=1000)
if auto:
    st_autorefresh(interval=interval_ms, key="summary_refresh")

show_demo = st.sidebar.toggle("Show demo scenario", value=False)

st.sidebar.caption("Screening aid only. Not a diagnostic tool.")

# ---- Reading entry ----
if "entry_default" not in st.session_state:
    st.session_state.entry_default = datetime.now(timezone.utc).replace(second=0, microsecond=0)

with st.sidebar.form("reading_form", clear_on_submit=True):
    st.subheader("New reading")
    name = st.text_input("Name (optional)")
    location = st.text_input("Location (optional)")
    rr = st.number_input("Respiratory rate (breaths/min)", min_value=0.0, value=18.0, step=1.0)
    sbp = st.number_input("Systolic BP (mmHg)", min_value=0.0, value=120.0, step=1.0)
    mental = st.selectbox("Mental status", ["Alert", "Drowsy", "Confused", "Unresponsive"])
    day = st.date_input("Date (UTC)", value=st.session_state.entry_default.date())
    at = st.time_input("Time (UTC)", value=st.session_state.entry_default.time())
    submitted = st.form_submit_button("Record reading")

if submitted:
    if not patient_id:
        st.sidebar.error("Enter a patient ID first.")
    else:
        reading = submit_reading(
            Session, patient_id, Observation(rr, sbp, mental), entry_timestamp(day, at), name, location
        )
        if reading is None:
            st.sidebar.error("Failed to record reading")
        else:
            st.sidebar.success(f"Recorded: qSOFA {reading.qsofa_score} ({reading.qsofa_risk_label})")
            st.session_state.entry_default = datetime.now(timezone.utc).replace(second=0, microsecond=0)

# ---- UI ----
st.title("Rule-Based Sepsis Screening")

summary = patient_summary(Session, patient_id) if patient_id else None

if summary is None:
    st.info("Patient not found. Record a reading to create it.")
else:
    patient = summary["patient"]
    overall = summary["overall"]

    colA, colB, colC, colD = st.columns([2, 1, 1, 1])
    with colA:
        st.subheader(f"{patient['externalId']} — {patient['name'] or 'Unnamed'}")
        st.caption(f"Location: {patient['location'] or 'n/a'}")
    if overall:
        colB.metric("Latest qSOFA", f"{overall['latestQSOFA']}/3")
        colC.metric("Risk", overall["latestRiskLabel"])
        colD.metric("Readings", overall["totalReadings"])

    if not summary["readings"]:
        st.info("No readings yet.")
    else:
        left, right = st.columns([1.4, 1])
        with left:
            st.subheader("Trend")
            st.line_chart(trend_frame(summary["readings"]))
        with right:
            st.subheader("Alerts")
            df_alerts = alerts_frame(summary["alerts"])
            if df_alerts.empty:
                st.write("No trend alerts.")
            else:
                st.dataframe(df_alerts, use_container_width=True, hide_index=True)

        st.subheader("Readings")
        st.dataframe(readings_frame(summary["readings"]), use_container_width=True, hide_index=True)

if show_demo:
    scenario = demo_scenario().to_dict()
    st.subheader(f"Demo: {scenario['scenarioName']}")
    st.caption("Synthetic data, not stored.")
    st.line_chart(trend_frame(scenario["readings"]))
    st.dataframe(readings_frame(scenario["readings"]), use_container_width=True, hide_index=True)
