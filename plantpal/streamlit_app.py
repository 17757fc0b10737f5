import asyncio
import logging

import streamlit as st

from plantpal import config
from plantpal.agent.core import GeminiDiagnoser
from plantpal.agent.models import DiagnosisReport
from plantpal.catalog import PLANT_TYPES, UPLOAD_TYPES
from plantpal.errors import MissingApiKey
from plantpal.pipe import DiagnosisSession, Outcome
from plantpal.preferences import ThemePreference

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# --- CONSTANTS & CONFIG ---
DARK_CSS = """
<style>
.stApp { background-color: #111827; color: #e5e7eb; }
.stApp h1, .stApp h2, .stApp h3, .stApp h4, .stApp p, .stApp li, .stApp label { color: #e5e7eb; }
</style>
"""
SYMPTOM_PLACEHOLDER = (
    "e.g., My tomato plant's leaves are yellow with brown spots, and the lower leaves are wilting..."
)

# Camera view states. The browser only asks for the device once the view is STREAMING.
CAMERA_REQUESTING = "requesting"
CAMERA_STREAMING = "streaming"


# --- 1. RESOURCES (Cached) ---
@st.cache_resource
def load_diagnoser():
    """Diagnoser settings only; a client is built per attempt. Raises MissingApiKey without GOOGLE_API_KEY."""
    return GeminiDiagnoser()


@st.cache_resource
def load_preferences():
    return ThemePreference()


# --- 2. STATE HELPERS ---
def get_session(diagnoser) -> DiagnosisSession:
    if "session" not in st.session_state:
        st.session_state.session = DiagnosisSession(diagnoser)
    return st.session_state.session


def reset_uploader():
    st.session_state.uploader_key = st.session_state.get("uploader_key", 0) + 1


def close_camera_view():
    # Dropping the camera_input widget stops the browser stream.
    st.session_state.camera_view = None
    st.session_state.camera_key = st.session_state.get("camera_key", 0) + 1


def init_theme(preferences: ThemePreference) -> str:
    if "theme" not in st.session_state:
        st.session_state.theme = preferences.load(os_preference=st.context.theme.type)
    return st.session_state.theme


# --- 3. UI SECTIONS ---
def render_header(preferences: ThemePreference):
    col_title, col_toggle = st.columns([5, 1])
    with col_title:
        st.title("🌿 Plant Pal")
        st.caption("Your AI plant doctor")
    with col_toggle:
        label = "🌙 Dark" if st.session_state.theme == "light" else "☀️ Light"
        if st.button(label, help="Toggle theme", key="toggle_theme"):
            st.session_state.theme = preferences.toggle(st.session_state.theme)
            st.rerun()


def render_camera_view(session: DiagnosisSession):
    with st.container(border=True):
        if st.session_state.camera_view == CAMERA_REQUESTING:
            st.subheader("📷 Enable Camera Access")
            st.write("To take a photo of your plant, please grant permission to use your device's camera.")
            col_use, col_cancel = st.columns(2)
            if col_use.button("Use Camera", type="primary", key="use_camera"):
                st.session_state.camera_view = CAMERA_STREAMING
                st.rerun()
            if col_cancel.button("Cancel", key="camera_cancel_request"):
                close_camera_view()
                st.rerun()
            return

        picture = st.camera_input(
            "Take a photo of your plant",
            key=f"camera_{st.session_state.get('camera_key', 0)}",
            help="If nothing shows up, check the camera permission in your browser settings.",
        )
        if picture is not None:
            session.set_image(picture.getvalue())
            close_camera_view()
            st.rerun()
        if st.button("Cancel", key="camera_cancel_stream"):
            close_camera_view()
            st.rerun()


def render_image_input(session: DiagnosisSession):
    st.markdown("**Upload a photo (optional)**")
    if session.image:
        # Any way an image arrives ends the camera view.
        if st.session_state.get("camera_view"):
            close_camera_view()
        st.image(session.image, caption="Plant photo", width=320)
        if st.button("❌ Remove image", disabled=session.busy, key="remove_image"):
            session.clear_image()
            reset_uploader()
            st.rerun()
        return

    uploaded_file = st.file_uploader(
        "Upload Plant Image",
        type=UPLOAD_TYPES,
        key=f"uploader_{st.session_state.get('uploader_key', 0)}",
        disabled=session.busy,
        label_visibility="collapsed",
    )
    if uploaded_file is not None:
        session.set_image(uploaded_file.getvalue())
        if st.session_state.get("camera_view"):
            close_camera_view()
        st.rerun()

    if st.session_state.get("camera_view"):
        render_camera_view(session)
    elif st.button("📷 Take Photo", disabled=session.busy, key="take_photo"):
        st.session_state.camera_view = CAMERA_REQUESTING
        st.rerun()


def render_report(report: DiagnosisReport):
    with st.container(border=True):
        st.subheader("✨ Diagnosis Summary")
        st.write(report.summary)

    for disease in report.possible_diseases:
        with st.container(border=True):
            st.markdown(f"### {disease.disease_name}")
            st.write(disease.description)
            col_remedies, col_prevention = st.columns(2)
            with col_remedies:
                st.markdown("**💊 Remedies**")
                for remedy in disease.remedies:
                    st.write(f"- {remedy}")
            with col_prevention:
                st.markdown("**🛡️ Prevention**")
                for tip in disease.prevention:
                    st.write(f"- {tip}")


def render_empty_state():
    with st.container(border=True):
        st.markdown("### 🍃 Ready for Diagnosis")
        st.write(
            "Upload a photo and describe the symptoms of your plant, "
            "and our AI assistant will help you find a solution."
        )


# --- 4. STREAMLIT UI ---
def main():
    st.set_page_config(page_title="Plant Pal", page_icon="🌿", layout="centered")

    preferences = load_preferences()
    if init_theme(preferences) == "dark":
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    try:
        diagnoser = load_diagnoser()
    except MissingApiKey as e:
        st.error(f"Plant Pal is not configured: {e}")
        st.stop()

    session = get_session(diagnoser)
    st.session_state.setdefault("camera_view", None)
    st.session_state.setdefault("camera_key", 0)
    render_header(preferences)

    with st.container(border=True):
        st.selectbox(
            "Plant Type (optional)",
            PLANT_TYPES,
            index=None,
            placeholder="Select or search for a plant type...",
            key="plant_type",
            disabled=session.busy,
        )
        st.text_area(
            "Describe the Symptoms",
            placeholder=SYMPTOM_PLACEHOLDER,
            key="description",
            height=150,
            disabled=session.busy,
        )
        session.plant_type = st.session_state.plant_type
        session.description = st.session_state.description

        render_image_input(session)

        if st.button(
            "🔍 Diagnose Plant", type="primary", width="stretch", disabled=not session.can_submit, key="diagnose"
        ):
            if st.session_state.get("camera_view"):
                close_camera_view()
            with st.spinner("Analyzing symptoms and image..."):
                asyncio.run(session.submit())
            if session.outcome == Outcome.SUCCEEDED:
                reset_uploader()
            st.rerun()

        if session.error:
            st.error(f"**Error:** {session.error}")

    if session.report is not None:
        render_report(session.report)
    else:
        render_empty_state()

    st.caption("Powered by Plant Pal AI")


if __name__ == "__main__":
    main()
