"""Transcriptor -- Streamlit UI.

Multi-page application for analysing audio recordings or pasted transcripts
and browsing saved analyses.
"""

from __future__ import annotations

import streamlit as st

from src.analysis.combiner import kind_display_name
from src.analysis_config import AnalysisKind, display_name_for
from src.ui.api_client import analyze_audio, analyze_text, check_health, get_history

# Matches the API's default upload ceiling
MAX_AUDIO_MB = 25

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Transcriptor", layout="wide")

# ---------------------------------------------------------------------------
# Sidebar -- navigation + analysis type + API status
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Transcriptor")
    st.markdown("---")

    page = st.radio(
        "Navigate",
        ["Analyse Audio", "Analyse Text", "History"],
        label_visibility="collapsed",
    )

    st.markdown("---")
    st.subheader("Analysis type")

    sidebar_kind: str = st.selectbox(
        "Analysis type",
        options=[k.value for k in AnalysisKind],
        format_func=lambda x: display_name_for(AnalysisKind(x)),
        key="sidebar_kind",
        label_visibility="collapsed",
    )

    st.markdown("---")

    # API connection indicator
    api_healthy = check_health()
    if api_healthy:
        st.markdown(":green_circle: API connected")
    else:
        st.markdown(":red_circle: API unreachable")


def _show_result(result: dict) -> None:  # type: ignore[type-arg]
    metadata = result.get("metadata", {})
    col_a, col_b, col_c = st.columns(3)
    col_a.metric("Estimated tokens", str(metadata.get("estimated_tokens", "N/A")))
    col_b.metric("Parts", str(metadata.get("chunk_count", 1)))
    col_c.metric("Saved as", str(result.get("id") or "not saved"))

    st.subheader("Analysis")
    st.markdown(result.get("analysis", ""))

    with st.expander("Transcript"):
        st.write(result.get("transcript", ""))


# ---------------------------------------------------------------------------
# Page: Analyse Audio
# ---------------------------------------------------------------------------
if page == "Analyse Audio":
    st.header("Analyse Audio")
    st.write("Upload a recording to transcribe and analyse it. The result is saved.")

    uploaded_file = st.file_uploader(
        f"Choose an audio file (max {MAX_AUDIO_MB} MB)",
        type=["mp3", "wav", "m4a", "ogg"],
    )

    too_large = uploaded_file is not None and uploaded_file.size > MAX_AUDIO_MB * 1024 * 1024
    if uploaded_file is not None and too_large:
        st.error(
            f"The file is too large ({uploaded_file.size / (1024 * 1024):.2f} MB). "
            f"The maximum is {MAX_AUDIO_MB} MB; please compress the audio."
        )

    if st.button("Transcribe and analyse", disabled=uploaded_file is None or too_large):
        if not api_healthy:
            st.error("Cannot analyse: the API server is not reachable.")
        elif uploaded_file is not None:
            with st.spinner("Transcribing and analysing... this may take a few minutes."):
                result = analyze_audio(
                    file_content=uploaded_file.getvalue(),
                    filename=uploaded_file.name,
                    kind=sidebar_kind,
                )
            if result:
                st.success("Analysis complete.")
                _show_result(result)
            # Error case is already handled inside analyze_audio via st.error

# ---------------------------------------------------------------------------
# Page: Analyse Text
# ---------------------------------------------------------------------------
elif page == "Analyse Text":
    st.header("Analyse Text")
    st.write("Paste a transcript. Long transcripts are analysed in parts.")

    text = st.text_area("Transcript", height=300, placeholder="Paste the transcript here...")

    if st.button("Analyse", disabled=not text.strip()):
        if not api_healthy:
            st.error("Cannot analyse: the API server is not reachable.")
        else:
            with st.spinner("Analysing..."):
                result = analyze_text(text=text, kind=sidebar_kind)
            if result:
                if result.get("metadata", {}).get("was_chunked"):
                    st.info("The transcript was long and was analysed in several parts.")
                _show_result(result)

# ---------------------------------------------------------------------------
# Page: History
# ---------------------------------------------------------------------------
elif page == "History":
    st.header("History")
    st.write("Saved audio analyses, newest first.")

    if not api_healthy:
        st.warning("The API server is not reachable. Cannot load the history.")
    else:
        history = get_history()
        if not history:
            st.info("No saved analyses yet. Analyse an audio file to get started.")
        else:
            for row in history:
                kind_label = kind_display_name(row.get("kind", ""))
                with st.expander(f"{row.get('created_at', 'N/A')} -- {kind_label}"):
                    st.markdown(row.get("analysis", ""))
                    st.markdown("---")
                    st.write(row.get("transcript", ""))
