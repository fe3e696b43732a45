"""HTTP client wrapper for the Transcript Analysis FastAPI backend."""

from __future__ import annotations

import os

import httpx
import streamlit as st

API_URL = os.getenv("API_URL", "http://localhost:8000")


def _error_message(r: httpx.Response) -> str:
    """Build a readable message from the API's tagged error body."""
    try:
        body = r.json()
    except ValueError:
        return f"HTTP {r.status_code}"
    message = body.get("error", f"HTTP {r.status_code}")
    if body.get("details"):
        message = f"{message}: {body['details']}"
    return message


def check_health() -> bool:
    """Return True if the API server responds to /health."""
    try:
        r = httpx.get(f"{API_URL}/health", timeout=5.0)
        return r.status_code == 200
    except httpx.ConnectError:
        return False


def analyze_text(text: str, kind: str) -> dict:  # type: ignore[type-arg]
    """Send pasted transcript text to the analysis endpoint."""
    try:
        r = httpx.post(
            f"{API_URL}/api/analyze-text",
            json={"text": text, "kind": kind},
            timeout=120.0,
        )
        if r.is_error:
            st.error(f"Analysis failed: {_error_message(r)}")
            return {}
        return r.json()["data"]  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Analysis failed: {e}")
        return {}


def analyze_audio(file_content: bytes, filename: str, kind: str) -> dict:  # type: ignore[type-arg]
    """Upload an audio recording for transcription and analysis."""
    try:
        r = httpx.post(
            f"{API_URL}/api/analyze-audio",
            files={"audio": (filename, file_content)},
            data={"kind": kind},
            timeout=300.0,
        )
        if r.is_error:
            st.error(f"Analysis failed: {_error_message(r)}")
            return {}
        return r.json()["data"]  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Analysis failed: {e}")
        return {}


def get_history(limit: int = 50) -> list[dict]:  # type: ignore[type-arg]
    """Fetch the most recent saved analyses."""
    try:
        r = httpx.get(f"{API_URL}/api/history", params={"limit": limit}, timeout=10.0)
        r.raise_for_status()
        return r.json()["data"]  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return []
