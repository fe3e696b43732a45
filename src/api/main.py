import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_error_handlers
from src.api.models import DiagnosticsResponse
from src.api.routes.analysis import router as analysis_router
from src.api.routes.history import router as history_router
from src.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Transcript Analysis API",
    description="LLM-powered analysis of interview and meeting transcripts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:8501",
    ],
    allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(analysis_router)
app.include_router(history_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@app.get("/api/diagnostics", response_model=DiagnosticsResponse)
async def diagnostics() -> DiagnosticsResponse:
    """Report which credentials are configured, without revealing them."""
    anthropic_ok = bool(settings.anthropic_api_key)
    assemblyai_ok = bool(settings.assemblyai_api_key)
    supabase_ok = bool(settings.supabase_url and settings.supabase_key)
    return DiagnosticsResponse(
        anthropic_configured=anthropic_ok,
        assemblyai_configured=assemblyai_ok,
        supabase_configured=supabase_ok,
        all_configured=anthropic_ok and assemblyai_ok and supabase_ok,
    )
