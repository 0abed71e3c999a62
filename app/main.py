from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI

from app.api.dependencies import get_settings_from_app
from app.config import (
    ALLOWED_APP_ENVS,
    ALLOWED_LLM_ADAPTERS,
    BrandIntelSettings,
    get_settings,
    load_env_files,
)
from app.schemas.brand_intel import HealthResponse
from app.services.brand_intel_service import BrandIntelService, build_brand_intel_service
from app.services.customer_upload_service import build_customer_upload_service

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate environment variables at startup.

    Raises RuntimeError listing every malformed variable so the operator can
    fix all problems in one restart cycle.

    Rules:
    - LLM_ADAPTER, when set, must be one of anthropic, openai, mock.
    - APP_ENV, when set, must be one of development, production, test.
    - Missing credentials are only warned about: the demo runs on fallbacks.
    """

    load_env_files()

    errors: list[str] = []

    # --- LLM adapter ----------------------------------------------------
    adapter = os.getenv("LLM_ADAPTER", "anthropic").strip().lower()
    if adapter not in ALLOWED_LLM_ADAPTERS:
        errors.append(
            f"LLM_ADAPTER='{adapter}' is not valid. "
            f"Allowed values: {sorted(ALLOWED_LLM_ADAPTERS)}."
        )

    # --- App environment ------------------------------------------------
    app_env = os.getenv("APP_ENV", "production").strip().lower()
    if app_env not in ALLOWED_APP_ENVS:
        errors.append(
            f"APP_ENV='{app_env}' is not valid. Allowed values: {sorted(ALLOWED_APP_ENVS)}."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    # --- Credentials (warnings only) -----------------------------------
    if adapter == "anthropic" and not (
        os.getenv("LLM_API_KEY", "").strip() or os.getenv("ANTHROPIC_API_KEY", "").strip()
    ):
        logger.warning("No Anthropic API key set; insights will use canned fallbacks.")
    elif adapter == "openai" and not (
        os.getenv("LLM_API_KEY", "").strip() or os.getenv("OPENAI_API_KEY", "").strip()
    ):
        logger.warning("No OpenAI API key set; insights will use canned fallbacks.")

    missing_identity = [
        name for name in ("AA_ORIGIN", "AA_KEY_ID", "AA_SECRET") if not os.getenv(name, "").strip()
    ]
    if missing_identity:
        logger.warning(
            "Identity provider not configured (missing %s); enrichment will tag records as error.",
            ", ".join(missing_identity),
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: BrandIntelSettings | None = None,
    brand_intel_service: BrandIntelService | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Settings are built once here and handed to every service; tests pass
    their own settings or a prebuilt service.
    """

    _configure_logging()
    _validate_env()

    settings = settings or get_settings()

    application = FastAPI(
        title="BrandIntel API",
        version="1.0.0",
    )
    application.state.settings = settings
    application.state.brand_intel_service = brand_intel_service or build_brand_intel_service(settings)
    application.state.customer_upload_service = build_customer_upload_service(settings.upload)

    from app.api.routers import brand_intel_router

    application.include_router(brand_intel_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck(
        app_settings: BrandIntelSettings = Depends(get_settings_from_app),
    ) -> HealthResponse:
        return HealthResponse(
            status="ok",
            llm_adapter=app_settings.llm.adapter,
            llm_configured=app_settings.llm.adapter == "mock" or bool(app_settings.llm.api_key),
            identity_configured=app_settings.identity.is_configured,
        )

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
    )
