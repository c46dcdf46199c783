"""FastAPI-Einstiegspunkt für das Form Gateway."""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from form_gateway.core.config import Settings
from form_gateway.core.logging_setup import setup_logging
from form_gateway.core.models import ErrorResponse
from form_gateway.core.rate_limit import RateLimiter
from form_gateway.core.relay import PromptRelay
from form_gateway.routers import prompt as prompt_router

logger = logging.getLogger(__name__)

HOST = "0.0.0.0"


def client_identifier(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


def validation_message(errors: List[Dict[str, Any]]) -> str:
    """Body ist kein JSON-Objekt -> wie fehlender Prompt; falscher Typ im Feld -> ungültig."""
    if any(tuple(error.get("loc", ()))[:2] == ("body", "prompt") for error in errors):
        return "Invalid request body."
    return "Missing prompt input."


def create_app(
    settings: Optional[Settings] = None,
    relay: Optional[PromptRelay] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """Baut die App mit allen Services.

    - Settings werden einmalig geladen (fehlt OPENAI_API_KEY -> Abbruch).
    - Relay (OpenAI) und Rate Limiter landen im App State.
    - CORS liegt außen, damit auch 429-Antworten CORS-Header tragen.
    """
    settings = settings or Settings()
    setup_logging(settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Form Gateway is running on http://{HOST}:{settings.port} "
            f"(model {settings.gpt_model}, limit {settings.api_daily_limit}/"
            f"{settings.rate_limit_window_seconds}s)"
        )
        yield
        await app.state.relay.aclose()

    app = FastAPI(
        lifespan=lifespan,
        title="Form Gateway",
        version="1.0.0",
        description="Turns natural-language prompts into form.io JSON via OpenAI.",
    )
    app.state.settings = settings
    app.state.relay = relay or PromptRelay.from_settings(settings)
    app.state.rate_limiter = rate_limiter or RateLimiter.from_settings(settings)

    @app.middleware("http")
    async def enforce_rate_limit(request: Request, call_next):
        limiter: RateLimiter = request.app.state.rate_limiter
        limit_status = limiter.hit(client_identifier(request))
        headers = limit_status.headers()

        if not limit_status.allowed:
            headers["Retry-After"] = headers["RateLimit-Reset"]
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=ErrorResponse(error=limiter.message).model_dump(),
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=validation_message(exc.errors())).model_dump(),
        )

    app.include_router(prompt_router.router)
    return app


def run() -> None:
    settings = Settings()
    uvicorn.run(create_app(settings), host=HOST, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
