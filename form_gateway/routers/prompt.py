"""Prompt-Router stellt den einzigen Endpunkt des Form Gateways bereit."""
import logging
from typing import Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from form_gateway.core.errors import FormGatewayError
from form_gateway.core.models import ErrorResponse, PromptRequest

router = APIRouter(tags=["Prompt"])
logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/prompt",
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_form(request: Request, payload: Optional[PromptRequest] = None):
    """Haupt-Endpunkt: Prompt rein, form.io JSON raus.

    Pipeline:
    1) Prompt prüfen (leer/fehlend -> 400).
    2) Prompt + Systemanweisung an OpenAI (Relay).
    3) JSON aus der Antwort extrahieren; Fehler -> 500 mit Message.
    """
    relay = request.app.state.relay
    prompt = payload.prompt if payload is not None else None

    try:
        return await relay.relay(prompt)
    except FormGatewayError as exc:
        if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(f"Rejected prompt request: {exc.message}")
        else:
            logger.error(f"Prompt processing error ({type(exc).__name__}): {exc.message}")
        return error_response(exc.status_code, exc.message)
    except Exception as exc:
        logger.exception("Prompt processing error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal Server Error"
        )
