"""API-Modelle für das Form Gateway: eingehender Prompt und Fehlerantwort."""
from typing import Optional

from pydantic import BaseModel


class PromptRequest(BaseModel):
    """Eingehende Anfrage mit der Formularbeschreibung des Nutzers."""

    prompt: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
