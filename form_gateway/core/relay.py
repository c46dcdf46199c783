"""Steuert die Kommunikation mit der OpenAI Chat Completions API: schickt
den Nutzerprompt mit fester Systemanweisung ans Modell und extrahiert die
Formular-Definition aus der Antwort."""
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from form_gateway.core.config import Settings
from form_gateway.core.errors import InvalidInput, UpstreamError
from form_gateway.core.extraction import form_json_from_response

logger = logging.getLogger(__name__)

FORM_COMPONENTS = [
    "textfield", "textarea", "number", "checkbox", "radio", "select",
    "datetime", "file", "day", "time", "url", "email", "phoneNumber",
    "currency", "hidden", "password", "panel", "well", "button", "columns",
    "fieldset", "htmlelement", "content", "html", "alert", "tabs",
]

SYSTEM_MESSAGE = (
    "You are an assistant to help create form.io forms with full and completed "
    "JSON files. You can add form fields which you believe would be relevant. "
    "The components you can use are: " + ", ".join(FORM_COMPONENTS)
)

DEFAULT_MODEL = Settings.model_fields["gpt_model"].default
DEFAULT_TEMPERATURE = 1.0


class PromptRelay:
    """Leitet einen Prompt an das Modell weiter. Genau ein Call pro Anfrage,
    kein Streaming, keine Retries."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "PromptRelay":
        client = AsyncOpenAI(api_key=settings.openai_api_key)
        return cls(client, model=settings.gpt_model)

    def build_messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": prompt},
        ]

    async def complete(self, prompt: str) -> str:
        """Holt die komplette Textantwort des Modells zum Prompt."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=self.build_messages(prompt),
            )
        except openai.OpenAIError as exc:
            logger.error(f"OpenAI request failed for model {self.model}: {exc}")
            raise UpstreamError(str(exc) or "Model request failed.") from exc

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.info(f"OpenAI Response [{self.model}]: {content}")
        return content

    async def relay(self, prompt: Optional[str]) -> Dict[str, Any]:
        """Prompt -> Modell -> JSON-Objekt.

        Ablauf:
        - Leerer oder fehlender Prompt -> InvalidInput, kein Modell-Call.
        - Systemanweisung + Prompt als Nachrichtenpaar an das Modell.
        - JSON zwischen erstem '{' und letztem '}' parsen (ExtractionError sonst).
        Das Ergebnis wird nicht gegen die Komponentenliste geprüft.
        """
        if not prompt:
            raise InvalidInput("Missing prompt input.")

        logger.info(f"OpenAI Request [{self.model}]: {prompt}")
        answer = await self.complete(prompt)
        return form_json_from_response(answer)

    async def aclose(self) -> None:
        await self.client.close()
