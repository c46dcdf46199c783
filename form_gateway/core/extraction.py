"""Zieht die Formular-Definition aus der Freitext-Antwort des Modells.

Das Modell liefert JSON oft mit Einleitung oder Schlusssatz ("Here is the
form: {...} Thanks!"). Wir nehmen alles vom ersten '{' bis zum letzten '}'
und parsen das als JSON. Kein echter Parser.
"""
import json
import logging
from typing import Any, Dict, Optional

from form_gateway.core.errors import ExtractionError

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    # NaN, Infinity, -Infinity: kein gültiges JSON.
    raise ValueError(f"Invalid constant '{name}'")


def form_json_from_response(response: Optional[str]) -> Dict[str, Any]:
    """Liefert das JSON-Objekt zwischen erstem '{' und letztem '}'.

    Wirft ExtractionError, wenn kein '{' vorkommt, kein schließendes '}'
    danach folgt oder der Ausschnitt kein gültiges JSON ist.
    """
    text = response or ""

    start = text.find("{")
    if start == -1:
        logger.error(f"No JSON object in model response: {text!r}")
        raise ExtractionError("No JSON object found in model response.")

    end = text.rfind("}")
    if end < start:
        logger.error(f"Unterminated JSON object in model response: {text!r}")
        raise ExtractionError("Invalid JSON response format: missing closing brace.")

    candidate = text[start : end + 1]
    try:
        return json.loads(candidate, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        logger.error(f"JSON parsing error: {exc}")
        raise ExtractionError(f"Invalid JSON response format: {exc.msg}") from exc
    except ValueError as exc:
        logger.error(f"JSON parsing error: {exc}")
        raise ExtractionError(f"Invalid JSON response format: {exc}") from exc
