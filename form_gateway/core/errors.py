"""Fehlerklassen des Form Gateways. Jede Klasse kennt den HTTP-Status,
mit dem der Router sie beantwortet."""


class FormGatewayError(Exception):
    """Basisklasse; die Message geht unverändert an den Client."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(FormGatewayError):
    """Prompt fehlt oder ist leer."""

    status_code = 400


class ExtractionError(FormGatewayError):
    """Modell hat geantwortet, aber ohne parsebares JSON-Objekt."""


class UpstreamError(FormGatewayError):
    """Der Aufruf an OpenAI selbst ist fehlgeschlagen (Netz, Auth, Quota)."""
