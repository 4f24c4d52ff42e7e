"""
Ingest Errors
=============

Every way a request can be turned away, with the HTTP status and the message
the device gets back. Validation steps return an `IngestFailure` instead of
raising; the router sends the first one it sees.

    IngestError             Status  Stage
    ----------------------  ------  ---------------------
    METHOD_NOT_ALLOWED      405     request gate
    UNAUTHORIZED            401     request gate
    EMPTY_BODY              400     payload parser
    INVALID_JSON            400     payload parser
    MISSING_FIELD           400     field validator
    INVALID_DEVICE_FIELD    400     field validator
    INVALID_NUMERIC_FIELD   400     field validator
    STORE_CONNECTION        500     persistence writer
    STORE_WRITE             500     persistence writer

Author: Sensor Ingest Team
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IngestError(Enum):
    """Error kinds. Each value is (status_code, message_template)."""

    METHOD_NOT_ALLOWED = (405, "Método não permitido. Use POST.")
    UNAUTHORIZED = (401, "API key inválida ou ausente.")
    EMPTY_BODY = (400, "Body vazio.")
    INVALID_JSON = (400, "JSON inválido.")
    MISSING_FIELD = (400, "Campo obrigatório ausente: {field}")
    INVALID_DEVICE_FIELD = (400, "Campo device inválido.")
    INVALID_NUMERIC_FIELD = (400, "Campo {field} inválido (esperado número).")
    STORE_CONNECTION = (500, "Falha ao conectar no banco.")
    STORE_WRITE = (500, "Falha ao inserir no banco.")

    def __init__(self, status_code: int, template: str):
        self.status_code = status_code
        self.template = template


@dataclass(frozen=True)
class IngestFailure:
    """
    A rejected request.

    Args:
        error: Which kind of failure
        field: Field name for the field-level messages
        details: Underlying error text (store failures only)
    """

    error: IngestError
    field: Optional[str] = None
    details: Optional[str] = None

    @property
    def status_code(self) -> int:
        return self.error.status_code

    @property
    def message(self) -> str:
        return self.error.template.format(field=self.field)

    def to_body(self, expose_details: bool = False) -> dict:
        """JSON body for this failure; `details` only when asked for."""
        body = {"ok": False, "error": self.message}
        if expose_details and self.details is not None:
            body["details"] = self.details
        return body
