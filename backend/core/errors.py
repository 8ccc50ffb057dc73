"""
Error taxonomy for the console.

Two families:
- WorkflowError: raised locally, before any network call (bad input, intent
  not allowed in the current stage, action already running).
- DataApiError: raised by the data API client when the shop API answers
  with an error or cannot be reached.

Every error carries a structured ``code`` for programmatic handling and a
pt-BR ``message`` suitable for the operator.
"""

from typing import Any, Dict, Optional


class ConsoleError(Exception):
    _default_messages: Dict[str, str] = {}
    default_code = "ERROR"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None, **data: Any):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


class WorkflowError(ConsoleError):
    _default_messages = {
        "VALIDATION": "Dados inválidos",
        "CONFIRMATION_MISMATCH": "O texto digitado não confere com a descrição do produto",
        "INVALID_TRANSITION": "Ação indisponível neste momento",
        "ACTION_IN_PROGRESS": "Aguarde: a operação anterior ainda está em andamento",
    }


class ValidationError(WorkflowError):
    """Input rejected before reaching the data API.

    ``data["fields"]`` maps each offending field to its message.
    """

    default_code = "VALIDATION"

    @property
    def fields(self) -> Dict[str, str]:
        return self.data.get("fields", {})


class ConfirmationMismatchError(ValidationError):
    default_code = "CONFIRMATION_MISMATCH"


class InvalidTransitionError(WorkflowError):
    default_code = "INVALID_TRANSITION"


class ActionInProgressError(WorkflowError):
    default_code = "ACTION_IN_PROGRESS"


class DataApiError(ConsoleError):
    """Failure reported by (or while talking to) the shop data API."""

    _default_messages = {
        "CONFLICT": "Operação recusada pelo servidor",
        "NOT_FOUND": "Registro não encontrado",
        "TRANSIENT": "Falha de comunicação com o servidor",
    }

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
        **data: Any,
    ):
        super().__init__(message or server_message, **data)
        self.status_code = status_code
        self.server_message = server_message


class ConflictError(DataApiError):
    default_code = "CONFLICT"


class NotFoundError(DataApiError):
    default_code = "NOT_FOUND"


class TransientError(DataApiError):
    default_code = "TRANSIENT"
