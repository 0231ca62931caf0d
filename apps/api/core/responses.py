"""
Helpers para la estructura de respuesta estándar { statusCode, data, message, success }.
Todos los endpoints de la API deben usar estas funciones para garantizar
coherencia en el formato de respuesta.
"""

from dataclasses import dataclass, field
from typing import Any

from core.errors import ApiError

DEFAULT_SUCCESS_MESSAGE = "success"


@dataclass(frozen=True)
class ApiResponse:
    """
    Resultado de una llamada a la API.
    `success` se calcula una única vez al construir: status_code < 400.
    """

    status_code: int
    data: Any
    message: str = DEFAULT_SUCCESS_MESSAGE
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "success", self.status_code < 400)

    def to_dict(self) -> dict:
        return {
            "statusCode": self.status_code,
            "data": self.data,
            "message": self.message,
            "success": self.success,
        }


def ok(data: Any = None, status_code: int = 200, message: str = DEFAULT_SUCCESS_MESSAGE) -> dict:
    """Respuesta exitosa."""
    return ApiResponse(status_code, data, message).to_dict()


def err(exc: ApiError, include_trace: bool = False) -> dict:
    """
    Respuesta de error (para exception handlers globales).
    La traza solo se añade si se pide explícitamente; nunca en producción.
    """
    body = exc.to_dict()
    if include_trace:
        body["trace"] = exc.trace
    return body
