"""
Error estándar de la API.
Cualquier fallo que llegue al cliente se normaliza a esta forma:
{ statusCode, data: null, message, success: false, errors: [...] }

La traza de diagnóstico se guarda en el objeto para los logs del servidor,
pero NUNCA forma parte del cuerpo que se devuelve al cliente.
"""

import sys
import traceback
from typing import Any

DEFAULT_ERROR_MESSAGE = "Something went wrong"

# Campos públicos que no se pueden reasignar tras la construcción
_READ_ONLY_FIELDS = frozenset({"status_code", "data", "message", "success", "errors", "trace"})


def _capture_trace(owner: object) -> str:
    """
    Captura la pila de llamadas desde el punto donde se construyó `owner`.
    Se saltan los frames del propio constructor (incluidas subclases que
    llamen a super().__init__) para que la traza apunte al llamador.
    """
    frame = sys._getframe(1)
    while frame is not None and frame.f_locals.get("self") is owner:
        frame = frame.f_back
    return "".join(traceback.format_stack(frame))


class ApiError(Exception):
    """
    Fallo estructurado de la API, pensado para lanzarse con `raise`.

    Ejemplo:
        raise ApiError(400, "Invalid input", [{"field": "email", "error": "Invalid format"}])
    """

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        errors: list[Any] | None = None,
        trace: str = "",
    ) -> None:
        if status_code is None:
            raise TypeError("ApiError requiere status_code")

        message = message or DEFAULT_ERROR_MESSAGE
        super().__init__(message)

        object.__setattr__(self, "status_code", status_code)
        object.__setattr__(self, "data", None)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "success", False)
        object.__setattr__(self, "errors", errors if errors is not None else [])
        object.__setattr__(self, "trace", trace or _capture_trace(self))

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _READ_ONLY_FIELDS:
            raise AttributeError(f"ApiError.{name} es de solo lectura")
        super().__setattr__(name, value)

    def __reduce__(self):
        # copy / pickle reconstruyen desde los argumentos del constructor
        return (type(self), (self.status_code, self.message, self.errors, self.trace))

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Cuerpo JSON para el cliente (sin traza)."""
        return {
            "statusCode": self.status_code,
            "data": self.data,
            "message": self.message,
            "success": self.success,
            "errors": self.errors,
        }
