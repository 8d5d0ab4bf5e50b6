"""Errores del dominio.

Solo los fallos de credencial y de servicio se modelan como excepciones; una
respuesta del modelo con forma inválida es un resultado esperado (None), no
una excepción.
"""

from __future__ import annotations


INVALID_CREDENTIAL_MESSAGE = (
    "La clave API de Gemini no es válida o ha caducado. Por favor, verifica tu configuración."
)
CREDENTIAL_NOT_CONFIGURED_MESSAGE = (
    "La clave API de Gemini no ha sido configurada. Usa `sintaxis config set-key` "
    "o define GEMINI_API_KEY en el entorno."
)
SERVICE_UNAVAILABLE_MESSAGE = (
    "No se pudo obtener una respuesta del servicio después de varios intentos."
)


class SintaxisError(RuntimeError):
    """Base de los errores propios de la aplicación."""


class CredentialError(SintaxisError):
    """Problemas con la clave API: no se reintenta."""


class CredentialNotConfiguredError(CredentialError):
    def __init__(self, message: str = CREDENTIAL_NOT_CONFIGURED_MESSAGE) -> None:
        super().__init__(message)


class InvalidCredentialError(CredentialError):
    def __init__(self, message: str = INVALID_CREDENTIAL_MESSAGE) -> None:
        super().__init__(message)


class EmptyCredentialError(CredentialError, ValueError):
    def __init__(self, message: str = "La clave API no puede estar vacía.") -> None:
        super().__init__(message)


class ServiceUnavailableError(SintaxisError):
    def __init__(self, message: str = SERVICE_UNAVAILABLE_MESSAGE) -> None:
        super().__init__(message)


class RequestRejectedError(SintaxisError):
    """El proveedor rechazó la petición (4xx que no es de credencial)."""

    def __init__(self, status_code: int | None, detail: str = "") -> None:
        self.status_code = status_code
        message = f"El servicio rechazó la petición (HTTP {status_code})."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class EmptyResponseError(SintaxisError):
    """Respuesta sin texto: cuenta como intento fallido."""

    def __init__(self, message: str = "Respuesta vacía de la API de Gemini.") -> None:
        super().__init__(message)
