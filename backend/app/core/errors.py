"""
Typed application errors.

Every failure the API reports is an AppError carrying an explicit ErrorKind.
The kind decides the public `name` and HTTP status; `message` and `action`
are end-user facing (pt-BR). The original exception, when there is one, is
kept in `cause` for logging and never serialized.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    INTERNAL = "internal"

    @property
    def error_name(self) -> str:
        return _NAMES[self]

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_NAMES = {
    ErrorKind.VALIDATION: "ValidationError",
    ErrorKind.UNAUTHORIZED: "UnauthorizedError",
    ErrorKind.FORBIDDEN: "ForbiddenError",
    ErrorKind.NOT_FOUND: "NotFoundError",
    ErrorKind.METHOD_NOT_ALLOWED: "MethodNotAllowedError",
    ErrorKind.INTERNAL: "InternalServerError",
}

_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.INTERNAL: 500,
}

_DEFAULTS = {
    ErrorKind.VALIDATION: (
        "Um erro de validação ocorreu.",
        "Ajuste os dados enviados e tente novamente.",
    ),
    ErrorKind.UNAUTHORIZED: (
        "Usuário não autenticado.",
        "Faça novamente o login para continuar.",
    ),
    ErrorKind.FORBIDDEN: (
        "Você não possui permissão para executar esta ação.",
        "Verifique se você possui as permissões necessárias.",
    ),
    ErrorKind.NOT_FOUND: (
        "Não foi possível encontrar este recurso no sistema.",
        "Verifique se os parâmetros enviados na consulta estão certos.",
    ),
    ErrorKind.METHOD_NOT_ALLOWED: (
        "Método não permitido para este endpoint.",
        "Verifique se o método HTTP enviado é válido para este endpoint.",
    ),
    ErrorKind.INTERNAL: (
        "Um erro interno não esperado aconteceu.",
        "Entre em contato com o suporte.",
    ),
}


class AppError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: Optional[str] = None,
        action: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        default_message, default_action = _DEFAULTS[self.kind]
        self.message = message or default_message
        self.action = action or default_action
        self.cause = cause
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return self.kind.error_name

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "message": self.message,
            "action": self.action,
            "status_code": self.status_code,
        }


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class MethodNotAllowedError(AppError):
    kind = ErrorKind.METHOD_NOT_ALLOWED


class InternalServerError(AppError):
    kind = ErrorKind.INTERNAL


def error_for_status(status_code: int) -> AppError:
    """Map a framework-level HTTP status onto the matching typed error."""
    for error_cls in (
        ValidationError,
        UnauthorizedError,
        ForbiddenError,
        NotFoundError,
        MethodNotAllowedError,
    ):
        if error_cls.kind.status_code == status_code:
            return error_cls()
    return InternalServerError()
