# boxoffice/errors.py
"""Errors raised by the services layer; routes turn them into responses."""


class BoxOfficeError(Exception):
    status_code = 500
    default_message = "Erro ao processar. Tente novamente."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BoxOfficeError):
    """Missing or invalid input; the user can fix it and resubmit."""
    status_code = 400
    default_message = "Preencha todos os campos e anexe o comprovante!"


class NotFound(BoxOfficeError):
    status_code = 404
    default_message = "Ingresso não encontrado"


class TerminalStateConflict(BoxOfficeError):
    """The order already sits in a state the requested transition can't leave."""
    status_code = 409
    default_message = "Ingresso não pode mais ser alterado"

    def __init__(self, message: str | None = None, status: str | None = None):
        super().__init__(message)
        self.status = status


class StoreError(BoxOfficeError):
    status_code = 500
    default_message = "Erro ao processar compra. Tente novamente."
