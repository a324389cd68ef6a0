"""Jerarquia de errores del despachador.

Cada fallo lleva el codigo de estado con el que termino la llamada: 0 si no
hubo intercambio HTTP (URL, codificacion, transporte), 200 si el intercambio
fue correcto pero la respuesta no se pudo decodificar, y el codigo real del
servidor para cualquier otra respuesta.
"""

from __future__ import annotations


class DomainError(Exception):
    """Error base del cliente."""
    pass


class DispatchError(DomainError):
    """Fallo de una llamada a `Client.dispatch`."""

    status: int = 0

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        if status is not None:
            self.status = status


class URLParseError(DispatchError):
    """URL base mal formada o imposible construir la URL de la peticion."""
    pass


class EncodeError(DispatchError):
    """El payload de la peticion no se pudo serializar."""
    pass


class TransportError(DispatchError):
    """Fallo de red: timeouts, DNS, conexion rechazada, TLS o contexto cancelado."""
    pass


class DecodeError(DispatchError):
    """Respuesta 200 cuyo cuerpo no encaja con el destino esperado."""

    status = 200


class APIError(DispatchError):
    """El servidor respondio con un codigo distinto de 200.

    El mensaje es el cuerpo crudo de la respuesta, sin decodificar.
    """

    def __init__(self, status: int, body: str) -> None:
        super().__init__(body, status)
        self.body = body
