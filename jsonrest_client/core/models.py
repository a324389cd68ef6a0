from __future__ import annotations

"""Modelos efimeros del despachador.

Viven solo durante una llamada a `dispatch`; no se persisten ni se comparten
entre llamadas concurrentes.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class RequestDescriptor:
    """Descripcion de una peticion.

    Campos:
    - endpoint: path absoluto respecto al host
    - method: verbo HTTP
    - payload: valor a serializar como cuerpo (None = sin cuerpo)
    - target: destino mutable que se rellena con la respuesta 200
    - params: parametros de query (claves unicas)
    """
    endpoint: str
    method: str
    payload: Any = None
    target: Any = None
    params: Optional[Mapping[str, str]] = None

    @property
    def has_body(self) -> bool:
        return self.payload is not None


@dataclass(frozen=True)
class RawResponse:
    """Respuesta HTTP leida por completo en memoria."""
    status: int
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
