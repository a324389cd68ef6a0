"""Configuracion del cliente.

`ClientConfig` es inmutable: cada opcion devuelve una copia modificada y
`new()` las aplica en orden, de modo que la ultima opcion que toca un campo
es la que gana. El transporte HTTP se construye una sola vez, despues de
aplicar todas las opciones.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from jsonrest_client.core.codec import Decoder, Encoder, json_decode, json_encode

DEFAULT_TIMEOUT_S = 20.0


@dataclass(frozen=True)
class ClientConfig:
    """Config del despachador.

    - base_url: sin "/" final (se recorta al construir)
    - timeout_s: deadline total de cada llamada
    - verify_tls: False desactiva la validacion de certificados
    """
    base_url: str
    timeout_s: float = DEFAULT_TIMEOUT_S
    verify_tls: bool = True
    encoder: Encoder = json_encode
    decoder: Decoder = json_decode

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


ClientOption = Callable[[ClientConfig], ClientConfig]


def with_timeout(seconds: float) -> ClientOption:
    """Fija el deadline total por llamada (por defecto 20 s)."""
    if seconds <= 0:
        raise ValueError("timeout must be positive")

    def apply(cfg: ClientConfig) -> ClientConfig:
        return replace(cfg, timeout_s=float(seconds))

    return apply


def without_tls_verify() -> ClientOption:
    """Desactiva la verificacion TLS (certificado y hostname).

    ATENCION: rebaja la seguridad de la conexion; cualquiera en la ruta puede
    suplantar al servidor. Usar solo contra endpoints internos o de pruebas.
    """

    def apply(cfg: ClientConfig) -> ClientConfig:
        return replace(cfg, verify_tls=False)

    return apply


def with_encoder(encoder: Encoder) -> ClientOption:
    def apply(cfg: ClientConfig) -> ClientConfig:
        return replace(cfg, encoder=encoder)

    return apply


def with_decoder(decoder: Decoder) -> ClientOption:
    def apply(cfg: ClientConfig) -> ClientConfig:
        return replace(cfg, decoder=decoder)

    return apply
