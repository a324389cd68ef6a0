from __future__ import annotations

import logging
import urllib.request
from typing import Any, Mapping, Optional, TypeVar

from jsonrest_client.config import ClientConfig, ClientOption
from jsonrest_client.core.context import Context
from jsonrest_client.core.errors import APIError, DecodeError, DispatchError, EncodeError
from jsonrest_client.core.models import RawResponse, RequestDescriptor
from jsonrest_client.transport.http_client import HttpTransport
from jsonrest_client.transport.urls import build_request_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_OK = 200


class Client:
    """Despachador generico de peticiones JSON contra una API REST.

    No guarda estado entre llamadas: cada `dispatch` construye su propia
    peticion y respuesta, y solo comparte la config y el transporte.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._cfg = config
        self._transport = HttpTransport(config.timeout_s, verify_tls=config.verify_tls)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def dispatch(
        self,
        ctx: Context,
        endpoint: str,
        method: str,
        target: Optional[T] = None,
        payload: Any = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> int:
        """Hace una peticion y enruta la respuesta segun su codigo.

        Devuelve 200 si todo fue bien; con `target` presente, el cuerpo se
        decodifica en el. Cualquier fallo se lanza como `DispatchError`, cuyo
        `status` es 0 si no hubo intercambio HTTP, 200 para `DecodeError` y el
        codigo del servidor para `APIError` (mensaje = cuerpo crudo).
        """
        desc = RequestDescriptor(endpoint=endpoint, method=method.upper(), payload=payload,
                                 target=target, params=params)
        url = build_request_url(self._cfg.base_url, desc.endpoint, desc.params)

        body = self._encode(desc.payload) if desc.has_body else None
        req = urllib.request.Request(url, data=body, method=desc.method)
        if body is not None:
            req.add_header("Content-Type", "application/json")

        resp = self._transport.send(ctx, req)
        if resp.status != STATUS_OK:
            raise APIError(resp.status, resp.text)
        if desc.target is not None:
            self._decode(resp, desc.target)
        return resp.status

    def _encode(self, payload: Any) -> bytes:
        try:
            body = self._cfg.encoder(payload)
        except DispatchError:
            raise
        except (TypeError, ValueError) as e:
            raise EncodeError(f"encode payload: {e}") from e
        if not isinstance(body, (bytes, bytearray)):
            raise EncodeError(f"encoder returned {type(body).__name__}, expected bytes")
        return bytes(body)

    def _decode(self, resp: RawResponse, target: Any) -> None:
        try:
            self._cfg.decoder(resp.body, target)
        except DecodeError:
            raise
        except (TypeError, ValueError) as e:
            raise DecodeError(f"decode response: {e}") from e


def new(base_url: str, *options: ClientOption) -> Client:
    """Crea un cliente para `base_url` aplicando las opciones en orden."""
    cfg = ClientConfig(base_url=base_url)
    for opt in options:
        cfg = opt(cfg)
    if not cfg.verify_tls:
        logger.warning("TLS verification disabled for %s", cfg.base_url)
    return Client(cfg)
