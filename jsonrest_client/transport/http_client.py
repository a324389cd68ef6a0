from __future__ import annotations

import http.client
import ssl
import time
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from jsonrest_client.core.context import Context
from jsonrest_client.core.errors import TransportError
from jsonrest_client.core.models import RawResponse

# Cada cuanto el hilo llamante revisa si el contexto se cancelo
_POLL_S = 0.05


class HttpTransport:
    """Transporte urllib compartido por todas las llamadas de un cliente.

    El contexto SSL y el opener se crean una vez y no se vuelven a tocar, asi
    que varias llamadas concurrentes pueden usar la misma instancia.
    """

    def __init__(self, timeout_s: float, verify_tls: bool = True) -> None:
        self.timeout_s = timeout_s
        self.ssl_context = ssl.create_default_context()
        if not verify_tls:
            self.ssl_context.check_hostname = False
            self.ssl_context.verify_mode = ssl.CERT_NONE
        self._opener = urllib.request.build_opener(urllib.request.HTTPSHandler(context=self.ssl_context))

    def send(self, ctx: Context, req: urllib.request.Request) -> RawResponse:
        """Ejecuta la peticion respetando el timeout del cliente y el contexto.

        Gana lo que llegue antes: timeout, deadline del contexto o `cancel()`.

        Al cancelar o vencer el plazo solo deja de esperar el llamante: el hilo
        de la peticion sigue vivo hasta que responde el servidor o vence el
        timeout del socket. `concurrent.futures` espera a esos hilos al salir
        del interprete, asi que una llamada abandonada puede retrasar la salida
        del proceso hasta `timeout_s` (20 s por defecto).
        """
        if ctx.done():
            raise TransportError(f"{req.get_method()} {req.full_url}: {ctx.err()}")

        deadline = time.monotonic() + self.timeout_s
        ctx_left = ctx.remaining()
        if ctx_left is not None:
            deadline = min(deadline, time.monotonic() + ctx_left)

        pool = ThreadPoolExecutor(max_workers=1)
        try:
            future = pool.submit(self._roundtrip, req, max(0.001, deadline - time.monotonic()))
        finally:
            pool.shutdown(wait=False)

        while True:
            left = deadline - time.monotonic()
            if ctx.done():
                future.cancel()
                raise TransportError(f"{req.get_method()} {req.full_url}: {ctx.err()}")
            if left <= 0:
                future.cancel()
                raise TransportError(
                    f"{req.get_method()} {req.full_url}: timeout after {self.timeout_s:g}s"
                )
            try:
                return future.result(timeout=min(_POLL_S, left))
            except FutureTimeout:
                continue

    def _roundtrip(self, req: urllib.request.Request, socket_timeout: float) -> RawResponse:
        where = f"{req.get_method()} {req.full_url}"
        try:
            with self._opener.open(req, timeout=socket_timeout) as resp:
                return RawResponse(status=resp.status, body=resp.read())
        except urllib.error.HTTPError as e:
            # urllib lanza los 4xx/5xx; aqui vuelven a ser una respuesta normal
            try:
                body = e.read()
            except (OSError, http.client.HTTPException) as read_err:
                raise TransportError(f"{where}: read body: {read_err}") from read_err
            finally:
                e.close()
            return RawResponse(status=e.code, body=body)
        except urllib.error.URLError as e:
            raise TransportError(f"{where}: {e.reason}") from e
        except (OSError, http.client.HTTPException) as e:
            raise TransportError(f"{where}: {e}") from e
        except ValueError as e:
            # UnicodeError de IDNA, InvalidURL y similares al resolver o conectar
            raise TransportError(f"{where}: {e}") from e
