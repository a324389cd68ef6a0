from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from jsonrest_client.core.errors import URLParseError

# Caracteres reservados que se dejan tal cual en el path
_PATH_SAFE = "/:@!$&'()*+,;=-._~%"


def build_request_url(base: str, endpoint: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Combina URL base, endpoint y query en una URL absoluta.

    El endpoint sustituye al path de la base (no se concatena). Sin params la
    URL sale sin query string; el orden de los parametros no esta garantizado.
    """
    try:
        parts = urlsplit(base)
        parts.port  # valida el puerto
    except ValueError as e:
        raise URLParseError(f"parse base url {base!r}: {e}") from e
    if not parts.scheme or not parts.hostname:
        raise URLParseError(f"parse base url {base!r}: missing scheme or host")
    try:
        parts.hostname.encode("idna")
    except UnicodeError as e:
        raise URLParseError(f"parse base url {base!r}: invalid host: {e}") from e

    path = endpoint if endpoint.startswith("/") else "/" + endpoint
    query = urlencode(dict(params)) if params else ""
    return urlunsplit((parts.scheme, parts.netloc, quote(path, safe=_PATH_SAFE), query, ""))
