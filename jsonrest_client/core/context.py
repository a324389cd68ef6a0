"""Contexto de cancelacion para las llamadas del cliente.

Un `Context` se cancela a mano con `cancel()` o expira al llegar a su
deadline. Lo comparten el hilo que llama y el hilo que hace la peticion, por
eso el estado vive en un `threading.Event`.
"""

from __future__ import annotations

import threading
import time
from typing import Optional


class Context:
    def __init__(self, deadline: Optional[float] = None) -> None:
        # deadline en segundos de time.monotonic()
        self.deadline = deadline
        self._cancelled = threading.Event()
        self._reason: Optional[str] = None

    @classmethod
    def background(cls) -> "Context":
        """Contexto sin deadline que nunca se cancela solo."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self, reason: str = "context canceled") -> None:
        if not self._cancelled.is_set():
            self._reason = reason
            self._cancelled.set()

    def remaining(self) -> Optional[float]:
        """Segundos hasta el deadline (negativo si ya vencio) o None."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def done(self) -> bool:
        if self._cancelled.is_set():
            return True
        left = self.remaining()
        return left is not None and left <= 0

    def err(self) -> Optional[str]:
        """Motivo por el que el contexto termino, o None si sigue vivo."""
        if self._cancelled.is_set():
            return self._reason
        if self.done():
            return "context deadline exceeded"
        return None

