"""Codificacion JSON por defecto y envoltorios de instrumentacion.

Un encoder recibe un valor y devuelve bytes. Un decoder recibe bytes y un
destino mutable (dict, list o instancia de dataclass) y lo rellena en sitio.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import types
from typing import Any, Callable, Dict, List, Optional, Union, get_args, get_origin, get_type_hints

from jsonrest_client.core.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

Encoder = Callable[[Any], bytes]
Decoder = Callable[[bytes, Any], None]


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


def json_encode(value: Any) -> bytes:
    try:
        text = json.dumps(value, default=_to_jsonable, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"encode payload: {e}") from e
    return text.encode("utf-8")


def json_decode(data: bytes, target: Any) -> None:
    try:
        value = json.loads(data)
    except ValueError as e:
        raise DecodeError(f"decode response: {e}") from e
    fill_target(target, value)


def fill_target(target: Any, value: Any) -> None:
    """Vuelca `value` (ya parseado) sobre `target` sin reemplazar la referencia.

    En dataclasses cada campo se convierte segun su anotacion: dataclasses
    anidadas, `List[...]`, `Dict[str, ...]` y `Optional[...]` se construyen
    con su tipo, y un valor de otra forma lanza `DecodeError`. Si algun campo
    falla, el destino queda sin tocar.
    """
    if isinstance(target, dict):
        if not isinstance(value, dict):
            raise DecodeError(f"cannot decode {type(value).__name__} into dict")
        target.clear()
        target.update(value)
    elif isinstance(target, list):
        if not isinstance(value, list):
            raise DecodeError(f"cannot decode {type(value).__name__} into list")
        target[:] = value
    elif dataclasses.is_dataclass(target) and not isinstance(target, type):
        cls = type(target)
        decoded = _dataclass_kwargs(cls, value, cls.__name__)
        for name, field_value in decoded.items():
            try:
                setattr(target, name, field_value)
            except dataclasses.FrozenInstanceError as e:
                raise DecodeError(f"response target {cls.__name__} is frozen") from e
    else:
        raise DecodeError(f"unsupported response target {type(target).__name__}")


def _field_types(cls: type) -> Dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError) as e:
        raise DecodeError(f"cannot resolve field types of {cls.__name__}: {e}") from e


def _dataclass_kwargs(cls: type, value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{where}: cannot decode {type(value).__name__} into {cls.__name__}")
    hints = _field_types(cls)
    out: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name in value:
            out[f.name] = _convert(hints.get(f.name, Any), value[f.name], f"{where}.{f.name}")
    return out


def _is_union(tp: Any) -> bool:
    if get_origin(tp) is Union:
        return True
    union_type = getattr(types, "UnionType", None)  # X | Y (3.10+)
    return union_type is not None and isinstance(tp, union_type)


def _convert(tp: Any, value: Any, where: str) -> Any:
    """Convierte un valor JSON al tipo anotado `tp` o lanza DecodeError."""
    if tp is Any:
        return value
    if _is_union(tp):
        args = get_args(tp)
        if value is None and type(None) in args:
            return None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _convert(arg, value, where)
            except DecodeError:
                continue
        raise DecodeError(f"{where}: {type(value).__name__} does not match {tp}")
    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        init_names = {f.name for f in dataclasses.fields(tp) if f.init}
        kwargs = {k: v for k, v in _dataclass_kwargs(tp, value, where).items() if k in init_names}
        try:
            return tp(**kwargs)
        except TypeError as e:
            raise DecodeError(f"{where}: {e}") from e

    origin = get_origin(tp)
    args = get_args(tp)
    if origin in (list, List):
        if not isinstance(value, list):
            raise DecodeError(f"{where}: expected array, got {type(value).__name__}")
        if not args:
            return list(value)
        return [_convert(args[0], item, f"{where}[{i}]") for i, item in enumerate(value)]
    if origin in (dict, Dict):
        if not isinstance(value, dict):
            raise DecodeError(f"{where}: expected object, got {type(value).__name__}")
        if len(args) != 2:
            return dict(value)
        return {k: _convert(args[1], v, f"{where}.{k}") for k, v in value.items()}
    if origin is not None:
        # Literal, Tuple y demas genericos: se aceptan tal cual
        return value

    if tp is type(None) or tp is None:
        if value is not None:
            raise DecodeError(f"{where}: expected null, got {type(value).__name__}")
        return None
    if tp is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"{where}: expected number, got {type(value).__name__}")
        return float(value)
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"{where}: expected integer, got {type(value).__name__}")
        return value
    if tp in (list, dict, str, bool):
        if not isinstance(value, tp):
            raise DecodeError(f"{where}: expected {tp.__name__}, got {type(value).__name__}")
        return value
    if isinstance(tp, type) and not isinstance(value, tp):
        raise DecodeError(f"{where}: expected {tp.__name__}, got {type(value).__name__}")
    return value


def logging_encoder(encoder: Encoder = json_encode, log: Optional[logging.Logger] = None) -> Encoder:
    """Envuelve un encoder y deja traza DEBUG del tamano producido."""
    log = log or logger

    def encode(value: Any) -> bytes:
        data = encoder(value)
        log.debug("encoded %s payload (%d bytes)", type(value).__name__, len(data))
        return data

    return encode


def logging_decoder(decoder: Decoder = json_decode, log: Optional[logging.Logger] = None) -> Decoder:
    """Envuelve un decoder y deja traza DEBUG de cada cuerpo recibido."""
    log = log or logger

    def decode(data: bytes, target: Any) -> None:
        log.debug("decoding %d bytes into %s", len(data), type(target).__name__)
        try:
            decoder(data, target)
        except DecodeError as e:
            log.debug("decode into %s failed: %s", type(target).__name__, e)
            raise

    return decode
