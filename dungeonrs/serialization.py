"""Serialise and deserialise data structures in JSON, MessagePack or TOML."""

from __future__ import annotations

import dataclasses
import json
import tomllib
import types
from collections.abc import Mapping
from enum import Enum
from pathlib import PurePath
from typing import IO, Any, Union, get_args, get_origin

import semver

try:
    import msgpack
except ImportError:  # pragma: no cover - depends on the environment
    msgpack = None

try:
    import tomli_w
except ImportError:  # pragma: no cover - depends on the environment
    tomli_w = None


class SerializationFormat(Enum):
    """Available serialisation formats; JSON is the default."""

    JSON = "json"
    MESSAGE_PACK = "msgpack"
    TOML = "toml"


class SerializationError(Exception):
    """Base class of every error raised while (de)serialising."""


class FormatUnavailableError(SerializationError):
    """The selected format cannot be used because its library is missing."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(
            f"The selected serialisation format is unavailable, enable feature '{feature}' to use."
        )


class SerializationIOError(SerializationError):
    """Writing the serialised output failed."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"An error occurred while writing to output: {error}")


class SerializeError(SerializationError):
    """The underlying library failed to serialise the subject."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"An error occurred while serialising: {error}")


class DeserializeError(SerializationError):
    """The underlying library failed to deserialise the input."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"An error occurred while deserialising: {error}")


# --- conversion to plain data -------------------------------------------------


def _to_data(obj: Any, *, arrays: bool = False, drop_none: bool = False) -> Any:
    """Turn ``obj`` into plain dicts, lists and scalars.

    With ``arrays`` set, dataclasses become sequences of their field values,
    the compact struct layout used for MessagePack.
    """
    if obj is None or isinstance(obj, (bool, int, float, str, bytes)):
        return obj
    if isinstance(obj, Enum):
        return _to_data(obj.value, arrays=arrays, drop_none=drop_none)
    if isinstance(obj, semver.Version):
        return str(obj)
    if isinstance(obj, PurePath):
        return str(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return _to_data(to_dict(), arrays=arrays, drop_none=drop_none)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        values = {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
        if arrays:
            return [_to_data(v, arrays=arrays, drop_none=drop_none) for v in values.values()]
        return _mapping_to_data(values, arrays=arrays, drop_none=drop_none)
    if isinstance(obj, Mapping):
        return _mapping_to_data(obj, arrays=arrays, drop_none=drop_none)
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_data(v, arrays=arrays, drop_none=drop_none) for v in obj]
    raise TypeError(f"cannot serialise object of type {type(obj).__name__}")


def _mapping_to_data(mapping: Mapping, *, arrays: bool, drop_none: bool) -> dict:
    return {
        key: _to_data(value, arrays=arrays, drop_none=drop_none)
        for key, value in mapping.items()
        if not (drop_none and value is None)
    }


# --- conversion from plain data -----------------------------------------------

_NAMED_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "bytes": bytes,
    "None": type(None),
    "Any": Any,
}


def _field_type(field: dataclasses.Field) -> Any:
    """Return the field's annotation; unresolved string annotations accept any value."""
    annotation = field.type
    if isinstance(annotation, str):
        return _NAMED_TYPES.get(annotation.strip(), Any)
    return annotation


def _convert(value: Any, tp: Any) -> Any:
    """Check ``value`` against the type ``tp`` and build instances where needed."""
    if tp is None or tp is Any or tp is object:
        return value
    if isinstance(tp, str):
        tp = _NAMED_TYPES.get(tp.strip(), Any)
        if tp is Any:
            return value
    if tp is type(None):
        if value is not None:
            raise TypeError(f"expected null, found {type(value).__name__}")
        return None

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        last_error: Exception | None = None
        for arg in get_args(tp):
            try:
                return _convert(value, arg)
            except (TypeError, ValueError) as error:
                last_error = error
        raise TypeError(f"value {value!r} matches no variant: {last_error}")
    if origin in (list, set, frozenset, tuple):
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"expected a sequence, found {type(value).__name__}")
        args = get_args(tp)
        if origin is tuple and args and args[-1] is not Ellipsis:
            if len(args) != len(value):
                raise ValueError(f"expected {len(args)} elements, found {len(value)}")
            return tuple(_convert(v, a) for v, a in zip(value, args))
        item_type = args[0] if args else Any
        return origin(_convert(v, item_type) for v in value)
    if origin is dict or (origin is not None and isinstance(origin, type) and issubclass(origin, Mapping)):
        if not isinstance(value, Mapping):
            raise TypeError(f"expected a map, found {type(value).__name__}")
        key_type, value_type = get_args(tp) or (Any, Any)
        return {_convert(k, key_type): _convert(v, value_type) for k, v in value.items()}

    if not isinstance(tp, type):
        return value
    if tp is bool:
        if not isinstance(value, bool):
            raise TypeError(f"expected a boolean, found {type(value).__name__}")
        return value
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an integer, found {type(value).__name__}")
        return value
    if tp is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"expected a number, found {type(value).__name__}")
        return float(value)
    if tp is str:
        if not isinstance(value, str):
            raise TypeError(f"expected a string, found {type(value).__name__}")
        return value
    if issubclass(tp, PurePath):
        if not isinstance(value, str):
            raise TypeError(f"expected a path string, found {type(value).__name__}")
        return tp(value)
    if issubclass(tp, semver.Version):
        if not isinstance(value, str):
            raise TypeError(f"expected a version string, found {type(value).__name__}")
        return semver.Version.parse(value)
    if issubclass(tp, Enum):
        return tp(value)
    from_dict = getattr(tp, "from_dict", None)
    if callable(from_dict) and isinstance(value, Mapping):
        return from_dict(value)
    if dataclasses.is_dataclass(tp):
        return _build_dataclass(value, tp)
    if not isinstance(value, tp):
        raise TypeError(f"expected {tp.__name__}, found {type(value).__name__}")
    return value


def _missing_value(field: dataclasses.Field, field_type: Any) -> Any:
    if field.default is not dataclasses.MISSING:
        return field.default
    if field.default_factory is not dataclasses.MISSING:
        return field.default_factory()
    if type(None) in get_args(field_type):
        return None
    raise ValueError(f"missing field `{field.name}`")


def _build_dataclass(value: Any, tp: type) -> Any:
    fields = [f for f in dataclasses.fields(tp) if f.init]
    kwargs = {}
    if isinstance(value, Mapping):
        for field in fields:
            field_type = _field_type(field)
            if field.name in value:
                kwargs[field.name] = _convert(value[field.name], field_type)
            else:
                kwargs[field.name] = _missing_value(field, field_type)
    elif isinstance(value, (list, tuple)):
        if len(value) > len(fields):
            raise ValueError(
                f"invalid length {len(value)}, expected at most {len(fields)} elements"
            )
        for position, field in enumerate(fields):
            field_type = _field_type(field)
            if position < len(value):
                kwargs[field.name] = _convert(value[position], field_type)
            else:
                kwargs[field.name] = _missing_value(field, field_type)
    else:
        raise TypeError(f"expected struct {tp.__name__}, found {type(value).__name__}")
    return tp(**kwargs)


def _finish(data: Any, target: Any) -> Any:
    if target is None:
        return data
    try:
        return _convert(data, target)
    except (TypeError, ValueError, KeyError) as error:
        raise DeserializeError(error) from error


# --- serialisation ------------------------------------------------------------


def serialize(subject: Any, format: SerializationFormat = SerializationFormat.JSON) -> bytes:
    """Serialise ``subject`` into ``format`` and return the bytes."""
    if format is SerializationFormat.JSON:
        return serialize_json(subject)
    if format is SerializationFormat.MESSAGE_PACK:
        return serialize_messagepack(subject)
    if format is SerializationFormat.TOML:
        return serialize_toml(subject)
    raise ValueError(f"unknown serialisation format: {format!r}")


def serialize_to(
    subject: Any, format: SerializationFormat, writer: IO[bytes]
) -> None:
    """Serialise ``subject`` and write the result to ``writer``, then flush it."""
    binary = serialize(subject, format)
    try:
        writer.write(binary)
        flush = getattr(writer, "flush", None)
        if callable(flush):
            flush()
    except OSError as error:
        raise SerializationIOError(error) from error


def serialize_json(subject: Any) -> bytes:
    """Serialise ``subject`` into pretty-printed JSON."""
    try:
        text = json.dumps(_to_data(subject), indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as error:
        raise SerializeError(error) from error
    return text.encode("utf-8")


def serialize_messagepack(subject: Any) -> bytes:
    """Serialise ``subject`` into MessagePack; dataclasses are written as arrays."""
    if msgpack is None:
        raise FormatUnavailableError("msgpack")
    try:
        return msgpack.packb(_to_data(subject, arrays=True), use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as error:
        raise SerializeError(error) from error


def serialize_toml(subject: Any) -> bytes:
    """Serialise ``subject`` into TOML; the subject must be a table."""
    if tomli_w is None:
        raise FormatUnavailableError("toml")
    try:
        data = _to_data(subject, drop_none=True)
        if not isinstance(data, Mapping):
            raise TypeError(f"TOML documents must be tables, not {type(data).__name__}")
        return tomli_w.dumps(data).encode("utf-8")
    except (TypeError, ValueError) as error:
        raise SerializeError(error) from error


# --- deserialisation ----------------------------------------------------------


def deserialize(
    subject: bytes,
    format: SerializationFormat = SerializationFormat.JSON,
    target: Any = None,
) -> Any:
    """Deserialise ``subject`` from ``format`` into ``target`` (plain data when None)."""
    if format is SerializationFormat.JSON:
        return deserialize_json(subject, target)
    if format is SerializationFormat.MESSAGE_PACK:
        return deserialize_messagepack(subject, target)
    if format is SerializationFormat.TOML:
        return deserialize_toml(subject, target)
    raise ValueError(f"unknown serialisation format: {format!r}")


def deserialize_json(subject: bytes, target: Any = None) -> Any:
    """Deserialise JSON bytes."""
    try:
        data = json.loads(subject)
    except (ValueError, TypeError) as error:
        raise DeserializeError(error) from error
    return _finish(data, target)


def deserialize_messagepack(subject: bytes, target: Any = None) -> Any:
    """Deserialise MessagePack bytes; structs may be arrays or maps."""
    if msgpack is None:
        raise FormatUnavailableError("msgpack")
    try:
        data = msgpack.unpackb(subject, raw=False, strict_map_key=False)
    except (ValueError, TypeError, msgpack.UnpackException) as error:
        raise DeserializeError(error) from error
    return _finish(data, target)


def deserialize_toml(subject: bytes, target: Any = None) -> Any:
    """Deserialise TOML bytes; invalid UTF-8 is replaced rather than rejected."""
    text = bytes(subject).decode("utf-8", errors="replace")
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as error:
        raise DeserializeError(error) from error
    return _finish(data, target)