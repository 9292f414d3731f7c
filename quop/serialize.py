"""Structured, JSON and binary encodings of operators, systems and open
systems.

The structured form of a container is a dictionary such as::

    {
        "type": "BosonSystem",
        "capacity": 2,
        "operator": {"items": [["c0a1", 0.5, 0.0], ...]},
        "version": {"major_version": 1, "minor_version": 1},
    }

with items either readable, ``[key_text, re, im]`` where each part is a
float or the text of a symbolic expression, or compact, ``[raw_key,
["Float", re], ["Str", im]]`` with keys as raw index lists. Open systems
carry ``"system"`` and ``"noise"`` blocks instead of ``"operator"`` and
mixed containers add ``"subsystems"``.

The binary form is a short magic header followed by the zlib compressed
JSON of the compact form.
"""

import json
import zlib
import warnings

from . import coefficients as cf
from .core import (
    CURRENT_SCHEMA_VERSION,
    MINIMUM_SCHEMA_VERSION,
    parse_schema_version,
)
from .errors import DecodeError, QuopError
from .operator.base import MixedLayout, NoiseOperator, Operator
from .operator.open_system import OpenSystem
from .operator.system import System
from .utils import as_nested_tuple

MAGIC = b"QUOP\x01"
"""Header of every binary payload."""


# --------------------------------------------------------------------------- #
#                                 encoding                                    #
# --------------------------------------------------------------------------- #


def _check_version(version):
    if version is None:
        return CURRENT_SCHEMA_VERSION
    version = parse_schema_version(version)
    if version < MINIMUM_SCHEMA_VERSION or (
        version.major_version > CURRENT_SCHEMA_VERSION.major_version
    ):
        raise ValueError(
            f"Can't write schema version {tuple(version)}, supported versions "
            f"are {tuple(MINIMUM_SCHEMA_VERSION)} to "
            f"{tuple(CURRENT_SCHEMA_VERSION)}."
        )
    return version


def _encode_product(product, compact):
    return product.to_compact() if compact else str(product)


def _encode_key(op, key, compact):
    if isinstance(op, NoiseOperator):
        return [_encode_product(p, compact) for p in key]
    return _encode_product(key, compact)


def _encode_items(op, compact):
    items = []
    for key, value in sorted(op.items(), key=lambda kv: kv[0]):
        if compact:
            items.append([_encode_key(op, key, True), *cf.to_compact(value)])
        else:
            items.append([_encode_key(op, key, False), *cf.real_imag(value)])
    return {"items": items}


def to_dict(obj, compact=False, version=None):
    """Structured form of an operator, system or open system.

    Parameters
    ----------
    obj : Operator, System or OpenSystem
        The container to encode.
    compact : bool, optional
        Whether to write keys as raw index lists and tagged coefficients
        instead of text.
    version : SchemaVersion or tuple[int, int], optional
        The schema version to stamp, by default
        :data:`~quop.core.CURRENT_SCHEMA_VERSION`.

    Returns
    -------
    dict
    """
    version = _check_version(version)
    data = {"type": obj.__class__.__name__}

    if isinstance(obj, OpenSystem):
        op = obj._system._operator
        data["capacity"] = obj.capacity
        data["system"] = _encode_items(op, compact)
        data["noise"] = _encode_items(obj._noise._operator, compact)
    elif isinstance(obj, System):
        op = obj._operator
        data["capacity"] = obj.capacity
        data["operator"] = _encode_items(op, compact)
    elif isinstance(obj, Operator):
        op = obj
        data["operator"] = _encode_items(op, compact)
    else:
        raise TypeError(f"Can't encode {obj!r}.")

    if isinstance(op, MixedLayout):
        data["subsystems"] = list(op.subsystems)

    data["version"] = version._asdict()
    return data


def to_json(obj, version=None):
    """Readable JSON text of ``obj``, see :func:`to_dict`."""
    return json.dumps(to_dict(obj, compact=False, version=version))


def encode_bytes(type_name, payload):
    """Wrap a JSON compatible ``payload`` into the binary format."""
    body = json.dumps(
        {"type": type_name, "payload": payload}, separators=(",", ":")
    ).encode("utf-8")
    return MAGIC + zlib.compress(body)


def to_bytes(obj, version=None):
    """Binary form of ``obj``, the compressed compact structured form."""
    payload = to_dict(obj, compact=True, version=version)
    return encode_bytes(obj.__class__.__name__, payload)


# --------------------------------------------------------------------------- #
#                                 decoding                                    #
# --------------------------------------------------------------------------- #


def _read_version(data):
    try:
        version = parse_schema_version(data["version"])
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError("Missing or invalid schema version.") from e

    if version < MINIMUM_SCHEMA_VERSION:
        raise DecodeError(
            f"Schema version {tuple(version)} is older than the minimum "
            f"supported {tuple(MINIMUM_SCHEMA_VERSION)}."
        )
    if version.major_version > CURRENT_SCHEMA_VERSION.major_version:
        raise DecodeError(
            f"Schema version {tuple(version)} is newer than the supported "
            f"{tuple(CURRENT_SCHEMA_VERSION)}, see `from_legacy_json` for "
            "documents of the next generation."
        )
    if version > CURRENT_SCHEMA_VERSION:
        warnings.warn(
            f"Reading schema version {tuple(version)} which is newer than "
            f"{tuple(CURRENT_SCHEMA_VERSION)}, unknown fields are ignored."
        )
    return version


def _decode_product(kind, data):
    if isinstance(data, str):
        return kind.from_string(data)
    return kind.from_compact(data)


def _decode_items(op, block):
    items = block["items"]
    if not isinstance(items, list):
        raise TypeError(f"Items must be a list, got {items!r}.")
    for key, re_part, im_part in items:
        if isinstance(op, NoiseOperator):
            left, right = key
            key = (
                _decode_product(op.key_type, left),
                _decode_product(op.key_type, right),
            )
        else:
            key = _decode_product(op.key_type, key)

        if isinstance(re_part, list):
            value = cf.from_compact([re_part, im_part])
        else:
            value = cf.from_real_imag(re_part, im_part)
        yield key, value


def _layout(data):
    subsystems = data.get("subsystems")
    if subsystems is None:
        return ()
    return tuple(int(n) for n in subsystems)


def _build(cls, data):
    layout = _layout(data)

    if issubclass(cls, OpenSystem):
        capacity = as_nested_tuple(data["capacity"])
        system = cls.system_type._from_layout(layout, capacity)
        noise = cls.noise_type._from_layout(layout, capacity)
        for key, value in _decode_items(system._operator, data["system"]):
            system.set(key, value)
        for key, value in _decode_items(noise._operator, data["noise"]):
            noise.set(key, value)
        return cls.group(system, noise)

    if issubclass(cls, System):
        capacity = as_nested_tuple(data["capacity"])
        new = cls._from_layout(layout, capacity)
        op = new._operator
    elif issubclass(cls, Operator):
        new = op = cls(*layout)
    else:
        raise TypeError(f"Can't decode into {cls!r}.")

    for key, value in _decode_items(op, data["operator"]):
        new.set(key, value)
    return new


def from_dict(cls, data):
    """Decode the structured form produced by :func:`to_dict`, readable or
    compact.

    Raises
    ------
    DecodeError
        If ``data`` is malformed, of another type or of an unsupported
        schema version.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a dict, got {type(data).__name__}.")
    if data.get("type") != cls.__name__:
        raise DecodeError(
            f"Data of type {data.get('type')!r} can't be decoded into "
            f"{cls.__name__}."
        )
    _read_version(data)
    try:
        return _build(cls, data)
    except (KeyError, IndexError, TypeError, ValueError, QuopError) as e:
        raise DecodeError(f"Invalid data for {cls.__name__}: {e}") from e


def from_json(cls, text):
    """Decode JSON text written by :func:`to_json`."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid JSON for {cls.__name__}.") from e
    return from_dict(cls, data)


def decode_bytes(data, type_name):
    """Unwrap a binary payload written by :func:`encode_bytes`, checking
    that it holds ``type_name``.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"Expected bytes, got {type(data).__name__}.")
    data = bytes(data)
    if not data:
        raise DecodeError("Empty payload.")
    if not data.startswith(MAGIC):
        raise DecodeError("Payload is not in the quop binary format.")
    try:
        body = zlib.decompress(data[len(MAGIC):])
        envelope = json.loads(body.decode("utf-8"))
    except (zlib.error, UnicodeDecodeError, ValueError) as e:
        raise DecodeError("Truncated or corrupted payload.") from e
    if not isinstance(envelope, dict) or envelope.get("type") != type_name:
        found = envelope.get("type") if isinstance(envelope, dict) else None
        raise DecodeError(
            f"Payload holds {found!r}, expected {type_name!r}."
        )
    if "payload" not in envelope:
        raise DecodeError(f"Payload for {type_name!r} has no content.")
    return envelope["payload"]


def from_bytes(cls, data):
    """Decode the binary form written by :func:`to_bytes`."""
    return from_dict(cls, decode_bytes(data, cls.__name__))
