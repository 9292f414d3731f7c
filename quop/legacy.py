"""One-way import of documents written by the next schema generation.

Generation 2 documents look like::

    {
        "items": [["0Z1X", 0.5, 0.0], ...],
        "serialisation_meta": {
            "type_name": "PauliHamiltonian",
            "min_version": [2, 0, 0],
            "version": "2.0.0",
        },
    }

Noise items carry both products, ``[left, right, re, im]``, open systems
nest a ``"system"`` and a ``"noise"`` document and mixed documents add the
``"n_spins"``, ``"n_bosons"`` and ``"n_fermions"`` counts.

Every key is read with the grammar below, which belongs to generation 2
alone, rendered as current text and parsed again by the current product
classes. The result is built term by term into a fresh container with no
declared capacity.
"""

import re
import json
import numbers
import warnings

from . import coefficients as cf
from .errors import LegacyImportError, QuopError
from .operator import (
    BosonHamiltonian,
    BosonLindbladNoiseOperator,
    BosonLindbladOpenSystem,
    BosonOperator,
    FermionHamiltonian,
    FermionLindbladNoiseOperator,
    FermionLindbladOpenSystem,
    FermionOperator,
    MixedHamiltonian,
    MixedLindbladNoiseOperator,
    MixedLindbladOpenSystem,
    MixedOperator,
    PlusMinusLindbladNoiseOperator,
    PlusMinusOperator,
    SpinHamiltonian,
    SpinLindbladNoiseOperator,
    SpinLindbladOpenSystem,
    SpinOperator,
)
from .operator.base import MixedLayout, NoiseOperator
from .operator.open_system import OpenSystem
from .operator.system import System
from .products import MixedProduct, ModeProduct

GENERATION = 2

TYPE_NAMES = {
    "PauliOperator": SpinOperator,
    "PauliHamiltonian": SpinHamiltonian,
    "PlusMinusOperator": PlusMinusOperator,
    "PauliLindbladNoiseOperator": SpinLindbladNoiseOperator,
    "PlusMinusLindbladNoiseOperator": PlusMinusLindbladNoiseOperator,
    "PauliLindbladOpenSystem": SpinLindbladOpenSystem,
    "BosonOperator": BosonOperator,
    "BosonHamiltonian": BosonHamiltonian,
    "BosonLindbladNoiseOperator": BosonLindbladNoiseOperator,
    "BosonLindbladOpenSystem": BosonLindbladOpenSystem,
    "FermionOperator": FermionOperator,
    "FermionHamiltonian": FermionHamiltonian,
    "FermionLindbladNoiseOperator": FermionLindbladNoiseOperator,
    "FermionLindbladOpenSystem": FermionLindbladOpenSystem,
    "MixedOperator": MixedOperator,
    "MixedHamiltonian": MixedHamiltonian,
    "MixedLindbladNoiseOperator": MixedLindbladNoiseOperator,
    "MixedLindbladOpenSystem": MixedLindbladOpenSystem,
}
"""Generation 2 type names and the current classes they import into."""

_KNOWN_FIELDS = {
    "items",
    "serialisation_meta",
    "system",
    "noise",
    "n_spins",
    "n_bosons",
    "n_fermions",
}


# --------------------------------------------------------------------------- #
#                         generation 2 key grammar                            #
# --------------------------------------------------------------------------- #

_SPIN_TOKEN_RE = re.compile(r"(\d+)(iY|X|Y|Z|\+|-)")
_MODE_TOKEN_RE = re.compile(r"([ca])(\d+)")


def _tokenize(pattern, text):
    tokens = []
    pos = 0
    while pos < len(text):
        match = pattern.match(text, pos)
        if match is None:
            raise LegacyImportError(
                f"Can't read generation {GENERATION} key '{text}' at "
                f"position {pos}."
            )
        tokens.append(match.groups())
        pos = match.end()
    return tokens


def read_spin_key(text):
    """Tokens ``(site, symbol)`` of a generation 2 spin key."""
    if text in ("", "I"):
        return []
    return [(int(site), symbol) for site, symbol in _tokenize(_SPIN_TOKEN_RE, text)]


def read_mode_key(text):
    """Tokens ``(kind, index)`` of a generation 2 mode key."""
    if text in ("", "I"):
        return []
    return [(kind, int(index)) for kind, index in _tokenize(_MODE_TOKEN_RE, text)]


def render_spin_key(tokens):
    if not tokens:
        return "I"
    return "".join(f"{site}{symbol}" for site, symbol in tokens)


def render_mode_key(tokens):
    if not tokens:
        return "I"
    return "".join(f"{kind}{index}" for kind, index in tokens)


def read_mixed_key(text):
    """Parts ``(prefix, text)`` of a generation 2 mixed key such as
    ``"S0Z:Bc0a1:Fc0a0:"``.
    """
    parts = text.split(":")
    if parts and parts[0] == "":
        parts = parts[1:]
    if not parts or parts[-1] != "":
        raise LegacyImportError(f"Can't read generation {GENERATION} key '{text}'.")
    slots = []
    for part in parts[:-1]:
        if not part or part[0] not in "SBF":
            raise LegacyImportError(
                f"Unknown subsystem '{part}' in generation {GENERATION} key "
                f"'{text}'."
            )
        slots.append((part[0], part[1:]))
    return slots


def render_key(kind, text):
    """Re-render the generation 2 ``text`` of a key of product class
    ``kind`` in the current grammar.
    """
    if not isinstance(text, str):
        raise LegacyImportError(f"Generation {GENERATION} keys are text, got {text!r}.")
    if issubclass(kind, MixedProduct):
        rendered = []
        for prefix, part in read_mixed_key(text):
            if prefix == "S":
                rendered.append(f"S{render_spin_key(read_spin_key(part))}:")
            else:
                rendered.append(f"{prefix}{render_mode_key(read_mode_key(part))}:")
        return "".join(rendered)
    if issubclass(kind, ModeProduct):
        return render_mode_key(read_mode_key(text))
    return render_spin_key(read_spin_key(text))


# --------------------------------------------------------------------------- #
#                                  import                                     #
# --------------------------------------------------------------------------- #


def _check_meta(data, expected):
    meta = data.get("serialisation_meta")
    if not isinstance(meta, dict):
        raise LegacyImportError("Missing 'serialisation_meta'.")

    type_name = meta.get("type_name")
    if TYPE_NAMES.get(type_name) is not expected:
        raise LegacyImportError(
            f"Document of type {type_name!r} can't be imported into "
            f"{expected.__name__}."
        )

    min_version = meta.get("min_version", [GENERATION, 0, 0])
    if not (
        isinstance(min_version, (list, tuple))
        and min_version
        and all(isinstance(v, int) for v in min_version)
    ):
        raise LegacyImportError(f"Invalid 'min_version' {min_version!r}.")
    if min_version[0] != GENERATION:
        raise LegacyImportError(
            f"Only generation {GENERATION} documents can be imported, this "
            f"one needs version {min_version}."
        )
    if tuple(min_version[1:2]) > (0,):
        warnings.warn(
            f"Document needs version {min_version}, features beyond "
            f"{GENERATION}.0 may not be imported faithfully."
        )

    unknown = set(data) - _KNOWN_FIELDS
    if unknown:
        warnings.warn(f"Ignoring unknown fields {sorted(unknown)} on import.")


def _value(re_part, im_part):
    for part in (re_part, im_part):
        if isinstance(part, bool) or not isinstance(part, (numbers.Real, str)):
            raise LegacyImportError(f"Invalid coefficient part {part!r}.")
    return cf.from_real_imag(re_part, im_part)


def _import_operator(target, data):
    _check_meta(data, target)

    layout = ()
    if issubclass(target, MixedLayout):
        layout = tuple(int(data[k]) for k in ("n_spins", "n_bosons", "n_fermions"))
    new = target(*layout)

    # hermitian keys are written as plain products
    kind = target.key_type._plain_type()

    items = data["items"]
    if not isinstance(items, list):
        raise LegacyImportError("'items' must be a list.")
    for item in items:
        if issubclass(target, NoiseOperator):
            left, right, re_part, im_part = item
            key = (
                kind.from_string(render_key(kind, left)),
                kind.from_string(render_key(kind, right)),
            )
        else:
            key_text, re_part, im_part = item
            key = kind.from_string(render_key(kind, key_text))
        new.add_operator_product(key, _value(re_part, im_part))
    return new


def _import_open_system(target, data):
    _check_meta(data, target)
    system_op = _import_operator(target.system_type.operator_type, data["system"])
    noise_op = _import_operator(target.noise_type.operator_type, data["noise"])
    system = target.system_type.from_operator(system_op)
    noise = target.noise_type.from_operator(noise_op)
    return target.group(system, noise)


def from_json_generation_2(cls, text):
    """Import a generation 2 JSON document into the current class ``cls``.

    ``cls`` may be an operator, a system, which then wraps the imported
    operator without capacity, or an open system.

    Raises
    ------
    LegacyImportError
        If anything about the document can't be imported, no partial result
        is returned.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise LegacyImportError(f"Invalid generation {GENERATION} JSON.") from e
    if not isinstance(data, dict):
        raise LegacyImportError(f"Expected a JSON object, got {type(data).__name__}.")

    try:
        if issubclass(cls, OpenSystem):
            return _import_open_system(cls, data)
        if issubclass(cls, System):
            return cls.from_operator(_import_operator(cls.operator_type, data))
        return _import_operator(cls, data)
    except LegacyImportError:
        raise
    except (KeyError, IndexError, TypeError, ValueError, QuopError) as e:
        raise LegacyImportError(
            f"Can't import generation {GENERATION} document into "
            f"{cls.__name__}: {e}"
        ) from e
