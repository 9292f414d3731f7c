import json

import pytest
from pytest import mark

from quop.errors import LegacyImportError
from quop.legacy import read_mixed_key, render_key
from quop.operator import (
    BosonHamiltonian,
    BosonOperator,
    FermionOperator,
    MixedOperator,
    SpinHamiltonian,
    SpinLindbladNoiseOperator,
    SpinLindbladOpenSystem,
    SpinOperator,
    SpinSystem,
)
from quop.products import BosonProduct, MixedProduct, PauliProduct


def document(type_name, items, min_version=(2, 0, 0), **extra):
    data = {
        "items": items,
        "serialisation_meta": {
            "type_name": type_name,
            "min_version": list(min_version),
            "version": "2.0.0",
        },
    }
    data.update(extra)
    return data


class TestKeyGrammar:

    @mark.parametrize("kind, text, rendered", [
        (PauliProduct, "0Z1X", "0Z1X"),
        (PauliProduct, "", "I"),
        (BosonProduct, "c0c0a1", "c0c0a1"),
        (BosonProduct, "I", "I"),
        (MixedProduct, "S0Z:Bc0a1:Fc0:", "S0Z:Bc0a1:Fc0:"),
        (MixedProduct, "S:B:", "SI:BI:"),
    ])
    def test_render(self, kind, text, rendered):
        assert render_key(kind, text) == rendered

    @mark.parametrize("kind, text", [
        (PauliProduct, "0Q"),
        (BosonProduct, "c0b1"),
        (MixedProduct, "S0Z"),
        (MixedProduct, "Q0Z:"),
    ])
    def test_unreadable(self, kind, text):
        with pytest.raises(LegacyImportError):
            render_key(kind, text)

    def test_read_mixed_key(self):
        assert read_mixed_key(":S0Z:Fc0:") == [("S", "0Z"), ("F", "c0")]


class TestImport:

    def test_operator(self):
        text = json.dumps(document("PauliOperator", [["0Z1X", 0.5, 0.0]]))
        op = SpinOperator.from_legacy_json(text)
        assert op.get("0Z1X") == 0.5
        assert len(op) == 1

    def test_hamiltonian_folds(self):
        text = json.dumps(document("BosonHamiltonian", [["c1a0", 0.0, 1.0]]))
        h = BosonHamiltonian.from_legacy_json(text)
        assert h.get("c0a1") == -1j

    def test_symbolic(self):
        text = json.dumps(document("PauliHamiltonian", [["0Z", "theta", 0.0]]))
        h = SpinHamiltonian.from_legacy_json(text)
        assert str(h.get("0Z")) == "theta"

    def test_noise(self):
        items = [["0Z", "0iY", 1.0, 0.0]]
        text = json.dumps(document("PauliLindbladNoiseOperator", items))
        noise = SpinLindbladNoiseOperator.from_legacy_json(text)
        assert noise.get(("0Z", "0iY")) == 1

    def test_system_has_no_capacity(self):
        text = json.dumps(document("PauliOperator", [["3X", 1.0, 0.0]]))
        sys = SpinSystem.from_legacy_json(text)
        assert sys.capacity is None
        assert sys.number() == 4

    def test_open_system(self):
        data = document(
            "PauliLindbladOpenSystem",
            None,
            system=document("PauliHamiltonian", [["0Z", 1.0, 0.0]]),
            noise=document("PauliLindbladNoiseOperator", [["0X", "0X", 0.1, 0.0]]),
        )
        del data["items"]
        osys = SpinLindbladOpenSystem.from_legacy_json(json.dumps(data))
        assert osys.system_get("0Z") == 1
        assert osys.noise_get(("0X", "0X")) == 0.1
        assert osys.capacity is None

    def test_mixed(self):
        text = json.dumps(document(
            "MixedOperator",
            [["S0Z:Bc0a1:", 1.0, 0.0]],
            n_spins=1,
            n_bosons=1,
            n_fermions=0,
        ))
        op = MixedOperator.from_legacy_json(text)
        assert op.subsystems == (1, 1, 0)
        assert op.get("S0Z:Bc0a1:") == 1

    def test_newer_minor_warns(self):
        text = json.dumps(document("FermionOperator", [["c0a0", 1.0, 0.0]],
                                   min_version=(2, 3, 0)))
        with pytest.warns(UserWarning):
            op = FermionOperator.from_legacy_json(text)
        assert op.get("c0a0") == 1

    def test_unknown_fields_warn(self):
        text = json.dumps(document("BosonOperator", [], extra_field=1))
        with pytest.warns(UserWarning):
            op = BosonOperator.from_legacy_json(text)
        assert op.is_empty()


class TestImportErrors:

    @mark.parametrize("text", [
        "{not json",
        "[1, 2]",
        json.dumps({"items": []}),
        json.dumps(document("BosonOperator", [])),
        json.dumps(document("PauliOperator", [], min_version=(3, 0, 0))),
        json.dumps(document("PauliOperator", [], min_version=(1, 0, 0))),
        json.dumps(document("PauliOperator", [], min_version="2.0.0")),
        json.dumps(document("PauliOperator", [["0Q", 1.0, 0.0]])),
        json.dumps(document("PauliOperator", [["0Z", 1.0]])),
        json.dumps(document("PauliOperator", [["0Z", True, 0.0]])),
        json.dumps(document("PauliOperator", "0Z")),
        json.dumps(document("PauliOperator", [["0Z", "x.y", 0.0]])),
        json.dumps(document("PauliOperator", [["0Z", 1.0, "lambda: 1"]])),
    ])
    def test_rejected(self, text):
        with pytest.raises(LegacyImportError):
            SpinOperator.from_legacy_json(text)

    def test_non_hermitian(self):
        text = json.dumps(document("PauliHamiltonian", [["0Z", 0.0, 1.0]]))
        with pytest.raises(LegacyImportError):
            SpinHamiltonian.from_legacy_json(text)
