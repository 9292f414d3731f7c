import copy
import pickle

import pytest
from pytest import mark

from quop.errors import DecodeError, InvalidIndexError, ParseMismatchError
from quop.products import (
    BosonProduct,
    DecoherenceProduct,
    PauliProduct,
    PlusMinusProduct,
    get_mat,
)
from quop.products.spins import get_decomp


class TestGetMat:

    def test_read_only(self):
        with pytest.raises(ValueError):
            get_mat("X")[0, 0] = 2

    def test_plus_minus(self):
        assert (get_mat("+") + get_mat("-") == get_mat("X")).all()

    def test_decomp(self):
        assert get_decomp(("Z", "X"), PauliProduct.basis) == ((1j, "Y"),)
        assert get_decomp(("+", "+"), PlusMinusProduct.basis) == ()


class TestPauliProduct:

    def test_builder(self):
        p = PauliProduct().z(0).x(1)
        assert str(p) == "0Z1X"
        assert p.get(0) == "Z"
        assert p.get(5) == "I"
        assert p.sites() == (0, 1)
        assert len(p) == 2

    def test_set_identity_removes_site(self):
        p = PauliProduct().z(0).set_pauli(0, "I")
        assert p == PauliProduct()
        assert str(p) == "I"

    def test_immutable_builder(self):
        p = PauliProduct().z(0)
        p.x(1)
        assert str(p) == "0Z"

    @mark.parametrize("text", ["0Z1X", "1X0Z"])
    def test_from_string_sorts(self, text):
        assert PauliProduct.from_string(text) == PauliProduct().z(0).x(1)

    @mark.parametrize("text", ["", "I"])
    def test_from_string_empty(self, text):
        assert PauliProduct.from_string(text) == PauliProduct()

    @mark.parametrize("text", ["0Q", "0iY", "Z0", "0Z0X", "0+"])
    def test_from_string_bad(self, text):
        with pytest.raises(InvalidIndexError):
            PauliProduct.from_string(text)

    def test_from_string_mismatch(self):
        with pytest.raises(ParseMismatchError):
            PauliProduct.from_string("c0a1")

    @mark.parametrize("items", [
        [(0, "X"), (0, "Y")],
        [(-1, "X")],
        [(0, "+")],
        [(1.5, "Z")],
    ])
    def test_invalid(self, items):
        with pytest.raises(InvalidIndexError):
            PauliProduct(items)

    def test_create(self):
        assert PauliProduct.create([(0, "X"), (0, "X")]) == (PauliProduct(), 1)
        p, c = PauliProduct.create([(1, "Z"), (0, "X")])
        assert (p, c) == (PauliProduct().x(0).z(1), 1)
        with pytest.raises(InvalidIndexError):
            PauliProduct.create([(0, "X"), (0, "Y")])

    @mark.parametrize("a, b, expected", [
        ("0Z", "0X", [("0Y", 1j)]),
        ("0X", "0Z", [("0Y", -1j)]),
        ("0X", "0Y", [("0Z", 1j)]),
        ("0X", "0X", [("I", 1)]),
        ("0X1Z", "0X1X", [("1Y", 1j)]),
        ("0X", "1Z", [("0X1Z", 1)]),
    ])
    def test_multiply(self, a, b, expected):
        result = PauliProduct.from_string(a) * PauliProduct.from_string(b)
        assert result == [(PauliProduct.from_string(k), v) for k, v in expected]

    def test_multiply_other_type(self):
        with pytest.raises(TypeError):
            PauliProduct().z(0) * DecoherenceProduct().z(0)

    def test_hermitian(self):
        p = PauliProduct().y(0).z(2)
        assert p.hermitian_conjugate() == (p, 1)
        assert p.is_natural_hermitian()

    def test_numbers(self):
        p = PauliProduct().z(0).x(3)
        assert p.current_number() == 4
        assert p.max_index() == 3
        assert PauliProduct().current_number() == 0
        assert PauliProduct().max_index() == -1
        assert p.shape() == (2,)

    def test_remap(self):
        p = PauliProduct().z(0).x(1)
        assert p.remap_indices({0: 1, 1: 0}) == (PauliProduct().x(0).z(1), 1)
        assert p.shift(2) == (PauliProduct().z(2).x(3), 1)
        with pytest.raises(InvalidIndexError):
            p.remap_indices({0: 1})

    def test_ordering_and_hashing(self):
        a, b = PauliProduct().z(0), PauliProduct().z(1)
        assert a < b
        assert len({a, b, PauliProduct.from_string("0Z")}) == 2
        assert PauliProduct().z(0) != DecoherenceProduct().z(0)

    def test_copy_and_pickle(self):
        p = PauliProduct().z(0).x(1)
        assert copy.copy(p) is p
        assert copy.deepcopy(p) is p
        assert pickle.loads(pickle.dumps(p)) == p

    def test_json(self):
        p = PauliProduct().z(0).x(1)
        assert PauliProduct.from_json(p.to_json()) == p
        with pytest.raises(DecodeError):
            PauliProduct.from_json("{bad")
        with pytest.raises(DecodeError):
            PauliProduct.from_json("[1]")
        with pytest.raises(DecodeError):
            PauliProduct.from_json('"0Q"')

    def test_bytes(self):
        p = PauliProduct().z(0).x(1)
        assert PauliProduct.from_bytes(p.to_bytes()) == p
        with pytest.raises(DecodeError):
            PauliProduct.from_bytes(BosonProduct([0], [1]).to_bytes())
        with pytest.raises(DecodeError):
            PauliProduct.from_bytes(b"")


class TestDecoherenceProduct:

    def test_builder(self):
        assert str(DecoherenceProduct().x(0).iy(1).z(2)) == "0X1iY2Z"
        assert DecoherenceProduct.from_string("1iY") == DecoherenceProduct().iy(1)

    def test_hermitian_sign(self):
        p = DecoherenceProduct().iy(0)
        assert p.hermitian_conjugate() == (p, -1)
        assert not p.is_natural_hermitian()

    def test_multiply(self):
        # iY iY = -1
        p = DecoherenceProduct().iy(0)
        assert p * p == [(DecoherenceProduct(), -1)]

    def test_from_pauli(self):
        p = PauliProduct().y(0)
        assert p.to_basis(DecoherenceProduct) == [
            (DecoherenceProduct().iy(0), -1j)
        ]


class TestPlusMinusProduct:

    def test_builder(self):
        p = PlusMinusProduct().plus(0).minus(1).z(2)
        assert str(p) == "0+1-2Z"
        assert PlusMinusProduct.from_string("0+1-2Z") == p

    def test_hermitian(self):
        p = PlusMinusProduct().plus(0).z(1)
        assert p.hermitian_conjugate() == (PlusMinusProduct().minus(0).z(1), 1)

    def test_multiply(self):
        plus, minus = PlusMinusProduct().plus(0), PlusMinusProduct().minus(0)
        assert plus * plus == []
        assert plus * minus == [
            (PlusMinusProduct(), 0.5),
            (PlusMinusProduct().z(0), 0.5),
        ]

    def test_create_vanishing(self):
        assert PlusMinusProduct.create([(0, "+"), (0, "+")]) == (None, 0)

    def test_to_basis(self):
        y = PauliProduct().y(0)
        assert y.to_basis(PlusMinusProduct) == [
            (PlusMinusProduct().plus(0), -1j),
            (PlusMinusProduct().minus(0), 1j),
        ]
        plus = PlusMinusProduct().plus(0)
        assert plus.to_basis(PauliProduct) == [
            (PauliProduct().x(0), 0.5),
            (PauliProduct().y(0), 0.5j),
        ]

    def test_to_basis_bad_target(self):
        with pytest.raises(TypeError):
            PauliProduct().x(0).to_basis(BosonProduct)
