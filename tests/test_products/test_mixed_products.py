import pytest
from pytest import mark

from quop.errors import (
    InvalidIndexError,
    MismatchedSubsystemsError,
    ParseMismatchError,
)
from quop.products import (
    BosonProduct,
    FermionProduct,
    HermitianMixedProduct,
    MixedProduct,
    PauliProduct,
)


class TestMixedProduct:

    def test_text(self):
        p = MixedProduct(["0Z"], ["c0a1"], ["c0a0"])
        assert str(p) == "S0Z:Bc0a1:Fc0a0:"
        assert p.spins == (PauliProduct().z(0),)
        assert p.bosons == (BosonProduct([0], [1]),)
        assert p.fermions == (FermionProduct([0], [0]),)
        assert p.subsystems() == (1, 1, 1)

    @mark.parametrize("text", ["S0Z:Bc0a1:Fc0a0:", ":S0Z:Bc0a1:Fc0a0:"])
    def test_from_string(self, text):
        p = MixedProduct.from_string(text)
        assert p == MixedProduct(["0Z"], ["c0a1"], ["c0a0"])

    def test_several_subsystems(self):
        p = MixedProduct.from_string("S0X:SI:Fc0:Fa1:")
        assert p.subsystems() == (2, 0, 2)
        assert str(p) == "S0X:SI:Fc0:Fa1:"

    @mark.parametrize("text", [
        "Bc0a0:S0Z:",
        "S0Z",
        "X0Z:",
        "S0Q:",
        "Fc1c0:",
    ])
    def test_bad_text(self, text):
        with pytest.raises(ParseMismatchError):
            MixedProduct.from_string(text)

    def test_wrong_slot_type(self):
        with pytest.raises(InvalidIndexError):
            MixedProduct([BosonProduct([0], [])], [], [])

    def test_multiply(self):
        a = MixedProduct(["0X"], [], ["c0"])
        b = MixedProduct(["0Y"], [], ["a0"])
        assert a * b == [(MixedProduct(["0Z"], [], ["c0a0"]), 1j)]

    def test_multiply_expands_slots(self):
        a = MixedProduct([], ["a0"], ["a0"])
        b = MixedProduct([], ["c0"], ["c0"])
        # (c0 a0 + 1)(1 - c0 a0)
        assert a * b == [
            (MixedProduct([], ["I"], ["I"]), 1),
            (MixedProduct([], ["I"], ["c0a0"]), -1),
            (MixedProduct([], ["c0a0"], ["I"]), 1),
            (MixedProduct([], ["c0a0"], ["c0a0"]), -1),
        ]

    def test_fermion_slots_independent(self):
        a = MixedProduct([], [], ["c0", "I"])
        b = MixedProduct([], [], ["I", "c0"])
        assert a * b == [(MixedProduct([], [], ["c0", "c0"]), 1)]
        assert b * a == [(MixedProduct([], [], ["c0", "c0"]), 1)]

    def test_multiply_vanishing(self):
        a = MixedProduct(["0Z"], [], ["c0"])
        assert a * a == []

    def test_multiply_mismatched(self):
        a = MixedProduct(["0Z"], [], [])
        b = MixedProduct(["0Z"], ["I"], [])
        with pytest.raises(MismatchedSubsystemsError):
            a * b

    def test_numbers_and_shape(self):
        p = MixedProduct(["0Z1X"], ["c0a1"], ["c0c1a0"])
        assert p.current_number() == ((2,), (2,), (2,))
        assert p.max_index() == ((1,), (1,), (1,))
        assert p.shape() == ((2,), ((1, 1),), ((2, 1),))

    def test_hermitian_conjugate(self):
        p = MixedProduct(["0Y"], ["c0a1"], ["c0c1a2"])
        conj, sign = p.hermitian_conjugate()
        assert conj == MixedProduct(["0Y"], ["c1a0"], ["c2a0a1"])
        assert sign == -1

    def test_remap(self):
        p = MixedProduct(["0Z"], ["c0a1"], ["c0c1"])
        new, sign = p.remap_indices({0: 1, 1: 0})
        assert new == MixedProduct(["1Z"], ["c1a0"], ["c0c1"])
        assert sign == -1

    def test_compact(self):
        p = MixedProduct(["0Z"], ["c0a1"], ["c0a0"])
        assert p.to_compact() == [[[[0, "Z"]]], [[[0], [1]]], [[[0], [0]]]]
        assert MixedProduct.from_compact(p.to_compact()) == p


class TestHermitianMixedProduct:

    def test_valid_ordering(self):
        HermitianMixedProduct(["0X"], ["c0a1"], [])
        with pytest.raises(InvalidIndexError):
            HermitianMixedProduct(["0X"], ["c1a0"], [])

    def test_first_differing_slot_decides(self):
        # bosons c0a1 < conjugate decides, fermion slot order is irrelevant
        HermitianMixedProduct([], ["c0a1"], ["c1a0"])
        with pytest.raises(InvalidIndexError):
            HermitianMixedProduct([], ["c0a0"], ["c1a0"])

    def test_create_valid_pair(self):
        p, value = HermitianMixedProduct.create_valid_pair(
            ["0X"], ["c1a0"], [], 2j
        )
        assert p == HermitianMixedProduct(["0X"], ["c0a1"], [])
        assert value == -2j

    def test_natural_hermitian(self):
        assert HermitianMixedProduct(["0Z"], ["c0a0"], []).is_natural_hermitian()
        assert not HermitianMixedProduct([], ["c0a1"], []).is_natural_hermitian()

    def test_to_plain(self):
        p = HermitianMixedProduct(["0Z"], ["c0a1"], [])
        assert p.to_plain() == MixedProduct(["0Z"], ["c0a1"], [])
        assert p.hermitian_conjugate() == (p, 1)
