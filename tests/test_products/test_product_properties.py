import itertools

from pytest import mark

from quop.products import (
    BosonProduct,
    DecoherenceProduct,
    FermionProduct,
    HermitianBosonProduct,
    HermitianFermionProduct,
    HermitianMixedProduct,
    MixedProduct,
    PauliProduct,
    PlusMinusProduct,
)


def products():
    return [
        PauliProduct.from_string("0X1Y2Z"),
        DecoherenceProduct.from_string("0X1iY3iY"),
        DecoherenceProduct.from_string("2iY"),
        PlusMinusProduct.from_string("0+1-2Z"),
        BosonProduct([0, 0, 1], [2]),
        FermionProduct([0, 1, 3], [1, 2]),
        FermionProduct([0, 1], []),
        HermitianBosonProduct([0], [1, 1]),
        HermitianFermionProduct([0, 1], [2]),
        MixedProduct(["0Z1X"], ["c0a1"], ["c0c1a2", "c2a0"]),
        HermitianMixedProduct(["0Z"], ["c0a1"], ["c1a0"]),
    ]


def permutation_sign(perm):
    """Sign of ``perm`` relative to its sorted order, from its cycles."""
    position = {v: i for i, v in enumerate(sorted(perm))}
    target = [position[v] for v in perm]
    seen = set()
    cycles = 0
    for start in range(len(target)):
        if start in seen:
            continue
        cycles += 1
        i = start
        while i not in seen:
            seen.add(i)
            i = target[i]
    return (-1) ** (len(target) - cycles)


class TestUniversalProperties:

    @mark.parametrize("product", products(), ids=repr)
    def test_text_round_trip(self, product):
        assert type(product).from_string(str(product)) == product

    @mark.parametrize("product", products(), ids=repr)
    def test_double_conjugate(self, product):
        conj, sign = product.hermitian_conjugate()
        back, sign_back = conj.hermitian_conjugate()
        assert back == product
        assert sign * sign_back == 1

    @mark.parametrize("cls, creators, annihilators", [
        (BosonProduct, [2, 0, 2], [1, 0]),
        (FermionProduct, [3, 0, 2], [4, 1]),
        (HermitianBosonProduct, [1, 0], [3, 2]),
        (HermitianFermionProduct, [1, 0], [3, 2]),
    ])
    def test_mode_create_idempotent(self, cls, creators, annihilators):
        product, _ = cls.create(creators, annihilators)
        again = cls.from_string(str(product))
        assert again == product
        assert cls.create(again.creators, again.annihilators) == (product, 1)

    @mark.parametrize("cls, raw", [
        (PauliProduct, [(1, "X"), (0, "Z"), (1, "X")]),
        (DecoherenceProduct, [(2, "iY"), (0, "X"), (2, "iY")]),
        (PlusMinusProduct, [(3, "+"), (1, "Z")]),
    ])
    def test_spin_create_idempotent(self, cls, raw):
        product, _ = cls.create(raw)
        again = cls.from_string(str(product))
        assert again == product
        assert cls.create(list(again.items())) == (product, 1)

    def test_mixed_create_idempotent(self):
        product, sign = MixedProduct.create(["1X0Z"], ["c1c0a2"], ["I"])
        assert sign == 1
        again = MixedProduct.from_string(str(product))
        assert again == product
        assert MixedProduct.create(
            again.spins, again.bosons, again.fermions
        ) == (product, 1)


class TestFermionSigns:

    @mark.parametrize("perm", list(itertools.permutations([0, 2, 3, 5])))
    def test_creator_permutations(self, perm):
        product, sign = FermionProduct.create(perm, [1])
        assert product == FermionProduct([0, 2, 3, 5], [1])
        assert sign == permutation_sign(perm)

    @mark.parametrize("perm", list(itertools.permutations([1, 4, 6])))
    def test_both_groups(self, perm):
        for other in itertools.permutations([0, 2, 7]):
            product, sign = FermionProduct.create(other, perm)
            assert product == FermionProduct([0, 2, 7], [1, 4, 6])
            assert sign == permutation_sign(other) * permutation_sign(perm)

    @mark.parametrize("perm", list(itertools.permutations([1, 2, 3])))
    def test_hermitian_permutations(self, perm):
        product, sign = HermitianFermionProduct.create([0], perm)
        assert product == HermitianFermionProduct([0], [1, 2, 3])
        assert sign == permutation_sign(perm)
