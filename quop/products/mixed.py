"""Products acting on several spin, bosonic and fermionic subsystems at
once.
"""

import functools
import itertools
import operator

from .. import coefficients as cf
from ..errors import InvalidIndexError, MismatchedSubsystemsError, ParseMismatchError
from .base import Product
from .bosons import BosonProduct
from .fermions import FermionProduct
from .spins import PauliProduct

_SLOT_PREFIXES = ("S", "B", "F")


class MixedProduct(Product):
    """Tuple of one product per subsystem: spin products first, then boson
    products, then fermion products.

    Parameters
    ----------
    spins : sequence of PauliProduct or str
        One product per spin subsystem.
    bosons : sequence of BosonProduct or str
        One product per bosonic subsystem.
    fermions : sequence of FermionProduct or str
        One product per fermionic subsystem.

    Examples
    --------

        >>> str(MixedProduct(["0Z"], ["c0a1"], ["c0a0"]))
        'S0Z:Bc0a1:Fc0a0:'
    """

    __slots__ = ()

    slot_types = (PauliProduct, BosonProduct, FermionProduct)

    def __init__(self, spins=(), bosons=(), fermions=()):
        self._key = tuple(
            tuple(self._as_slot(kind, p) for p in products)
            for kind, products in zip(self.slot_types, (spins, bosons, fermions))
        )
        self._check()

    @staticmethod
    def _as_slot(kind, product):
        if isinstance(product, str):
            return kind.from_string(product)
        if type(product) is not kind:
            raise InvalidIndexError(
                f"Expected a {kind.__name__} or its text, got {product!r}."
            )
        return product

    def _check(self):
        pass

    @classmethod
    def _from_slots(cls, key):
        new = cls.__new__(cls)
        new._key = tuple(map(tuple, key))
        return new

    @property
    def spins(self):
        return self._key[0]

    @property
    def bosons(self):
        return self._key[1]

    @property
    def fermions(self):
        return self._key[2]

    def subsystems(self):
        """The number of spin, bosonic and fermionic subsystems."""
        return tuple(map(len, self._key))

    @classmethod
    def create(cls, spins=(), bosons=(), fermions=()):
        """Create the product from its slots, mixed products of canonical
        slots never pick up a sign.
        """
        return cls(spins, bosons, fermions), 1

    @classmethod
    def from_string(cls, text):
        """Parse text such as ``"S0Z:Bc0a1:Fc0a0:"``, a leading ``":"`` is
        accepted.
        """
        if not isinstance(text, str):
            raise ParseMismatchError(f"Expected text, got {text!r}.")
        parts = text.strip().split(":")
        if parts and parts[0] == "":
            parts = parts[1:]
        if not parts or parts[-1] != "":
            raise ParseMismatchError(
                f"'{text}' is not a valid {cls.__name__}, every subsystem "
                "must be terminated by ':'."
            )
        slots = ([], [], [])
        stage = 0
        for part in parts[:-1]:
            if not part or part[0] not in _SLOT_PREFIXES:
                raise ParseMismatchError(
                    f"Unknown subsystem '{part}' in '{text}'."
                )
            kind = _SLOT_PREFIXES.index(part[0])
            if kind < stage:
                raise ParseMismatchError(
                    f"Subsystems in '{text}' must come in the order spins, "
                    "bosons, fermions."
                )
            stage = kind
            slots[kind].append(part[1:])
        try:
            return cls(*slots)
        except InvalidIndexError as e:
            if isinstance(e, ParseMismatchError):
                raise
            raise ParseMismatchError(
                f"'{text}' is not a valid {cls.__name__}."
            ) from e

    def __str__(self):
        return "".join(
            f"{prefix}{product}:"
            for prefix, products in zip(_SLOT_PREFIXES, self._key)
            for product in products
        )

    def to_compact(self):
        return [[p.to_compact() for p in products] for products in self._key]

    @classmethod
    def from_compact(cls, data):
        spins, bosons, fermions = data
        return cls(
            [PauliProduct.from_compact(d) for d in spins],
            [BosonProduct.from_compact(d) for d in bosons],
            [FermionProduct.from_compact(d) for d in fermions],
        )

    def current_number(self):
        """Number of sites or modes used in each subsystem, as a tuple of
        ``(spins, bosons, fermions)`` tuples.
        """
        return tuple(
            tuple(p.current_number() for p in products)
            for products in self._key
        )

    def max_index(self):
        return tuple(
            tuple(n - 1 for n in numbers) for numbers in self.current_number()
        )

    def shape(self):
        """Operator counts per subsystem: sites acted on for spins,
        ``(creators, annihilators)`` for modes.
        """
        spins, bosons, fermions = self._key
        return (
            tuple(len(p) for p in spins),
            tuple(p.shape() for p in bosons),
            tuple(p.shape() for p in fermions),
        )

    def _check_compatible(self, other):
        if not isinstance(other, MixedProduct):
            raise TypeError(
                f"Can't multiply {self.__class__.__name__} with "
                f"{other.__class__.__name__}."
            )
        if self.subsystems() != other.subsystems():
            raise MismatchedSubsystemsError(
                f"Subsystems {self.subsystems()} and {other.subsystems()} "
                "don't match."
            )

    def hermitian_conjugate(self):
        sign = 1
        key = []
        for products in self._key:
            slot = []
            for p in products:
                conj, s = p.hermitian_conjugate()
                sign *= s
                slot.append(conj)
            key.append(slot)
        return self._plain_type()._from_slots(key), sign

    @classmethod
    def _plain_type(cls):
        return cls

    def to_plain(self):
        return self

    def multiply(self, other):
        """Multiply slot by slot, combining every choice of per slot result
        terms. Fermionic slots are independent species, so no sign arises
        between them.

        Returns
        -------
        list[(MixedProduct, complex)]
        """
        self._check_compatible(other)
        left, right = self.to_plain(), other.to_plain()

        per_slot = []
        for products_l, products_r in zip(left._key, right._key):
            for pl, pr in zip(products_l, products_r):
                terms = pl.multiply(pr)
                if not terms:
                    return []
                per_slot.append(terms)

        n_spins, n_bosons, _ = self.subsystems()
        terms = {}
        for choice in itertools.product(*per_slot):
            coeff = functools.reduce(
                operator.mul, (c for _, c in choice), 1 + 0j
            )
            products = [p for p, _ in choice]
            key = (
                products[:n_spins],
                products[n_spins:n_spins + n_bosons],
                products[n_spins + n_bosons:],
            )
            product = self._plain_type()._from_slots(key)
            coeff = terms.pop(product, 0) + coeff
            if coeff != 0:
                terms[product] = coeff
        return sorted(terms.items())

    def remap_indices(self, mapping):
        """Relabel the indices of every subsystem with the same injective
        ``mapping``.
        """
        sign = 1
        key = []
        for products in self.to_plain()._key:
            slot = []
            for p in products:
                new, s = p.remap_indices(mapping)
                if s == 0:
                    return None, 0
                sign *= s
                slot.append(new)
            key.append(slot)
        return self._plain_type()._from_slots(key), sign


def _mode_order(key):
    """Compare the boson and fermion slots of ``key`` with their conjugate:
    -1 if the first differing slot has creators < annihilators, 1 if
    creators > annihilators, 0 if every slot is self conjugate.
    """
    for products in key[1:]:
        for p in products:
            if p.creators < p.annihilators:
                return -1
            if p.creators > p.annihilators:
                return 1
    return 0


class HermitianMixedProduct(MixedProduct):
    """Mixed product ``O`` standing for ``O + O^dagger`` in a Hamiltonian,
    only valid when ``O`` is not larger than its conjugate.
    """

    __slots__ = ()

    def _check(self):
        if _mode_order(self._key) > 0:
            raise InvalidIndexError(
                f"'{self}' is not a valid hermitian product, use "
                "`create_valid_pair`."
            )

    @classmethod
    def _plain_type(cls):
        return MixedProduct

    def to_plain(self):
        return MixedProduct._from_slots(self._key)

    @classmethod
    def create(cls, spins=(), bosons=(), fermions=()):
        product = cls(spins, bosons, fermions)
        return product, 1

    @classmethod
    def create_valid_pair(cls, spins, bosons, fermions, value):
        """Create the canonical hermitian product, folding ``value`` onto
        the conjugate partner if needed.

        Returns
        -------
        product : HermitianMixedProduct
        value : coefficient
        """
        plain = MixedProduct(spins, bosons, fermions)
        return cls.fold(plain, cf.as_coefficient(value))

    @classmethod
    def fold(cls, product, value):
        if _mode_order(product._key) <= 0:
            return cls._from_slots(product._key), value
        conj, sign = product.hermitian_conjugate()
        return (
            cls._from_slots(conj._key),
            cf.multiply(cf.conjugate(value), complex(sign)),
        )

    def hermitian_conjugate(self):
        return self, 1

    def is_natural_hermitian(self):
        return _mode_order(self._key) == 0

    def remap_indices(self, mapping):
        product, sign = self.to_plain().remap_indices(mapping)
        if sign == 0:
            return None, 0
        return self.fold(product, complex(sign))
