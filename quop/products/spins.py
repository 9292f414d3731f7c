"""Products of single site spin-1/2 operators.

All three spin product types store strictly increasing ``(site, symbol)``
pairs and differ only in the single site basis they use. Multiplication and
basis changes are derived from the 2x2 matrix of each symbol.
"""

import re
import operator
import functools
import itertools

import numpy as np

from ..errors import InvalidIndexError, ParseMismatchError
from .base import Product, check_injective, parse_index, remap_index_function


# map of ``in_state: (out_state, coeff)`` for each single site operator
_OPMAP = {
    "I": {0: (0, 1.0), 1: (1, 1.0)},
    # pauli matrices
    "X": {0: (1, 1.0), 1: (0, 1.0)},
    "Y": {0: (1, 1.0j), 1: (0, -1.0j)},
    "Z": {0: (0, 1.0), 1: (1, -1.0)},
    # iY = ZX: the real valued Y
    "iY": {0: (1, -1.0), 1: (0, 1.0)},
    # raising and lowering: + = (X + iY) / 2, - = (X - iY) / 2
    "+": {1: (0, 1.0)},
    "-": {0: (1, 1.0)},
}


@functools.lru_cache(maxsize=None)
def get_mat(op, dtype=None):
    """Get the 2x2 matrix of the single site operator labelled ``op``."""
    if dtype is None:
        if any(
            isinstance(coeff, complex) for _, (_, coeff) in _OPMAP[op].items()
        ):
            dtype = np.complex128
        else:
            dtype = np.float64

    a = np.zeros((2, 2), dtype=dtype)
    for j, (i, xij) in _OPMAP[op].items():
        a[i, j] = xij
    # make immutable since caching
    a.flags.writeable = False
    return a


@functools.lru_cache(maxsize=2**14)
def get_decomp(ops, basis, atol=1e-12):
    """Decompose the product of a sequence of single site operators onto an
    orthogonal operator basis.

    Parameters
    ----------
    ops : tuple[str]
        The operator sequence, applied right to left as in matrix
        multiplication.
    basis : tuple[str]
        The orthogonal basis to decompose onto.
    atol : float, optional
        Components smaller than this are dropped.

    Returns
    -------
    tuple[(complex, str)]

    Examples
    --------

        >>> get_decomp(("Z", "X"), ("I", "X", "Y", "Z"))
        ((1j, 'Y'),)

        >>> get_decomp(("+", "-"), ("I", "+", "-", "Z"))
        ((0.5, 'I'), (0.5, 'Z'))
    """
    mat = functools.reduce(operator.matmul, map(get_mat, ops), get_mat("I"))

    terms = []
    for bop in basis:
        bmat = get_mat(bop)
        bdag = bmat.conj().T

        # Hilbert-Schmidt projection
        cb = np.trace(bdag @ mat) / np.trace(bdag @ bmat)

        # ignore zero components
        if abs(cb) >= atol:
            terms.append((complex(cb), bop))

    return tuple(terms)


@functools.lru_cache(maxsize=None)
def get_dagger(op, basis):
    """The hermitian conjugate of a single basis operator, as a
    ``(coeff, symbol)`` pair within the same basis.
    """
    dag = get_mat(op).conj().T
    for bop in basis:
        ratio = _match_ratio(dag, get_mat(bop))
        if ratio is not None:
            return ratio, bop
    raise ValueError(f"No match found for conjugate of '{op}'.")


def _match_ratio(a, b):
    """If ``a`` is a scalar multiple of ``b`` return the scalar."""
    k = np.argmax(np.abs(b))
    ratio = a.flat[k] / b.flat[k]
    if np.allclose(a, ratio * b):
        return complex(ratio)
    return None


class SpinProduct(Product):
    """Base class of spin products, a sorted tuple of ``(site, symbol)``
    pairs with at most one operator per site. Subclasses set ``basis``, the
    identity first followed by the allowed symbols.
    """

    __slots__ = ()

    basis = ("I",)

    def __init__(self, items=()):
        if isinstance(items, dict):
            items = items.items()
        pairs = {}
        for site, symbol in items:
            site = parse_index(site)
            self._check_symbol(symbol)
            if site in pairs:
                raise InvalidIndexError(
                    f"Site {site} appears twice in {self.__class__.__name__}, "
                    "use `create` to merge operators on the same site."
                )
            if symbol != "I":
                pairs[site] = symbol
        self._key = tuple(sorted(pairs.items()))

    @classmethod
    def _check_symbol(cls, symbol):
        if symbol not in cls.basis:
            raise InvalidIndexError(
                f"Unknown symbol {symbol!r} for {cls.__name__}, "
                f"expected one of {cls.basis[1:]}."
            )

    @classmethod
    def _from_sorted(cls, pairs):
        new = cls.__new__(cls)
        new._key = tuple(pairs)
        return new

    @classmethod
    def create(cls, items=()):
        """Create the canonical product from raw ``(site, symbol)`` pairs
        in the order they act. Repeated equal symbols on a site are
        multiplied out, two different symbols on one site are rejected.

        Returns
        -------
        product : SpinProduct or None
            ``None`` if the product vanishes.
        coeff : complex
            The scalar factor relating the raw input to ``product``.
        """
        if isinstance(items, dict):
            items = items.items()
        by_site = {}
        for site, symbol in items:
            site = parse_index(site)
            cls._check_symbol(symbol)
            if symbol == "I":
                continue
            by_site.setdefault(site, []).append(symbol)

        coeff = 1
        pairs = []
        for site, symbols in sorted(by_site.items()):
            if len(set(symbols)) > 1:
                raise InvalidIndexError(
                    f"Different operators {symbols} on site {site}."
                )
            terms = get_decomp(tuple(symbols), cls.basis)
            if not terms:
                # e.g. + * + = 0
                return None, 0
            ((c, symbol),) = terms
            coeff *= c
            if symbol != "I":
                pairs.append((site, symbol))

        if coeff in (1, -1):
            coeff = int(coeff.real)
        return cls._from_sorted(pairs), coeff

    def get(self, site):
        """The symbol acting on ``site``, ``"I"`` if none."""
        return dict(self._key).get(site, "I")

    def set_symbol(self, site, symbol):
        """A new product with ``symbol`` on ``site``, replacing any operator
        already there. ``"I"`` removes the site.
        """
        site = parse_index(site)
        self._check_symbol(symbol)
        pairs = dict(self._key)
        if symbol == "I":
            pairs.pop(site, None)
        else:
            pairs[site] = symbol
        return self._from_sorted(sorted(pairs.items()))

    def sites(self):
        return tuple(site for site, _ in self._key)

    def items(self):
        return iter(self._key)

    def __len__(self):
        return len(self._key)

    def __iter__(self):
        return iter(self._key)

    @classmethod
    def _text_re(cls):
        symbols = sorted(cls.basis[1:], key=len, reverse=True)
        alternatives = "|".join(map(re.escape, symbols))
        return re.compile(rf"(\d+)({alternatives})")

    @classmethod
    def from_string(cls, text):
        """Parse the text form, e.g. ``"0Z1X"``, ``"I"`` for the empty
        product.
        """
        if not isinstance(text, str):
            raise ParseMismatchError(f"Expected text, got {text!r}.")
        text = text.strip()
        if text in ("", "I"):
            return cls()
        token_re = cls._text_re()
        pairs = []
        pos = 0
        while pos < len(text):
            match = token_re.match(text, pos)
            if match is None:
                raise ParseMismatchError(
                    f"'{text}' is not a valid {cls.__name__}, failed at "
                    f"position {pos}."
                )
            pairs.append((int(match.group(1)), match.group(2)))
            pos = match.end()
        return cls(pairs)

    def __str__(self):
        if not self._key:
            return "I"
        return "".join(f"{site}{symbol}" for site, symbol in self._key)

    def to_compact(self):
        return [[site, symbol] for site, symbol in self._key]

    @classmethod
    def from_compact(cls, data):
        return cls([tuple(pair) for pair in data])

    def current_number(self):
        """Number of spins needed to hold this product."""
        if not self._key:
            return 0
        return self._key[-1][0] + 1

    def shape(self):
        return (len(self._key),)

    @classmethod
    def _plain_type(cls):
        return cls

    def hermitian_conjugate(self):
        """The hermitian conjugate as a ``(product, sign)`` pair."""
        sign = 1
        pairs = []
        for site, symbol in self._key:
            coeff, dag = get_dagger(symbol, self.basis)
            sign *= coeff
            pairs.append((site, dag))
        return self._from_sorted(pairs), int(sign.real)

    def multiply(self, other):
        """Multiply with another product of the same type, site by site.

        Returns
        -------
        list[(SpinProduct, complex)]
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Can't multiply {self.__class__.__name__} with "
                f"{other.__class__.__name__}."
            )
        left, right = dict(self._key), dict(other._key)
        sites = sorted(set(left) | set(right))

        per_site = []
        for site in sites:
            ops = tuple(
                op for op in (left.get(site), right.get(site)) if op
            )
            decomp = get_decomp(ops, self.basis)
            if not decomp:
                return []
            per_site.append([(c, (site, op)) for c, op in decomp])

        return self._expand(per_site)

    @classmethod
    def _expand(cls, per_site):
        """Cartesian expansion of per site ``(coeff, (site, symbol))``
        choices into a list of ``(product, coeff)``, merging equal
        products.
        """
        terms = {}
        for choice in itertools.product(*per_site):
            coeff = functools.reduce(
                operator.mul, (c for c, _ in choice), 1 + 0j
            )
            pairs = [pair for _, pair in choice if pair[1] != "I"]
            product = cls._from_sorted(pairs)
            coeff = terms.pop(product, 0) + coeff
            if coeff != 0:
                terms[product] = coeff
        return sorted(terms.items())

    def to_basis(self, target):
        """Rewrite this product in the single site basis of ``target``.

        Parameters
        ----------
        target : type
            One of :class:`PauliProduct`, :class:`DecoherenceProduct` or
            :class:`PlusMinusProduct`.

        Returns
        -------
        list[(SpinProduct, complex)]
        """
        if not (isinstance(target, type) and issubclass(target, SpinProduct)):
            raise TypeError(f"Can't convert to {target}.")
        per_site = [
            [(c, (site, op)) for c, op in get_decomp((symbol,), target.basis)]
            for site, symbol in self._key
        ]
        return target._expand(per_site)

    def remap_indices(self, mapping):
        """Relabel sites with the injective ``mapping``, the sign is always
        1 as operators on different sites commute.
        """
        fn = remap_index_function(mapping)
        old = self.sites()
        new = [parse_index(fn(site)) for site in old]
        check_injective(old, new)
        pairs = sorted(zip(new, (symbol for _, symbol in self._key)))
        return self._from_sorted(pairs), 1


class PauliProduct(SpinProduct):
    """Product of Pauli operators ``X``, ``Y`` and ``Z`` on distinct sites,
    e.g. ``PauliProduct().z(0).x(1)`` with text form ``"0Z1X"``.

    Multiplication follows the standard Pauli algebra, ``X·Y = iZ``,
    ``Y·Z = iX``, ``Z·X = iY`` and ``-i`` for the reversed orders. So
    ``PauliProduct().z(0) * PauliProduct().x(0)`` is
    ``[(PauliProduct().y(0), 1j)]`` while ``x(0) * z(0)`` gives ``-1j``.
    """

    __slots__ = ()

    basis = ("I", "X", "Y", "Z")

    def x(self, site):
        return self.set_symbol(site, "X")

    def y(self, site):
        return self.set_symbol(site, "Y")

    def z(self, site):
        return self.set_symbol(site, "Z")

    def set_pauli(self, site, symbol):
        return self.set_symbol(site, symbol)

    def is_natural_hermitian(self):
        return True

    # Pauli products are self adjoint and so serve directly as the keys of
    # hermitian operators

    def to_plain(self):
        return self

    @classmethod
    def fold(cls, product, value):
        return product, value


class DecoherenceProduct(SpinProduct):
    """Product of the real operators ``X``, ``iY`` and ``Z``, the natural
    keys of spin Lindblad noise.
    """

    __slots__ = ()

    basis = ("I", "X", "iY", "Z")

    def x(self, site):
        return self.set_symbol(site, "X")

    def iy(self, site):
        return self.set_symbol(site, "iY")

    def z(self, site):
        return self.set_symbol(site, "Z")

    def set_pauli(self, site, symbol):
        return self.set_symbol(site, symbol)


class PlusMinusProduct(SpinProduct):
    """Product of raising ``+``, lowering ``-`` and ``Z`` operators."""

    __slots__ = ()

    basis = ("I", "+", "-", "Z")

    def plus(self, site):
        return self.set_symbol(site, "+")

    def minus(self, site):
        return self.set_symbol(site, "-")

    def z(self, site):
        return self.set_symbol(site, "Z")
