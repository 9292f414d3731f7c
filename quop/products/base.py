"""Shared machinery for products: the common interface, index parsing,
sign-tracking sorts and normal ordering of creation / annihilation
operators.
"""

import re
import json
import functools
import numbers

from ..errors import (
    DecodeError,
    InvalidIndexError,
    ParseMismatchError,
)


def parse_index(index):
    """Check that ``index`` is a non-negative integer and return it as a
    python ``int``.
    """
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise InvalidIndexError(f"Index {index!r} is not an integer.")
    if index < 0:
        raise InvalidIndexError(f"Index {index} is negative.")
    return int(index)


def parse_indices(indices):
    return tuple(map(parse_index, indices))


def sort_with_sign(indices, fermionic):
    """Sort ``indices`` into ascending order, tracking the sign of the
    permutation if the indices label fermionic operators.

    Parameters
    ----------
    indices : sequence of int
        The raw indices.
    fermionic : bool
        Whether to track the exchange sign and treat repeated indices as a
        vanishing product.

    Returns
    -------
    sorted_indices : tuple[int] or None
        The sorted indices, or ``None`` for a vanishing fermionic product.
    sign : int
        +1 or -1, or 0 for a vanishing product.
    """
    indices = tuple(indices)
    if not fermionic:
        return tuple(sorted(indices)), 1

    if len(set(indices)) != len(indices):
        # c_i c_i = 0 and a_i a_i = 0
        return None, 0

    # parity of the permutation = parity of the number of inversions
    inversions = sum(
        1
        for i in range(len(indices))
        for j in range(i + 1, len(indices))
        if indices[i] > indices[j]
    )
    return tuple(sorted(indices)), (-1) ** inversions


def reversal_sign(n):
    """Sign of reversing the order of ``n`` mutually anticommuting
    operators.
    """
    return (-1) ** (n * (n - 1) // 2)


def remap_index_function(mapping):
    """Turn ``mapping`` into a function. Dictionaries leave indices they do
    not mention unchanged.
    """
    if callable(mapping):
        return mapping
    return lambda i: mapping.get(i, i)


def check_injective(old, new):
    """Check that a relabelling maps distinct indices to distinct
    indices.
    """
    pairs = dict(zip(old, new))
    if len(set(pairs.values())) != len(pairs):
        raise InvalidIndexError(f"Index mapping {pairs} is not injective.")


def normal_order(ops, fermionic):
    """Bring a sequence of creation and annihilation operators into normal
    order, creators left of annihilators, using ``a_i c_j = c_j a_i +
    delta_ij`` for bosons and ``a_i c_j = delta_ij - c_j a_i`` for
    fermions.

    Parameters
    ----------
    ops : sequence of (bool, int)
        The operators, each a pair of ``(is_creator, index)``.
    fermionic : bool
        Whether the operators anticommute.

    Returns
    -------
    terms : dict[(tuple[int], tuple[int]), int]
        Mapping of raw ``(creators, annihilators)`` index tuples, in the
        order they appear, to integer coefficients.
    """
    exchange = -1 if fermionic else 1
    terms = {}
    stack = [(1, tuple(ops))]
    while stack:
        coeff, ops = stack.pop()
        for k in range(len(ops) - 1):
            (dag_k, i), (dag_l, j) = ops[k], ops[k + 1]
            if (not dag_k) and dag_l:
                # annihilator directly left of a creator -> swap
                swapped = ops[:k] + (ops[k + 1], ops[k]) + ops[k + 2:]
                stack.append((exchange * coeff, swapped))
                if i == j:
                    # contraction term
                    stack.append((coeff, ops[:k] + ops[k + 2:]))
                break
        else:
            creators = tuple(i for dag, i in ops if dag)
            annihilators = tuple(i for dag, i in ops if not dag)
            key = (creators, annihilators)
            coeff = terms.pop(key, 0) + coeff
            if coeff != 0:
                terms[key] = coeff
    return terms


_MODE_TOKEN_RE = re.compile(r"([ca])(\d+)")
_MODE_TEXT_RE = re.compile(r"(?:[ca]\d+)+")


def parse_mode_text(text):
    """Split text such as ``"c0c1a0a2"`` into creator and annihilator
    indices, requiring creators to come first.
    """
    text = text.strip()
    if text == "I":
        return (), ()
    if not _MODE_TEXT_RE.fullmatch(text):
        raise ParseMismatchError(
            f"'{text}' is not a valid mode product, expected e.g. 'c0c1a0a2'."
        )
    creators = []
    annihilators = []
    for kind, index in _MODE_TOKEN_RE.findall(text):
        if kind == "c":
            if annihilators:
                raise ParseMismatchError(
                    f"Creator after annihilator in '{text}', "
                    "products must be normal ordered."
                )
            creators.append(int(index))
        else:
            annihilators.append(int(index))
    return tuple(creators), tuple(annihilators)


@functools.total_ordering
class Product:
    """Base class for immutable, canonical products of single site or
    single mode operators.

    Subclasses store their canonical data in ``_key``, which is used for
    equality, hashing and ordering.
    """

    __slots__ = ("_key",)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._key < other._key

    def __hash__(self):
        return hash((self.__class__.__name__, self._key))

    def __repr__(self):
        return f"{self.__class__.__name__}('{self}')"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (self.__class__.from_string, (str(self),))

    def __mul__(self, other):
        return self.multiply(other)

    def max_index(self):
        """The highest index acted on, -1 for the empty product."""
        return self.current_number() - 1

    def is_natural_hermitian(self):
        """Whether the product is its own hermitian conjugate, such that
        only one of ``O`` and ``O^dagger`` need to be stored.
        """
        product, sign = self.hermitian_conjugate()
        return product == self and sign == 1

    def shift(self, offset):
        """Shift every index by ``offset``, see :meth:`remap_indices`."""
        return self.remap_indices(lambda i: i + offset)

    def to_json(self):
        """Readable JSON text of this product."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text):
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid JSON for {cls.__name__}.") from e
        if not isinstance(data, str):
            raise DecodeError(f"Invalid JSON for {cls.__name__}: {data!r}.")
        try:
            return cls.from_string(data)
        except InvalidIndexError as e:
            raise DecodeError(f"Invalid {cls.__name__} '{data}'.") from e

    def to_bytes(self):
        """Binary form of this product."""
        from ..serialize import encode_bytes

        return encode_bytes(self.__class__.__name__, self.to_compact())

    @classmethod
    def from_bytes(cls, data):
        from ..serialize import decode_bytes

        compact = decode_bytes(data, cls.__name__)
        try:
            return cls.from_compact(compact)
        except (InvalidIndexError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid {cls.__name__} payload.") from e


class ModeProduct(Product):
    """Product of creation operators followed by annihilation operators,
    each group sorted. Subclasses set ``fermionic``.
    """

    __slots__ = ()

    fermionic = False

    def __init__(self, creators=(), annihilators=()):
        creators = parse_indices(creators)
        annihilators = parse_indices(annihilators)
        self._key = (
            self._canonical_group(creators),
            self._canonical_group(annihilators),
        )
        self._check()

    @classmethod
    def _canonical_group(cls, indices):
        sorted_indices, _ = sort_with_sign(indices, False)
        return sorted_indices

    def _check(self):
        pass

    @classmethod
    def _from_sorted(cls, creators, annihilators):
        new = cls.__new__(cls)
        new._key = (tuple(creators), tuple(annihilators))
        return new

    @property
    def creators(self):
        """The sorted indices of the creation operators."""
        return self._key[0]

    @property
    def annihilators(self):
        """The sorted indices of the annihilation operators."""
        return self._key[1]

    def number_creators(self):
        return len(self._key[0])

    def number_annihilators(self):
        return len(self._key[1])

    @classmethod
    def create(cls, creators=(), annihilators=()):
        """Create the canonical product of raw, possibly unsorted indices.

        Parameters
        ----------
        creators : sequence of int
            Indices of the creation operators, in the order they act.
        annihilators : sequence of int
            Indices of the annihilation operators, in the order they act.

        Returns
        -------
        product : ModeProduct or None
            The canonical product, ``None`` if the term vanishes.
        sign : int
            The sign relating the raw input to the canonical product, 0 if
            the term vanishes.
        """
        creators = parse_indices(creators)
        annihilators = parse_indices(annihilators)
        sc, sign_c = sort_with_sign(creators, cls.fermionic)
        sa, sign_a = sort_with_sign(annihilators, cls.fermionic)
        if sign_c == 0 or sign_a == 0:
            return None, 0
        return cls._from_sorted(sc, sa), sign_c * sign_a

    @classmethod
    def from_string(cls, text):
        """Parse the canonical text form, e.g. ``"c0c1a0a2"``."""
        if not isinstance(text, str):
            raise ParseMismatchError(f"Expected text, got {text!r}.")
        creators, annihilators = parse_mode_text(text)
        try:
            return cls(creators, annihilators)
        except InvalidIndexError as e:
            raise ParseMismatchError(
                f"'{text}' is not the canonical form of a {cls.__name__}."
            ) from e

    def __str__(self):
        if not (self._key[0] or self._key[1]):
            return "I"
        return "".join(
            [f"c{i}" for i in self._key[0]] + [f"a{i}" for i in self._key[1]]
        )

    def to_compact(self):
        return [list(self._key[0]), list(self._key[1])]

    @classmethod
    def from_compact(cls, data):
        creators, annihilators = data
        return cls(creators, annihilators)

    def current_number(self):
        """Number of modes needed to hold this product, highest index + 1."""
        return max(self._key[0] + self._key[1], default=-1) + 1

    def shape(self):
        return (len(self._key[0]), len(self._key[1]))

    def _conjugate_sign(self):
        if not self.fermionic:
            return 1
        return reversal_sign(len(self._key[0])) * reversal_sign(
            len(self._key[1])
        )

    def hermitian_conjugate(self):
        """The hermitian conjugate, swapping creators and annihilators.

        Returns
        -------
        product : ModeProduct
        sign : int
            The sign acquired by re-sorting the reversed operator strings.
        """
        return (
            self._from_sorted(self._key[1], self._key[0]),
            self._conjugate_sign(),
        )

    def _plain_key(self):
        return self._key

    def multiply(self, other):
        """Multiply with ``other``, normal ordering the result.

        Returns
        -------
        list[(ModeProduct, complex)]
        """
        if not isinstance(other, ModeProduct) or (
            other.fermionic != self.fermionic
        ):
            raise TypeError(
                f"Can't multiply {self.__class__.__name__} with "
                f"{other.__class__.__name__}."
            )
        return self._multiply_keys(self._plain_key(), other._plain_key())

    @classmethod
    def _multiply_keys(cls, left, right):
        plain = cls._plain_type()
        ops = (
            [(True, i) for i in left[0]]
            + [(False, i) for i in left[1]]
            + [(True, i) for i in right[0]]
            + [(False, i) for i in right[1]]
        )
        results = {}
        for (cs, ans), coeff in normal_order(ops, cls.fermionic).items():
            product, sign = plain.create(cs, ans)
            if sign == 0:
                continue
            value = results.pop(product, 0) + sign * coeff
            if value != 0:
                results[product] = value
        return [(p, complex(c)) for p, c in sorted(results.items())]

    @classmethod
    def _plain_type(cls):
        return cls

    def remap_indices(self, mapping):
        """Relabel indices with the injective ``mapping``.

        Returns
        -------
        product : ModeProduct
        sign : int
            Sign from re-sorting fermionic operators.
        """
        fn = remap_index_function(mapping)
        old = self._key[0] + self._key[1]
        new = [parse_index(fn(i)) for i in old]
        check_injective(old, new)
        n = len(self._key[0])
        return self._plain_type().create(new[:n], new[n:])


class HermitianModeProduct(ModeProduct):
    """Mode product standing for ``O + O^dagger``, stored only for the
    ordering with ``creators <= annihilators``.
    """

    __slots__ = ()

    def _check(self):
        if self._key[0] > self._key[1]:
            raise InvalidIndexError(
                f"'{self}' is not a valid hermitian product, creators must "
                "not be larger than annihilators, use `create_valid_pair`."
            )

    @classmethod
    def create(cls, creators=(), annihilators=()):
        product, sign = cls._plain_type().create(creators, annihilators)
        if sign == 0:
            return None, 0
        new = cls._from_sorted(*product._key)
        new._check()
        return new, sign

    @classmethod
    def create_valid_pair(cls, creators, annihilators, value):
        """Create the canonical hermitian product of raw indices, folding
        ``value`` onto the conjugate partner if needed.

        Parameters
        ----------
        creators : sequence of int
        annihilators : sequence of int
        value : coefficient
            The coefficient in front of the raw product.

        Returns
        -------
        product : HermitianModeProduct or None
            ``None`` if the term vanishes.
        value : coefficient
            The coefficient to store at ``product``.
        """
        from .. import coefficients as cf

        value = cf.as_coefficient(value)
        product, sign = cls._plain_type().create(creators, annihilators)
        if sign == 0:
            return None, cf.as_coefficient(0)
        return cls.fold(product, cf.multiply(value, complex(sign)))

    @classmethod
    def fold(cls, product, value):
        """Map a canonical plain ``product`` with coefficient ``value`` onto
        its hermitian representative.
        """
        from .. import coefficients as cf

        if product._key[0] <= product._key[1]:
            return cls._from_sorted(*product._key), value
        conj, sign = product.hermitian_conjugate()
        return (
            cls._from_sorted(*conj._key),
            cf.multiply(cf.conjugate(value), complex(sign)),
        )

    def hermitian_conjugate(self):
        return self, 1

    def is_natural_hermitian(self):
        return self._key[0] == self._key[1]

    def to_plain(self):
        """The corresponding plain (non-hermitian) product ``O``."""
        return self._plain_type()._from_sorted(*self._key)

    def multiply(self, other):
        if isinstance(other, HermitianModeProduct):
            other = other.to_plain()
        return self.to_plain().multiply(other)

    def remap_indices(self, mapping):
        product, sign = self.to_plain().remap_indices(mapping)
        if sign == 0:
            return None, 0
        folded, value = self.fold(product, complex(sign))
        return folded, value

