"""Generic operator containers: mappings of canonical products to
coefficients.
"""

import functools
import operator

from .. import coefficients as cf
from ..core import get_num_thread_workers, get_thread_pool, par_reduce
from ..errors import (
    InvalidIndexError,
    MismatchedSubsystemsError,
    NonHermitianError,
)
from ..products import MixedProduct
from ..utils import as_nested_tuple, nested_max, partition_all, progbar as _progbar


class Serializable:
    """Structured, JSON, binary and legacy encodings of a container, see
    :mod:`quop.serialize`.
    """

    def to_dict(self, compact=False, version=None):
        from ..serialize import to_dict

        return to_dict(self, compact=compact, version=version)

    @classmethod
    def from_dict(cls, data):
        from ..serialize import from_dict

        return from_dict(cls, data)

    def to_json(self, version=None):
        from ..serialize import to_json

        return to_json(self, version=version)

    @classmethod
    def from_json(cls, text):
        from ..serialize import from_json

        return from_json(cls, text)

    def to_bytes(self, version=None):
        from ..serialize import to_bytes

        return to_bytes(self, version=version)

    @classmethod
    def from_bytes(cls, data):
        from ..serialize import from_bytes

        return from_bytes(cls, data)

    @classmethod
    def from_legacy_json(cls, text):
        """Import a document written by the next schema generation."""
        from ..legacy import from_json_generation_2

        return from_json_generation_2(cls, text)


class Operator(Serializable):
    """Sum of products with coefficients, e.g. ``c0a1 * 0.5 + c1a0 * 0.5``.

    Every key is unique and no coefficient is stored as an exact zero.
    Keys can be given as product instances or as their text form.

    Subclasses set ``key_type``, the product class of the keys.
    """

    key_type = None
    general_type = None

    def __init__(self):
        self._terms = {}

    # ------------------------------ layout --------------------------------- #

    def _layout_args(self):
        """Positional arguments that recreate an empty container of the same
        layout.
        """
        return ()

    def empty_clone(self):
        """A new, empty container of the same type and layout."""
        return self.__class__(*self._layout_args())

    def _general_empty(self):
        cls = self.general_type or self.__class__
        return cls(*self._layout_args())

    def _zero_number(self):
        return 0

    # ------------------------------- keys ---------------------------------- #

    def _to_product(self, key, kind=None):
        kind = kind or self.key_type
        if isinstance(key, str):
            return kind.from_string(key)
        if type(key) is not kind:
            raise InvalidIndexError(
                f"{self.__class__.__name__} expects keys of type "
                f"{kind.__name__} or their text, got {key!r}."
            )
        return key

    def _to_key(self, key):
        return self._to_product(key)

    def _store(self, key, value):
        if cf.is_zero(value):
            self._terms.pop(key, None)
        else:
            self._terms[key] = value

    # ----------------------------- contract -------------------------------- #

    def get(self, key):
        """The coefficient of ``key``, the exact zero if absent."""
        return self._terms.get(self._to_key(key), 0j)

    def set(self, key, value):
        """Overwrite the coefficient of ``key``, removing it if ``value`` is
        exactly zero.

        Returns
        -------
        previous : coefficient or None
            The value stored before, ``None`` if there was none.
        """
        key = self._to_key(key)
        value = cf.as_coefficient(value)
        previous = self._terms.get(key)
        self._store(key, value)
        return previous

    def add_operator_product(self, key, value):
        """Accumulate ``value`` onto the coefficient of ``key``."""
        key = self._to_key(key)
        value = cf.as_coefficient(value)
        old = self._terms.get(key)
        self._store(key, value if old is None else cf.add(old, value))

    def remove(self, key):
        """Remove ``key``, returning its coefficient or ``None``."""
        return self._terms.pop(self._to_key(key), None)

    def keys(self):
        return self._terms.keys()

    def values(self):
        return self._terms.values()

    def items(self):
        return self._terms.items()

    def __len__(self):
        return len(self._terms)

    def __iter__(self):
        return iter(self._terms)

    def __contains__(self, key):
        try:
            return self._to_key(key) in self._terms
        except (InvalidIndexError, MismatchedSubsystemsError):
            return False

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def is_empty(self):
        return not self._terms

    def copy(self):
        new = self.empty_clone()
        new._terms = dict(self._terms)
        return new

    __copy__ = copy

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._layout_args() == other._layout_args()
            and self._terms == other._terms
        )

    __hash__ = None

    def _repr_lines(self):
        return [
            f"{self._format_key(key)}: {cf.format_coefficient(self._terms[key])},"
            for key in sorted(self._terms)
        ]

    def __repr__(self):
        lines = [f"{self.__class__.__name__}{{", *self._repr_lines(), "}"]
        return "\n".join(lines)

    def _format_key(self, key):
        return str(key)

    # ---------------------------- arithmetic ------------------------------- #

    def _check_same_layout(self, other):
        if self._layout_args() != other._layout_args():
            raise MismatchedSubsystemsError(
                f"Layouts {self._layout_args()} and {other._layout_args()} "
                "don't match."
            )

    def _add_all(self, items, factor=None):
        for key, value in items:
            if factor is not None:
                value = cf.multiply(value, factor)
            old = self._terms.get(key)
            self._store(key, value if old is None else cf.add(old, value))

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        self._check_same_layout(other)
        new = self.copy()
        new._add_all(other.items())
        return new

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        self._check_same_layout(other)
        new = self.copy()
        new._add_all(other.items(), factor=-1 + 0j)
        return new

    def __neg__(self):
        new = self.empty_clone()
        new._terms = {k: cf.negate(v) for k, v in self._terms.items()}
        return new

    def _scale(self, factor):
        factor = cf.as_coefficient(factor)
        new = self.empty_clone()
        new._add_all(self.items(), factor=factor)
        return new

    def __mul__(self, other):
        if cf.is_coefficient_like(other):
            return self._scale(other)
        if isinstance(other, Operator):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        if cf.is_coefficient_like(other):
            return self._scale(other)
        return NotImplemented

    def __truediv__(self, other):
        if not cf.is_coefficient_like(other):
            return NotImplemented
        other = cf.as_coefficient(other)
        if cf.is_zero(other):
            raise ZeroDivisionError("Division of an operator by zero.")
        return self._scale(cf.divide(1 + 0j, other))

    def to_operator(self):
        """This operator as the general (non-hermitian) flavor."""
        return self.copy()

    def _multiply_chunk(self, left_items, right_items, progbar=False):
        result = self._general_empty()
        for kl, vl in _progbar(left_items, progbar=progbar):
            for kr, vr in right_items:
                for product, coeff in kl.multiply(kr):
                    value = cf.multiply(cf.multiply(vl, vr), coeff)
                    old = result._terms.get(product)
                    result._store(
                        product, value if old is None else cf.add(old, value)
                    )
        return result

    def multiply(self, other, parallel=False, progbar=False):
        """Multiply with another operator of the same flavor, expanding the
        product of every pair of keys.

        Parameters
        ----------
        other : Operator
            The right hand factor.
        parallel : bool or int, optional
            Whether to split the left keys into chunks processed on the
            thread pool, an integer sets the number of workers.
        progbar : bool, optional
            Whether to show a progress bar over the left keys, serial only.

        Returns
        -------
        Operator
            The product, always of the general flavor.
        """
        left, right = self.to_operator(), other.to_operator()
        if type(left) is not type(right):
            raise TypeError(
                f"Can't multiply {self.__class__.__name__} with "
                f"{other.__class__.__name__}."
            )
        left._check_same_layout(right)

        left_items = tuple(left.items())
        right_items = tuple(right.items())

        if not parallel or len(left_items) < 2:
            return left._multiply_chunk(left_items, right_items, progbar)

        nthreads = get_num_thread_workers(parallel)
        chunksize = -(-len(left_items) // nthreads)
        pool = get_thread_pool(nthreads)
        fn = functools.partial(left._multiply_chunk, right_items=right_items)
        partials = tuple(pool.map(fn, partition_all(chunksize, left_items)))
        return par_reduce(operator.add, partials, nthreads)

    def hermitian_conjugate(self):
        """The hermitian conjugate, conjugating both keys and values."""
        new = self.empty_clone()
        for key, value in self.items():
            conj, sign = key.hermitian_conjugate()
            value = cf.multiply(cf.conjugate(value), complex(sign))
            new._add_all([(conj, value)])
        return new

    # ---------------------------- structure -------------------------------- #

    def _key_shape(self, key):
        return key.shape()

    def separate_into_n_terms(self, *shape):
        """Split into the terms whose keys have exactly ``shape``, e.g.
        ``(1, 1)`` for one creator and one annihilator, and the rest.

        Returns
        -------
        matching : Operator
        remainder : Operator
        """
        shape = as_nested_tuple(shape)
        matching, remainder = self.empty_clone(), self.empty_clone()
        for key, value in self.items():
            if as_nested_tuple(self._key_shape(key)) == shape:
                matching._terms[key] = value
            else:
                remainder._terms[key] = value
        return matching, remainder

    def truncate(self, threshold):
        """Keep literal terms with magnitude strictly above ``threshold``,
        and every symbolic term.
        """
        new = self.empty_clone()
        for key, value in self.items():
            mag = cf.magnitude(value)
            if mag is None or mag > threshold:
                new._terms[key] = value
        return new

    def _remap_key(self, key, value, mapping):
        new, sign = key.remap_indices(mapping)
        return new, cf.multiply(value, complex(sign))

    def remap_indices(self, mapping):
        """Relabel the indices of every key with the injective ``mapping``,
        a dict (unmentioned indices unchanged) or a callable.
        """
        new = self.empty_clone()
        for key, value in self.items():
            key, value = self._remap_key(key, value, mapping)
            if key is not None:
                new._add_all([(key, value)])
        return new

    def _key_number(self, key):
        return key.current_number()

    def current_number(self):
        """Number of sites or modes used, the highest index + 1."""
        number = self._zero_number()
        for key in self.keys():
            number = nested_max(number, self._key_number(key))
        return number


class HermitianOperator(Operator):
    """Operator whose keys ``O`` stand for ``c O + conj(c) O^dagger``, so
    that it always represents a self adjoint operator.

    Keys may be given as hermitian products, plain products or text. A key
    that is not the canonical hermitian representative is folded onto its
    partner, conjugating the value.
    """

    def _fold(self, key, value):
        plain_type = self.key_type._plain_type()
        if isinstance(key, str):
            key = plain_type.from_string(key)
        if type(key) is self.key_type:
            return key, value, False
        if type(key) is not plain_type:
            raise InvalidIndexError(
                f"{self.__class__.__name__} expects keys of type "
                f"{self.key_type.__name__} or {plain_type.__name__}, "
                f"got {key!r}."
            )
        folded, new_value = self.key_type.fold(key, value)
        return folded, new_value, folded.to_plain() != key

    def _to_key(self, key):
        return self._fold(key, 1 + 0j)[0]

    def _check_value(self, key, value):
        if key.is_natural_hermitian() and not cf.is_real(value):
            raise NonHermitianError(
                f"Coefficient {value} of the self adjoint product '{key}' "
                "must be real."
            )
        if key.is_natural_hermitian() and not cf.is_symbolic(value):
            value = complex(value.real)
        return value

    def get(self, key):
        """The coefficient of ``key``. For the conjugate partner of a stored
        key this is the conjugated value.
        """
        folded, sign, flipped = self._fold(key, 1 + 0j)
        value = self._terms.get(folded, 0j)
        if flipped:
            return cf.multiply(cf.conjugate(value), sign)
        return value

    def set(self, key, value):
        key, value, _ = self._fold(key, cf.as_coefficient(value))
        value = self._check_value(key, value)
        previous = self._terms.get(key)
        self._store(key, value)
        return previous

    def add_operator_product(self, key, value):
        key, value, _ = self._fold(key, cf.as_coefficient(value))
        value = self._check_value(key, value)
        old = self._terms.get(key)
        self._store(key, value if old is None else cf.add(old, value))

    def _scale(self, factor):
        factor = cf.as_coefficient(factor)
        if not cf.is_real(factor, atol=0.0):
            # a complex multiple of a hermitian operator is not hermitian
            return self.to_operator()._scale(factor)
        return super()._scale(cf.real_part(factor))

    def hermitian_conjugate(self):
        return self.copy()

    def to_operator(self):
        """Expand every term into ``c O + conj(c) O^dagger``."""
        new = self._general_empty()
        for key, value in self.items():
            plain = key.to_plain()
            new._add_all([(plain, value)])
            if not key.is_natural_hermitian():
                conj, sign = plain.hermitian_conjugate()
                conj_value = cf.multiply(cf.conjugate(value), complex(sign))
                new._add_all([(conj, conj_value)])
        return new

    @classmethod
    def from_operator(cls, op, atol=None):
        """Fold a general operator that is self adjoint into its hermitian
        representation.

        Raises
        ------
        NonHermitianError
            If ``op`` differs from its hermitian conjugate.
        """
        conj = op.hermitian_conjugate()
        for key in set(op.keys()) | set(conj.keys()):
            if not cf.approx_equal(op.get(key), conj.get(key), atol):
                raise NonHermitianError(
                    f"Operator is not hermitian, term '{key}' has "
                    f"{op.get(key)} but its conjugate {conj.get(key)}."
                )

        new = cls(*op._layout_args())
        for key, value in op.items():
            folded, _, flipped = new._fold(key, value)
            if flipped:
                continue
            if folded.is_natural_hermitian():
                value = cf.real_part(value)
            new._add_all([(folded, value)])
        return new

    def _remap_key(self, key, value, mapping):
        plain, sign = key.to_plain().remap_indices(mapping)
        if sign == 0:
            return None, value
        return self.key_type.fold(plain, cf.multiply(value, complex(sign)))


class NoiseOperator(Operator):
    """Lindblad noise operator, a mapping of ordered pairs ``(left, right)``
    of products to the coefficients ``M`` of the dissipator

    ``sum_ij M_ij (L_i rho L_j^dagger - {L_j^dagger L_i, rho} / 2)``.

    No hermiticity constraint is imposed on the pairs.
    """

    def _to_key(self, key):
        if not (isinstance(key, (tuple, list)) and len(key) == 2):
            raise InvalidIndexError(
                f"{self.__class__.__name__} keys are (left, right) pairs, "
                f"got {key!r}."
            )
        return tuple(self._to_product(p) for p in key)

    def _format_key(self, key):
        return f"({key[0]}, {key[1]})"

    def _key_shape(self, key):
        return (key[0].shape(), key[1].shape())

    def _key_number(self, key):
        return nested_max(key[0].current_number(), key[1].current_number())

    def separate_into_n_terms(self, left_shape, right_shape):
        """Split by the shapes of the left and right products."""
        return super().separate_into_n_terms(left_shape, right_shape)

    def _remap_key(self, key, value, mapping):
        left, sl = key[0].remap_indices(mapping)
        right, sr = key[1].remap_indices(mapping)
        if sl == 0 or sr == 0:
            return None, value
        return (left, right), cf.multiply(value, complex(sl * sr))

    def hermitian_conjugate(self):
        """Swap left and right of every pair, conjugating the value."""
        new = self.empty_clone()
        for (left, right), value in self.items():
            new._add_all([((right, left), cf.conjugate(value))])
        return new


class MixedLayout:
    """Mixin for containers over mixed products, fixing the number of spin,
    bosonic and fermionic subsystems.

    Parameters
    ----------
    number_spins : int
        Number of spin subsystems.
    number_bosons : int
        Number of bosonic subsystems.
    number_fermions : int
        Number of fermionic subsystems.
    """

    def __init__(self, number_spins=0, number_bosons=0, number_fermions=0):
        super().__init__()
        self.subsystems = (number_spins, number_bosons, number_fermions)

    def _layout_args(self):
        return self.subsystems

    def _zero_number(self):
        return tuple((0,) * n for n in self.subsystems)

    def _to_product(self, key, kind=None):
        product = super()._to_product(key, kind)
        if isinstance(product, MixedProduct) and (
            product.subsystems() != self.subsystems
        ):
            raise MismatchedSubsystemsError(
                f"Product '{product}' has subsystems {product.subsystems()} "
                f"but {self.__class__.__name__} has {self.subsystems}."
            )
        return product

    def _fold(self, key, value):
        folded, value, flipped = super()._fold(key, value)
        self._to_product(folded)
        return folded, value, flipped

    def __repr__(self):
        body = super().__repr__()
        name = self.__class__.__name__
        return f"{name}{self.subsystems}" + body[len(name):]
