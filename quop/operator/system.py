"""Operators with an optional declared number of sites or modes.
"""

from .. import coefficients as cf
from ..errors import CapacityExceededError, MismatchedSubsystemsError
from ..utils import (
    nested_fits,
    nested_merge_capacity,
    nested_resolve,
)
from .base import Serializable


class System(Serializable):
    """An operator together with an optional capacity, the number of sites
    or modes it may act on. Every insertion is checked against the capacity
    before the operator is touched.

    Parameters
    ----------
    capacity : int, optional
        The declared number of sites or modes, ``None`` for unbounded.

    Subclasses set ``operator_type``, the wrapped container class, and
    ``general_type``, the system class of products with other systems.
    """

    operator_type = None
    general_type = None

    def __init__(self, capacity=None):
        self._capacity = self._parse_capacity(capacity)
        self._operator = self.operator_type(*self._operator_layout())

    # ------------------------------ capacity ------------------------------- #

    @staticmethod
    def _parse_capacity(capacity):
        if capacity is not None:
            capacity = int(capacity)
            if capacity < 0:
                raise ValueError(f"Capacity must be non-negative, got {capacity}.")
        return capacity

    def _operator_layout(self):
        return ()

    def _capacity_args(self, capacity):
        """Constructor arguments for a system of this type and layout with
        ``capacity``.
        """
        return (capacity,)

    def _new(self, capacity):
        return self.__class__(*self._capacity_args(capacity))

    @property
    def capacity(self):
        """The declared capacity, ``None`` where undeclared."""
        return self._capacity

    def current_number(self):
        """Number of sites or modes in use, the highest index + 1."""
        return self._operator.current_number()

    def number(self):
        """The declared capacity, or the current use where undeclared."""
        return nested_resolve(self._capacity, self.current_number())

    def _check_fits(self, key, capacity="__OWN__"):
        if capacity == "__OWN__":
            capacity = self._capacity
        number = self._operator._key_number(key)
        if not nested_fits(number, capacity):
            raise CapacityExceededError(
                f"'{self._operator._format_key(key)}' needs {number} but "
                f"{self.__class__.__name__} only holds {capacity}."
            )

    def resize(self, capacity):
        """Change the declared capacity, which must hold every current
        term.
        """
        capacity = self._parse_capacity(capacity)
        for key in self._operator.keys():
            self._check_fits(key, capacity)
        self._capacity = capacity

    # ----------------------------- contract -------------------------------- #

    def get(self, key):
        return self._operator.get(key)

    def set(self, key, value):
        """Overwrite the coefficient of ``key``.

        Raises
        ------
        CapacityExceededError
            If ``key`` does not fit, in which case nothing changes.
        """
        self._check_fits(self._operator._to_key(key))
        return self._operator.set(key, value)

    def add_operator_product(self, key, value):
        """Accumulate ``value`` onto the coefficient of ``key``.

        Raises
        ------
        CapacityExceededError
            If ``key`` does not fit, in which case nothing changes.
        """
        self._check_fits(self._operator._to_key(key))
        self._operator.add_operator_product(key, value)

    def remove(self, key):
        return self._operator.remove(key)

    def keys(self):
        return self._operator.keys()

    def values(self):
        return self._operator.values()

    def items(self):
        return self._operator.items()

    def __len__(self):
        return len(self._operator)

    def __iter__(self):
        return iter(self._operator)

    def __contains__(self, key):
        return key in self._operator

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def is_empty(self):
        return self._operator.is_empty()

    def operator(self):
        """A copy of the wrapped operator, without capacity."""
        return self._operator.copy()

    @classmethod
    def from_operator(cls, op, capacity=None):
        """Wrap a copy of ``op``, checking every term against ``capacity``
        before anything is constructed.
        """
        if type(op) is not cls.operator_type:
            raise TypeError(
                f"{cls.__name__} wraps {cls.operator_type.__name__}, got "
                f"{op.__class__.__name__}."
            )
        new = cls._from_layout(op._layout_args(), capacity)
        for key in op.keys():
            new._check_fits(key)
        new._operator = op.copy()
        return new

    @classmethod
    def _from_layout(cls, layout, capacity=None):
        return cls(capacity)

    def _with_operator(self, op, capacity):
        """New system of this type's layout holding ``op``, validated
        against ``capacity``.
        """
        new = self._new(capacity)
        for key in op.keys():
            new._check_fits(key)
        new._operator = op
        return new

    def empty_clone(self, capacity=None):
        """An empty system of the same type, keeping the capacity unless a
        new one is given.
        """
        if capacity is None:
            capacity = self._capacity
        return self._new(capacity)

    def copy(self):
        return self._with_operator(self._operator.copy(), self._capacity)

    __copy__ = copy

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._capacity == other._capacity
            and self._operator == other._operator
        )

    __hash__ = None

    def _repr_header(self):
        return f"{self.__class__.__name__}({self.number()}){{"

    def __repr__(self):
        lines = [self._repr_header(), *self._operator._repr_lines(), "}"]
        return "\n".join(lines)

    # ---------------------------- arithmetic ------------------------------- #

    def _merge_capacity(self, other):
        if self._operator._layout_args() != other._operator._layout_args():
            raise MismatchedSubsystemsError(
                f"Layouts {self._operator._layout_args()} and "
                f"{other._operator._layout_args()} don't match."
            )
        return nested_merge_capacity(self._capacity, other._capacity)

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        capacity = self._merge_capacity(other)
        return self._with_operator(self._operator + other._operator, capacity)

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        capacity = self._merge_capacity(other)
        return self._with_operator(self._operator - other._operator, capacity)

    def __neg__(self):
        return self._with_operator(-self._operator, self._capacity)

    def _wrap_result(self, op, capacity):
        cls = self.__class__
        if type(op) is not self.operator_type:
            cls = self.general_type
        new = cls(*self._capacity_args(capacity))
        for key in op.keys():
            new._check_fits(key)
        new._operator = op
        return new

    def __mul__(self, other):
        if cf.is_coefficient_like(other):
            return self._wrap_result(self._operator * other, self._capacity)
        if isinstance(other, System):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        if cf.is_coefficient_like(other):
            return self._wrap_result(self._operator * other, self._capacity)
        return NotImplemented

    def __truediv__(self, other):
        if not cf.is_coefficient_like(other):
            return NotImplemented
        return self._wrap_result(self._operator / other, self._capacity)

    def multiply(self, other, parallel=False, progbar=False):
        """Multiply with another system of the same flavor, see
        :meth:`quop.operator.base.Operator.multiply`.
        """
        capacity = self._merge_capacity(other)
        op = self._operator.multiply(
            other._operator, parallel=parallel, progbar=progbar
        )
        return self._wrap_result(op, capacity)

    def hermitian_conjugate(self):
        return self._with_operator(
            self._operator.hermitian_conjugate(), self._capacity
        )

    def separate_into_n_terms(self, *shape):
        """Split into the terms of exactly ``shape`` and the rest, both
        keeping the capacity.
        """
        matching, remainder = self._operator.separate_into_n_terms(*shape)
        return (
            self._with_operator(matching, self._capacity),
            self._with_operator(remainder, self._capacity),
        )

    def truncate(self, threshold):
        return self._with_operator(
            self._operator.truncate(threshold), self._capacity
        )

    def remap_indices(self, mapping):
        """Relabel indices, the result must still fit the capacity."""
        return self._with_operator(
            self._operator.remap_indices(mapping), self._capacity
        )


class HermitianSystem(System):
    """System wrapping a hermitian operator, see
    :class:`quop.operator.base.HermitianOperator`.
    """

    def to_operator(self):
        """The wrapped operator expanded into the general flavor."""
        return self._operator.to_operator()


class NoiseSystem(System):
    """System wrapping a Lindblad noise operator, both products of each
    pair must fit the capacity.
    """

    def separate_into_n_terms(self, left_shape, right_shape):
        return super().separate_into_n_terms(left_shape, right_shape)


class MixedNumbers:
    """Mixed flavored names of the capacity accessors, one entry per
    subsystem.
    """

    def number_spins(self):
        return self.number()[0]

    def current_number_spins(self):
        return self.current_number()[0]

    def number_bosonic_modes(self):
        return self.number()[1]

    def current_number_bosonic_modes(self):
        return self.current_number()[1]

    def number_fermionic_modes(self):
        return self.number()[2]

    def current_number_fermionic_modes(self):
        return self.current_number()[2]


class MixedCapacity(MixedNumbers):
    """Mixin for systems over mixed products, with one optional capacity per
    spin, bosonic and fermionic subsystem.

    Parameters
    ----------
    number_spins : sequence of int or None
        Capacity of each spin subsystem.
    number_bosonic_modes : sequence of int or None
        Capacity of each bosonic subsystem.
    number_fermionic_modes : sequence of int or None
        Capacity of each fermionic subsystem.
    """

    def __init__(
        self,
        number_spins=(None,),
        number_bosonic_modes=(None,),
        number_fermionic_modes=(None,),
    ):
        super().__init__(
            (
                tuple(number_spins),
                tuple(number_bosonic_modes),
                tuple(number_fermionic_modes),
            )
        )

    @staticmethod
    def _parse_capacity(capacity):
        return tuple(
            tuple(System._parse_capacity(n) for n in numbers)
            for numbers in capacity
        )

    def _operator_layout(self):
        return tuple(map(len, self._capacity))

    def _capacity_args(self, capacity):
        return tuple(capacity)

    @classmethod
    def _from_layout(cls, layout, capacity=None):
        if capacity is None:
            capacity = tuple((None,) * n for n in layout)
        if tuple(map(len, capacity)) != tuple(layout):
            raise MismatchedSubsystemsError(
                f"Capacity {capacity} doesn't match subsystems {layout}."
            )
        return cls(*capacity)


class SpinNumbers:
    """Spin flavored names of the capacity accessors."""

    def number_spins(self):
        return self.number()

    def current_number_spins(self):
        return self.current_number()


class ModeNumbers:
    """Mode flavored names of the capacity accessors."""

    def number_modes(self):
        return self.number()

    def current_number_modes(self):
        return self.current_number()
