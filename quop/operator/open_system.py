"""Open systems: a hermitian system part paired with Lindblad noise.
"""

from .. import coefficients as cf
from ..errors import CapacityExceededError, MismatchedSubsystemsError, NonHermitianError
from ..utils import nested_max, nested_merge_capacity, nested_resolve
from .base import Serializable


class OpenSystem(Serializable):
    """Hamiltonian ``H`` together with the noise ``M_ij`` of the Lindblad
    equation

    ``d rho / dt = -i [H, rho] + sum_ij M_ij (L_i rho L_j^dagger
    - {L_j^dagger L_i, rho} / 2)``.

    Both halves share one capacity. Subclasses set ``system_type``, a
    :class:`~quop.operator.system.HermitianSystem`, and ``noise_type``, a
    :class:`~quop.operator.system.NoiseSystem`.

    Parameters
    ----------
    capacity : int, optional
        The declared number of sites or modes, ``None`` for unbounded.
    """

    system_type = None
    noise_type = None

    def __init__(self, *capacity):
        self._system = self.system_type(*capacity)
        self._noise = self.noise_type(*capacity)

    @classmethod
    def _assemble(cls, system, noise):
        new = cls.__new__(cls)
        new._system = system
        new._noise = noise
        return new

    # ------------------------------ capacity ------------------------------- #

    @property
    def capacity(self):
        return self._system.capacity

    def current_number(self):
        return nested_max(
            self._system.current_number(), self._noise.current_number()
        )

    def number(self):
        return nested_resolve(self.capacity, self.current_number())

    # ----------------------------- the halves ------------------------------ #

    def system(self):
        """A copy of the hermitian system half."""
        return self._system.copy()

    def noise(self):
        """A copy of the noise half."""
        return self._noise.copy()

    def system_add_operator_product(self, key, value):
        """Add to the hermitian system half, non canonical keys are folded
        onto their hermitian partner.
        """
        self._system.add_operator_product(key, value)

    def system_set(self, key, value):
        return self._system.set(key, value)

    def system_get(self, key):
        return self._system.get(key)

    def noise_add_operator_product(self, key, value):
        """Add to the noise half, ``key`` is a ``(left, right)`` pair."""
        self._noise.add_operator_product(key, value)

    def noise_set(self, key, value):
        return self._noise.set(key, value)

    def noise_get(self, key):
        return self._noise.get(key)

    @classmethod
    def group(cls, system, noise):
        """Combine a system and a noise half.

        Raises
        ------
        CapacityExceededError
            If both halves declare different capacities, or a term of one
            half does not fit the capacity declared by the other.
        """
        if type(system) is not cls.system_type:
            raise TypeError(
                f"{cls.__name__} needs a {cls.system_type.__name__} system, "
                f"got {system.__class__.__name__}."
            )
        if type(noise) is not cls.noise_type:
            raise TypeError(
                f"{cls.__name__} needs a {cls.noise_type.__name__} noise, "
                f"got {noise.__class__.__name__}."
            )
        if system._operator._layout_args() != noise._operator._layout_args():
            raise MismatchedSubsystemsError(
                f"System subsystems {system._operator._layout_args()} and "
                f"noise subsystems {noise._operator._layout_args()} differ."
            )
        if _conflicting(system.capacity, noise.capacity):
            raise CapacityExceededError(
                f"System capacity {system.capacity} and noise capacity "
                f"{noise.capacity} differ."
            )
        capacity = nested_merge_capacity(system.capacity, noise.capacity)
        return cls._assemble(
            system._with_operator(system._operator.copy(), capacity),
            noise._with_operator(noise._operator.copy(), capacity),
        )

    def ungroup(self):
        """Split into ``(system, noise)``."""
        return self.system(), self.noise()

    def empty_clone(self, capacity=None):
        return self._assemble(
            self._system.empty_clone(capacity), self._noise.empty_clone(capacity)
        )

    def copy(self):
        return self._assemble(self._system.copy(), self._noise.copy())

    __copy__ = copy

    def truncate(self, threshold):
        """Truncate both halves independently."""
        return self.group(
            self._system.truncate(threshold), self._noise.truncate(threshold)
        )

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._system == other._system and self._noise == other._noise

    __hash__ = None

    def __repr__(self):
        lines = [
            f"{self.__class__.__name__}({self.number()}){{",
            "System: {",
            *self._system._operator._repr_lines(),
            "}",
            "Noise: {",
            *self._noise._operator._repr_lines(),
            "}",
            "}",
        ]
        return "\n".join(lines)

    # ---------------------------- arithmetic ------------------------------- #

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.group(self._system + other._system, self._noise + other._noise)

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.group(self._system - other._system, self._noise - other._noise)

    def __neg__(self):
        return self._assemble(-self._system, -self._noise)

    def __mul__(self, other):
        if not cf.is_coefficient_like(other):
            return NotImplemented
        other = cf.as_coefficient(other)
        if not cf.is_real(other, atol=0.0):
            raise NonHermitianError(
                f"Scaling an open system by the complex {other} would make "
                "its system half non hermitian."
            )
        return self._assemble(self._system * other, self._noise * other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not cf.is_coefficient_like(other):
            return NotImplemented
        return self * cf.divide(1 + 0j, cf.as_coefficient(other))


def _conflicting(a, b):
    """Whether two capacities are both declared but different somewhere."""
    if isinstance(a, tuple) and isinstance(b, tuple):
        return any(_conflicting(ai, bi) for ai, bi in zip(a, b))
    return a is not None and b is not None and a != b
