"""Products of bosonic creation and annihilation operators.
"""

from .base import HermitianModeProduct, ModeProduct


class BosonProduct(ModeProduct):
    """Normal ordered product of bosonic operators, e.g.
    ``BosonProduct([0, 0], [1])`` for ``c0 c0 a1`` with text ``"c0c0a1"``.

    Creators commute among themselves, as do annihilators, so both groups
    are simply sorted and repeated indices are allowed.

    Parameters
    ----------
    creators : sequence of int
        Modes of the creation operators.
    annihilators : sequence of int
        Modes of the annihilation operators.

    Examples
    --------

        >>> BosonProduct([0], [0]) * BosonProduct([0], [0])
        [(BosonProduct('c0a0'), (1+0j)), (BosonProduct('c0c0a0a0'), (1+0j))]
    """

    __slots__ = ()

    fermionic = False


class HermitianBosonProduct(HermitianModeProduct):
    """Bosonic product ``O`` standing for ``O + O^dagger`` in a
    Hamiltonian, only valid with ``creators <= annihilators``.
    """

    __slots__ = ()

    fermionic = False

    @classmethod
    def _plain_type(cls):
        return BosonProduct
