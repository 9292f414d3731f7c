"""Jordan-Wigner mapping between spin and fermionic representations.

The convention used is

    Z_k  ->  1 - 2 n_k
    +_k  ->  (prod_{j<k} (1 - 2 n_j)) a_k
    -_k  ->  (prod_{j<k} (1 - 2 n_j)) c_k

with ``+ = (X + iY) / 2`` the operator taking the occupied state ``|1>`` to
the empty state ``|0>``, so that ``X_k -> string (c_k + a_k)`` and
``Y_k -> string (i c_k - i a_k)``. The reverse direction maps

    c_k  ->  (prod_{j<k} Z_j) -_k
    a_k  ->  (prod_{j<k} Z_j) +_k
"""

import functools

from . import coefficients as cf
from .operator.fermions import (
    FermionHamiltonian,
    FermionHamiltonianSystem,
    FermionLindbladNoiseOperator,
    FermionLindbladNoiseSystem,
    FermionLindbladOpenSystem,
    FermionOperator,
    FermionSystem,
)
from .operator.spins import (
    DecoherenceOperator,
    PlusMinusLindbladNoiseOperator,
    PlusMinusOperator,
    SpinHamiltonian,
    SpinHamiltonianSystem,
    SpinLindbladNoiseOperator,
    SpinLindbladNoiseSystem,
    SpinLindbladOpenSystem,
    SpinOperator,
    SpinSystem,
    change_basis,
)
from .products import (
    DecoherenceProduct,
    FermionProduct,
    HermitianFermionProduct,
    PauliProduct,
    PlusMinusProduct,
)
from .products.spins import get_decomp

_PLUS_MINUS_BASIS = PlusMinusProduct.basis


def _fermion_op(terms):
    op = FermionOperator()
    for key, value in terms:
        op.add_operator_product(key, value)
    return op


def _spin_op(terms):
    op = SpinOperator()
    for key, value in terms:
        op.add_operator_product(key, value)
    return op


# --------------------------------------------------------------------------- #
#                             spins -> fermions                               #
# --------------------------------------------------------------------------- #


@functools.lru_cache(maxsize=None)
def _parity_string(k):
    """The terms of ``prod_{j<k} (1 - 2 n_j)``."""
    string = _fermion_op([(FermionProduct(), 1.0)])
    for j in range(k):
        string = string * _fermion_op(
            [(FermionProduct(), 1.0), (FermionProduct([j], [j]), -2.0)]
        )
    return tuple(string.items())


@functools.lru_cache(maxsize=None)
def _fermion_image(site, symbol):
    """The terms of the fermionic image of a single site spin operator."""
    image = FermionOperator()
    string = _fermion_op(_parity_string(site))
    for coeff, op in get_decomp((symbol,), _PLUS_MINUS_BASIS):
        if op == "I":
            term = _fermion_op([(FermionProduct(), 1.0)])
        elif op == "Z":
            term = _fermion_op(
                [(FermionProduct(), 1.0), (FermionProduct([site], [site]), -2.0)]
            )
        elif op == "+":
            term = string * _fermion_op([(FermionProduct([], [site]), 1.0)])
        else:
            term = string * _fermion_op([(FermionProduct([site], []), 1.0)])
        image = image + term * coeff
    return tuple(image.items())


def _spin_product_to_fermions(product):
    result = _fermion_op([(FermionProduct(), 1.0)])
    for site, symbol in product.items():
        result = result * _fermion_op(_fermion_image(site, symbol))
    return result


def _spin_operator_to_fermions(op):
    result = FermionOperator()
    for key, value in op.to_operator().items():
        result = result + _spin_product_to_fermions(key) * value
    return result


def _spin_noise_to_fermions(op):
    result = FermionLindbladNoiseOperator()
    for (left, right), value in op.items():
        images_l = _spin_product_to_fermions(left).items()
        images_r = tuple(_spin_product_to_fermions(right).items())
        for pl, cl in images_l:
            for pr, cr in images_r:
                coeff = cf.multiply(cl, cf.conjugate(cr))
                result.add_operator_product((pl, pr), cf.multiply(value, coeff))
    return result


def jordan_wigner_spin_to_fermion(obj):
    """Map a spin product, operator, system or open system onto the
    fermionic equivalent.

    Parameters
    ----------
    obj : SpinProduct, spin operator, system or open system
        Products and the general operator flavors map to
        :class:`FermionOperator`, hamiltonians to
        :class:`FermionHamiltonian`, noise to
        :class:`FermionLindbladNoiseOperator`. Systems keep their capacity.

    Returns
    -------
    The fermionic equivalent of ``obj``.
    """
    if isinstance(obj, (PauliProduct, DecoherenceProduct, PlusMinusProduct)):
        return _spin_product_to_fermions(obj)
    if isinstance(obj, SpinHamiltonian):
        return FermionHamiltonian.from_operator(_spin_operator_to_fermions(obj))
    if isinstance(obj, (SpinOperator, PlusMinusOperator, DecoherenceOperator)):
        return _spin_operator_to_fermions(obj)
    if isinstance(obj, (SpinLindbladNoiseOperator, PlusMinusLindbladNoiseOperator)):
        return _spin_noise_to_fermions(obj)
    if isinstance(obj, SpinHamiltonianSystem):
        return FermionHamiltonianSystem.from_operator(
            jordan_wigner_spin_to_fermion(obj.operator()), obj.capacity
        )
    if isinstance(obj, SpinSystem):
        return FermionSystem.from_operator(
            jordan_wigner_spin_to_fermion(obj.operator()), obj.capacity
        )
    if isinstance(obj, SpinLindbladNoiseSystem):
        return FermionLindbladNoiseSystem.from_operator(
            jordan_wigner_spin_to_fermion(obj.operator()), obj.capacity
        )
    if isinstance(obj, SpinLindbladOpenSystem):
        system, noise = obj.ungroup()
        return FermionLindbladOpenSystem.group(
            jordan_wigner_spin_to_fermion(system),
            jordan_wigner_spin_to_fermion(noise),
        )
    raise TypeError(f"Can't map {obj.__class__.__name__} onto fermions.")


# --------------------------------------------------------------------------- #
#                             fermions -> spins                               #
# --------------------------------------------------------------------------- #


@functools.lru_cache(maxsize=None)
def _spin_image(index, creator):
    """The Pauli terms of the spin image of ``c_index`` or ``a_index``."""
    string = PauliProduct([(j, "Z") for j in range(index)])
    # c -> -, a -> +
    sign = -1j if creator else 1j
    return (
        (string.x(index), 0.5 + 0j),
        (string.y(index), 0.5 * sign),
    )


def _fermion_product_to_spins(product):
    if isinstance(product, HermitianFermionProduct):
        product = product.to_plain()
    ops = [(i, True) for i in product.creators]
    ops += [(i, False) for i in product.annihilators]
    result = _spin_op([(PauliProduct(), 1.0)])
    for index, creator in ops:
        result = result * _spin_op(_spin_image(index, creator))
    return result


def _fermion_operator_to_spins(op):
    result = SpinOperator()
    for key, value in op.to_operator().items():
        result = result + _fermion_product_to_spins(key) * value
    return result


def _fermion_noise_to_spins(op):
    result = SpinLindbladNoiseOperator()
    for (left, right), value in op.items():
        images_l = change_basis(_fermion_product_to_spins(left), DecoherenceOperator)
        images_r = change_basis(_fermion_product_to_spins(right), DecoherenceOperator)
        for pl, cl in images_l.items():
            for pr, cr in images_r.items():
                coeff = cf.multiply(cl, cf.conjugate(cr))
                result.add_operator_product((pl, pr), cf.multiply(value, coeff))
    return result


def jordan_wigner_fermion_to_spin(obj):
    """Map a fermionic product, operator, system or open system onto the
    spin equivalent, the inverse of :func:`jordan_wigner_spin_to_fermion`.

    Products and operators map to :class:`SpinOperator`, hamiltonians to
    :class:`SpinHamiltonian` and noise to :class:`SpinLindbladNoiseOperator`.
    Systems keep their capacity.
    """
    if isinstance(obj, (FermionProduct, HermitianFermionProduct)):
        return _fermion_product_to_spins(obj)
    if isinstance(obj, FermionHamiltonian):
        return SpinHamiltonian.from_operator(_fermion_operator_to_spins(obj))
    if isinstance(obj, FermionOperator):
        return _fermion_operator_to_spins(obj)
    if isinstance(obj, FermionLindbladNoiseOperator):
        return _fermion_noise_to_spins(obj)
    if isinstance(obj, FermionHamiltonianSystem):
        return SpinHamiltonianSystem.from_operator(
            jordan_wigner_fermion_to_spin(obj.operator()), obj.capacity
        )
    if isinstance(obj, FermionSystem):
        return SpinSystem.from_operator(
            jordan_wigner_fermion_to_spin(obj.operator()), obj.capacity
        )
    if isinstance(obj, FermionLindbladNoiseSystem):
        return SpinLindbladNoiseSystem.from_operator(
            jordan_wigner_fermion_to_spin(obj.operator()), obj.capacity
        )
    if isinstance(obj, FermionLindbladOpenSystem):
        system, noise = obj.ungroup()
        return SpinLindbladOpenSystem.group(
            jordan_wigner_fermion_to_spin(system),
            jordan_wigner_fermion_to_spin(noise),
        )
    raise TypeError(f"Can't map {obj.__class__.__name__} onto spins.")
