import pytest
from pytest import mark

from quop import (
    BosonOperator,
    FermionHamiltonian,
    FermionHamiltonianSystem,
    FermionLindbladNoiseOperator,
    FermionLindbladOpenSystem,
    FermionOperator,
    FermionProduct,
    FermionSystem,
    HermitianFermionProduct,
    PauliProduct,
    PlusMinusOperator,
    SpinHamiltonian,
    SpinHamiltonianSystem,
    SpinLindbladNoiseOperator,
    SpinLindbladOpenSystem,
    SpinOperator,
    SpinSystem,
    jordan_wigner_fermion_to_spin,
    jordan_wigner_spin_to_fermion,
)


def make(cls, terms):
    op = cls()
    for key, value in terms.items():
        op.add_operator_product(key, value)
    return op


def assert_ops_close(a, b, atol=1e-12):
    assert type(a) is type(b)
    assert (a - b).truncate(atol).is_empty()


class TestSpinToFermion:

    def test_z(self):
        result = jordan_wigner_spin_to_fermion(PauliProduct().z(0))
        assert result == make(FermionOperator, {"I": 1.0, "c0a0": -2.0})

    def test_x_first_site(self):
        result = jordan_wigner_spin_to_fermion(PauliProduct().x(0))
        assert result == make(FermionOperator, {"c0": 1.0, "a0": 1.0})

    def test_y_first_site(self):
        result = jordan_wigner_spin_to_fermion(PauliProduct().y(0))
        assert result == make(FermionOperator, {"c0": 1j, "a0": -1j})

    def test_string(self):
        # -_1 -> (1 - 2 n_0) c_1 = c_1 + 2 c_0 c_1 a_0
        op = make(PlusMinusOperator, {"1-": 1.0})
        result = jordan_wigner_spin_to_fermion(op)
        assert result == make(FermionOperator, {"c1": 1.0, "c0c1a0": 2.0})

    def test_plus_is_annihilator(self):
        op = make(PlusMinusOperator, {"0+": 1.0})
        result = jordan_wigner_spin_to_fermion(op)
        assert result == make(FermionOperator, {"a0": 1.0})

    def test_hamiltonian(self):
        h = make(SpinHamiltonian, {"0X1X": 0.5, "0Y1Y": 0.5, "1Z": 1.0})
        result = jordan_wigner_spin_to_fermion(h)
        assert isinstance(result, FermionHamiltonian)
        assert result.get("c0a1") == pytest.approx(1.0)
        assert result.get("c1a0") == pytest.approx(1.0)
        assert result.get("I") == pytest.approx(1.0)
        assert result.get("c1a1") == pytest.approx(-2.0)

    def test_noise(self):
        noise = make(SpinLindbladNoiseOperator, {("0Z", "0Z"): 1.0})
        result = jordan_wigner_spin_to_fermion(noise)
        assert isinstance(result, FermionLindbladNoiseOperator)
        assert result.get(("I", "I")) == 1
        assert result.get(("I", "c0a0")) == -2
        assert result.get(("c0a0", "I")) == -2
        assert result.get(("c0a0", "c0a0")) == 4

    def test_systems_keep_capacity(self):
        sys = SpinSystem(3)
        sys.set("0X", 1.0)
        result = jordan_wigner_spin_to_fermion(sys)
        assert isinstance(result, FermionSystem)
        assert result.capacity == 3

        h = SpinHamiltonianSystem(2)
        h.set("0Z", 1.0)
        result = jordan_wigner_spin_to_fermion(h)
        assert isinstance(result, FermionHamiltonianSystem)
        assert result.capacity == 2

    def test_open_system(self):
        osys = SpinLindbladOpenSystem(2)
        osys.system_add_operator_product("0Z", 1.0)
        osys.noise_add_operator_product(("0Z", "0Z"), 0.1)
        result = jordan_wigner_spin_to_fermion(osys)
        assert isinstance(result, FermionLindbladOpenSystem)
        assert result.capacity == 2
        assert result.system_get("c0a0") == -2
        assert result.noise_get(("c0a0", "c0a0")) == pytest.approx(0.4)

    def test_unsupported(self):
        with pytest.raises(TypeError):
            jordan_wigner_spin_to_fermion(BosonOperator())


class TestFermionToSpin:

    def test_number(self):
        result = jordan_wigner_fermion_to_spin(FermionProduct([0], [0]))
        assert result == make(SpinOperator, {"I": 0.5, "0Z": -0.5})

    def test_creator_and_annihilator(self):
        assert jordan_wigner_fermion_to_spin(FermionProduct([0], [])) == make(
            SpinOperator, {"0X": 0.5, "0Y": -0.5j}
        )
        assert jordan_wigner_fermion_to_spin(FermionProduct([], [1])) == make(
            SpinOperator, {"0Z1X": 0.5, "0Z1Y": 0.5j}
        )

    def test_hermitian_product(self):
        result = jordan_wigner_fermion_to_spin(HermitianFermionProduct([0], [1]))
        expected = jordan_wigner_fermion_to_spin(FermionProduct([0], [1]))
        assert result == expected

    def test_hopping(self):
        h = make(FermionHamiltonian, {"c0a1": 1.0})
        result = jordan_wigner_fermion_to_spin(h)
        assert isinstance(result, SpinHamiltonian)
        assert_ops_close(result, make(SpinHamiltonian, {"0X1X": 0.5, "0Y1Y": 0.5}))

    def test_systems_keep_capacity(self):
        sys = FermionSystem(4)
        sys.set("c0a3", 1.0)
        result = jordan_wigner_fermion_to_spin(sys)
        assert isinstance(result, SpinSystem)
        assert result.capacity == 4

    def test_unsupported(self):
        with pytest.raises(TypeError):
            jordan_wigner_fermion_to_spin(SpinOperator())


class TestRoundTrip:

    @mark.parametrize("terms", [
        {"0X": 1.0},
        {"0X1Y": 0.3, "2Z": 1.2, "0Z1Z": -0.7j},
        {"1Y3X": 0.25, "0Y2Y": 1j, "I": 2.0},
    ])
    def test_spin_operator(self, terms):
        op = make(SpinOperator, terms)
        back = jordan_wigner_fermion_to_spin(jordan_wigner_spin_to_fermion(op))
        assert_ops_close(back, op)

    def test_fermion_operator(self):
        op = make(FermionOperator, {"c0c2a1": 0.5, "a3": 1j, "c1a1": -1.0})
        back = jordan_wigner_spin_to_fermion(jordan_wigner_fermion_to_spin(op))
        assert_ops_close(back, op)

    def test_noise(self):
        noise = make(SpinLindbladNoiseOperator, {("0Z", "0Z"): 1.0})
        back = jordan_wigner_fermion_to_spin(jordan_wigner_spin_to_fermion(noise))
        assert_ops_close(back, noise)
