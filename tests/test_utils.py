from pytest import mark

from quop.utils import (
    as_nested_tuple,
    nested_fits,
    nested_max,
    nested_merge_capacity,
    nested_resolve,
    progbar,
)


class TestNested:

    def test_as_nested_tuple(self):
        assert as_nested_tuple([[1, [2]], 3]) == ((1, (2,)), 3)
        assert as_nested_tuple(None) is None

    def test_max(self):
        assert nested_max(2, 3) == 3
        assert nested_max(((1, 4), (2,)), ((3, 0), (2,))) == ((3, 4), (2,))

    @mark.parametrize("current, capacity, fits", [
        (3, None, True),
        (3, 3, True),
        (4, 3, False),
        (((1,), (2,)), ((None,), (2,)), True),
        (((1,), (3,)), ((None,), (2,)), False),
    ])
    def test_fits(self, current, capacity, fits):
        assert nested_fits(current, capacity) is fits

    def test_resolve(self):
        assert nested_resolve(None, 2) == 2
        assert nested_resolve(5, 2) == 5
        assert nested_resolve(((None, 4),), ((1, 2),)) == ((1, 4),)

    @mark.parametrize("a, b, merged", [
        (None, None, None),
        (None, 3, 3),
        (2, None, 2),
        (2, 3, 3),
        (((None, 2),), ((1, None),), ((1, 2),)),
    ])
    def test_merge(self, a, b, merged):
        assert nested_merge_capacity(a, b) == merged


class TestProgbar:

    def test_disabled_passthrough(self):
        it = [1, 2, 3]
        assert progbar(it) is it

    def test_enabled(self):
        assert list(progbar(range(3), progbar=True, disable=True)) == [0, 1, 2]
