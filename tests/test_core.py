import operator

import pytest
from pytest import mark

from quop import core
from quop.core import (
    CURRENT_SCHEMA_VERSION,
    MINIMUM_SCHEMA_VERSION,
    SchemaVersion,
    get_num_thread_workers,
    get_thread_pool,
    par_reduce,
    parse_schema_version,
)


class TestSchemaVersion:

    def test_current_is_supported(self):
        assert MINIMUM_SCHEMA_VERSION <= CURRENT_SCHEMA_VERSION
        assert CURRENT_SCHEMA_VERSION.major_version == 1

    @mark.parametrize("version", [
        (1, 1),
        [1, 1],
        {"major_version": 1, "minor_version": 1},
        SchemaVersion(1, 1),
    ])
    def test_parse(self, version):
        assert parse_schema_version(version) == SchemaVersion(1, 1)

    def test_parse_bad_type(self):
        with pytest.raises(TypeError):
            parse_schema_version(("1", 0))

    def test_parse_negative(self):
        with pytest.raises(ValueError):
            parse_schema_version((1, -1))


class TestThreadPool:

    def test_cached(self):
        assert get_thread_pool(2) is get_thread_pool(2)

    def test_num_workers(self):
        assert get_num_thread_workers(True) == core._NUM_THREAD_WORKERS
        assert get_num_thread_workers(3) == 3

    @mark.parametrize("parallel", [0, -1, "yes"])
    def test_bad_num_workers(self, parallel):
        with pytest.raises(ValueError):
            get_num_thread_workers(parallel)

    @mark.parametrize("nthreads", [1, 2, 3])
    def test_par_reduce(self, nthreads):
        assert par_reduce(operator.add, range(11), nthreads) == 55

    def test_par_reduce_keeps_order(self):
        words = ["a", "b", "c", "d", "e"]
        assert par_reduce(operator.add, words, 2) == "abcde"
