"""Core configuration: worker pools, tolerances and schema versions.
"""

import os
import functools
import collections

from .utils import partition_all


# --------------------------------------------------------------------------- #
#                               Environment                                   #
# --------------------------------------------------------------------------- #

for env_var in ["QUOP_NUM_THREAD_WORKERS", "OMP_NUM_THREADS"]:
    if env_var in os.environ:
        _NUM_THREAD_WORKERS = int(os.environ[env_var])
        break
else:
    import psutil

    # cpu_count can be None on exotic platforms
    _NUM_THREAD_WORKERS = psutil.cpu_count(logical=False) or 1

ATOL = float(os.environ.get("QUOP_ATOL", "1e-12"))
"""Tolerance for deciding that a literal coefficient is real, or that two
literal coefficients agree when checking Hermiticity."""


# --------------------------------------------------------------------------- #
#                              Schema versions                                #
# --------------------------------------------------------------------------- #

SchemaVersion = collections.namedtuple(
    "SchemaVersion", ["major_version", "minor_version"]
)

CURRENT_SCHEMA_VERSION = SchemaVersion(1, 1)
"""The schema generation written by default."""

MINIMUM_SCHEMA_VERSION = SchemaVersion(1, 0)
"""The oldest schema generation that can still be read."""


def parse_schema_version(version):
    """Turn ``version`` into a :class:`SchemaVersion`.

    Parameters
    ----------
    version : SchemaVersion, tuple[int, int] or dict
        Either a pair of integers or a mapping with ``major_version`` and
        ``minor_version`` entries.

    Returns
    -------
    SchemaVersion
    """
    if isinstance(version, dict):
        major, minor = version["major_version"], version["minor_version"]
    else:
        major, minor = version

    if not (isinstance(major, int) and isinstance(minor, int)):
        raise TypeError(f"Schema version must be two integers, got {version}.")
    if major < 0 or minor < 0:
        raise ValueError(f"Schema version must be non-negative, got {version}.")

    return SchemaVersion(major, minor)


# --------------------------------------------------------------------------- #
#                               Thread pools                                  #
# --------------------------------------------------------------------------- #


class CacheThreadPool(object):
    """Cache a pool created by ``func``, only replacing it when a different
    number of workers is requested.
    """

    def __init__(self, func):
        self._settings = "__UNINITIALIZED__"
        self._pool_fn = func

    def __call__(self, num_threads=None):
        # convert None to default so caches the same
        if num_threads is None:
            num_threads = _NUM_THREAD_WORKERS
        # first call
        if self._settings == "__UNINITIALIZED__":
            self._pool = self._pool_fn(num_threads)
            self._settings = num_threads
        # new type of pool requested
        elif self._settings != num_threads:
            self._pool.shutdown()
            self._pool = self._pool_fn(num_threads)
            self._settings = num_threads
        return self._pool


@CacheThreadPool
def get_thread_pool(num_workers=None):
    from concurrent.futures import ThreadPoolExecutor

    return ThreadPoolExecutor(num_workers)


def get_num_thread_workers(parallel):
    """Resolve a ``parallel`` option into a number of workers.

    Parameters
    ----------
    parallel : bool or int
        ``True`` for the default number of workers, an integer for an
        explicit count.

    Returns
    -------
    int
    """
    if parallel is True:
        return _NUM_THREAD_WORKERS
    if isinstance(parallel, int) and parallel > 0:
        return parallel
    raise ValueError(f"Unknown parallel option {parallel}.")


def par_reduce(fn, seq, nthreads=_NUM_THREAD_WORKERS):
    """Parallel reduce.

    Parameters
    ----------
    fn : callable
        Two argument function to reduce with, should be associative.
    seq : sequence
        Sequence to reduce.
    nthreads : int, optional
        The number of threads to reduce with in parallel.

    Returns
    -------
    depends on ``fn`` and ``seq``.
    """
    if nthreads == 1:
        return functools.reduce(fn, seq)

    pool = get_thread_pool(nthreads)  # cached

    def _sfn(x):
        """Single call of `fn`, but accounts for the fact
        that can be passed a single item, in which case
        it should not perform the binary operation.
        """
        if len(x) == 1:
            return x[0]
        return fn(*x)

    def _inner_preduce(x):
        """Splits the sequence into pairs and possibly one
        singlet, on each of which `fn` is performed to create
        a new sequence.
        """
        if len(x) <= 2:
            return _sfn(x)
        paired_x = partition_all(2, x)
        new_x = tuple(pool.map(_sfn, paired_x))
        return _inner_preduce(new_x)

    return _inner_preduce(tuple(seq))
