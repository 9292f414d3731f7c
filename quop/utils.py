"""Misc utility functions.
"""

try:
    from cytoolz import partition_all
except ImportError:
    from toolz import partition_all


def as_nested_tuple(x):
    """Recursively convert lists (e.g. decoded from JSON) into tuples, so
    that they can be compared with or used as hashable keys.
    """
    if isinstance(x, (list, tuple)):
        return tuple(map(as_nested_tuple, x))
    return x


def nested_max(a, b):
    """Elementwise maximum of two equally nested structures of integers."""
    if isinstance(a, tuple):
        return tuple(nested_max(ai, bi) for ai, bi in zip(a, b))
    return max(a, b)


def nested_fits(current, capacity):
    """Check that every entry of ``current`` is at most the corresponding
    entry of ``capacity``, with ``None`` meaning unbounded.
    """
    if capacity is None:
        return True
    if isinstance(capacity, tuple):
        return all(nested_fits(c, n) for c, n in zip(current, capacity))
    return current <= capacity


def nested_resolve(capacity, current):
    """Replace each undeclared (``None``) capacity entry by the current
    usage.
    """
    if capacity is None:
        return current
    if isinstance(capacity, tuple):
        return tuple(nested_resolve(n, c) for n, c in zip(capacity, current))
    return capacity


def nested_merge_capacity(a, b):
    """Combine two declared capacities, keeping the larger bound where both
    are declared, and the declared one where only one is.
    """
    if isinstance(a, tuple) and isinstance(b, tuple):
        return tuple(nested_merge_capacity(ai, bi) for ai, bi in zip(a, b))
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def progbar(it, progbar=False, **kwargs):
    """Optionally wrap the iterable ``it`` in a ``tqdm`` progress bar."""
    if not progbar:
        return it

    import tqdm

    return tqdm.tqdm(it, **kwargs)
