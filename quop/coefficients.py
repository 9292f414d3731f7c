"""Coefficients of operator terms.

A coefficient is either a literal number, always stored as a python
``complex``, or a symbolic ``sympy`` expression whose free symbols are real
valued parameters. Purely numeric sympy results are collapsed back to
``complex`` so that the two kinds never mix for the same value.
"""

import io
import re
import keyword
import numbers
import tokenize

import numpy as np
import sympy

from .core import ATOL
from .errors import CoefficientError

_KNOWN_NAMES = {
    "sin",
    "cos",
    "tan",
    "exp",
    "log",
    "sqrt",
    "pi",
    "I",
    "E",
    "Abs",
    "re",
    "im",
    "conjugate",
}

_NAME_RE = re.compile(r"[A-Za-z_]\w*")

_ALLOWED_OPS = {"+", "-", "*", "/", "**", "(", ")", ","}
_SKIPPED_TOKENS = {
    tokenize.NEWLINE,
    tokenize.NL,
    tokenize.ENDMARKER,
    tokenize.INDENT,
    tokenize.DEDENT,
}


def _check_tokens(text):
    """Only allow numbers, plain names and arithmetic in coefficient text,
    attribute access, indexing, keywords and the like are rejected before
    anything is evaluated.
    """
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(text).readline))
    except (tokenize.TokenError, IndentationError, SyntaxError) as e:
        raise CoefficientError(f"Can't parse coefficient '{text}'.") from e

    for tok in tokens:
        if tok.type in _SKIPPED_TOKENS or tok.type == tokenize.NUMBER:
            continue
        if tok.type == tokenize.NAME:
            if keyword.iskeyword(tok.string) or tok.string.startswith("__"):
                raise CoefficientError(
                    f"Name '{tok.string}' is not allowed in coefficient "
                    f"'{text}'."
                )
            continue
        if tok.type == tokenize.OP and tok.string in _ALLOWED_OPS:
            continue
        raise CoefficientError(
            f"Token '{tok.string}' is not allowed in coefficient '{text}'."
        )


def _realify(expr):
    """Replace any symbol without a real assumption by a real one of the
    same name.
    """
    replacements = {
        s: sympy.Symbol(s.name, real=True)
        for s in expr.free_symbols
        if isinstance(s, sympy.Symbol) and not s.is_real
    }
    if replacements:
        expr = expr.xreplace(replacements)
    return expr


def parse_expression(text):
    """Parse ``text`` into a sympy expression, treating every free name as a
    real valued symbol.

    Parameters
    ----------
    text : str
        The expression, e.g. ``"2 * theta + 1"``.

    Returns
    -------
    sympy.Expr

    Raises
    ------
    CoefficientError
        If ``text`` holds anything but numbers, names and arithmetic, or
        does not parse into a scalar.
    """
    _check_tokens(text)
    names = set(_NAME_RE.findall(text)) - _KNOWN_NAMES
    local_dict = {name: sympy.Symbol(name, real=True) for name in names}
    try:
        expr = sympy.parse_expr(text, local_dict=local_dict)
    except Exception as e:
        raise CoefficientError(f"Can't parse coefficient '{text}'.") from e

    if not isinstance(expr, sympy.Expr):
        raise CoefficientError(f"'{text}' is not a scalar expression.")

    return expr


def _exact_integral_floats(expr):
    """Turn every float with an integral value, e.g. the ``1.0`` of ``0.5 * 2``,
    into an exact integer.
    """
    replacements = {
        f: sympy.Integer(int(f))
        for f in expr.atoms(sympy.Float)
        if float(f).is_integer()
    }
    if replacements:
        expr = expr.xreplace(replacements)
    return expr


def normalize(value):
    """Collapse numeric sympy values into ``complex``, expand symbolic
    ones so that cancellations are exact and integral factors exact so that
    equal expressions compare equal.
    """
    if isinstance(value, complex):
        return value
    value = _exact_integral_floats(sympy.expand(value))
    if value.is_number:
        return complex(value)
    return value


def as_coefficient(value):
    """Convert ``value`` into a coefficient.

    Parameters
    ----------
    value : number, str or sympy.Expr
        Literal numbers (including numpy scalars) become ``complex``,
        strings are parsed as expressions of real symbols.

    Returns
    -------
    complex or sympy.Expr
    """
    if isinstance(value, complex):
        return value
    if isinstance(value, numbers.Number):
        return complex(value)
    if isinstance(value, str):
        return normalize(parse_expression(value))
    if isinstance(value, sympy.Expr):
        return normalize(_realify(value))
    raise CoefficientError(
        f"Can't interpret {value!r} of type {type(value)} as a coefficient."
    )


def is_coefficient_like(value):
    """Whether ``value`` could be turned into a coefficient, without
    parsing strings.
    """
    return isinstance(value, (numbers.Number, str, sympy.Expr))


def is_symbolic(c):
    return not isinstance(c, complex)


def is_zero(c):
    """Exact zero test, no tolerance is applied."""
    if isinstance(c, complex):
        return c == 0
    return c == 0 or c.is_zero is True


def _exact_part(x):
    if float(x).is_integer():
        return sympy.Integer(int(x))
    return sympy.Float(x)


def _as_sympy(c):
    """Literal ``c`` as a sympy number, integral parts kept exact so that
    e.g. ``1 * theta`` stays ``theta``.
    """
    if not isinstance(c, complex):
        return c
    if c.imag == 0:
        return _exact_part(c.real)
    return _exact_part(c.real) + sympy.I * _exact_part(c.imag)


def add(a, b):
    if isinstance(a, complex) and isinstance(b, complex):
        return a + b
    return normalize(_as_sympy(a) + _as_sympy(b))


def subtract(a, b):
    if isinstance(a, complex) and isinstance(b, complex):
        return a - b
    return normalize(_as_sympy(a) - _as_sympy(b))


def multiply(a, b):
    if isinstance(a, complex) and isinstance(b, complex):
        return a * b
    return normalize(_as_sympy(a) * _as_sympy(b))


def divide(a, b):
    if is_zero(b):
        raise ZeroDivisionError("Division of a coefficient by zero.")
    if isinstance(a, complex) and isinstance(b, complex):
        return a / b
    return normalize(_as_sympy(a) / _as_sympy(b))


def negate(c):
    if isinstance(c, complex):
        return -c
    return normalize(-c)


def conjugate(c):
    if isinstance(c, complex):
        return c.conjugate()
    return normalize(sympy.conjugate(c))


def magnitude(c):
    """The absolute value of a literal coefficient, or ``None`` if the
    coefficient is symbolic and has no numeric magnitude.
    """
    if isinstance(c, complex):
        return abs(c)
    return None


def is_real(c, atol=None):
    """Whether ``c`` is real, literal values up to ``atol``, symbolic values
    exactly.
    """
    if isinstance(c, complex):
        if atol is None:
            atol = ATOL
        return abs(c.imag) <= atol
    return normalize(sympy.im(c)) == 0


def real_part(c):
    """The real part of ``c``, as a coefficient."""
    if isinstance(c, complex):
        return complex(c.real)
    return normalize(sympy.re(c))


def approx_equal(a, b, atol=None):
    """Compare two coefficients, literal ones up to ``atol``."""
    if atol is None:
        atol = ATOL
    diff = subtract(a, b)
    if isinstance(diff, complex):
        return abs(diff) <= atol
    return False


def _part(x):
    x = normalize(x)
    if isinstance(x, complex):
        return x.real
    return str(x)


def real_imag(c):
    """Split ``c`` into real and imaginary parts, each either a float or the
    string form of a real symbolic expression.
    """
    if isinstance(c, complex):
        return c.real, c.imag
    re_part, im_part = c.as_real_imag()
    return _part(re_part), _part(im_part)


def _from_part(x):
    if isinstance(x, bool):
        raise CoefficientError(f"Invalid coefficient part {x!r}.")
    if isinstance(x, numbers.Real):
        return complex(x)
    if isinstance(x, str):
        return normalize(parse_expression(x))
    raise CoefficientError(f"Invalid coefficient part {x!r}.")


def from_real_imag(re_part, im_part):
    """Inverse of :func:`real_imag`."""
    re_c = _from_part(re_part)
    im_c = _from_part(im_part)
    if is_zero(im_c):
        return re_c
    return add(re_c, multiply(im_c, 1j))


def to_compact(c):
    """Tagged form of ``c``: two ``[tag, value]`` pairs with tag either
    ``"Float"`` or ``"Str"``.
    """
    return [
        ["Str", x] if isinstance(x, str) else ["Float", x]
        for x in real_imag(c)
    ]


def from_compact(data):
    """Inverse of :func:`to_compact`."""
    parts = []
    for tag, x in data:
        if tag == "Float" and isinstance(x, numbers.Real):
            parts.append(x)
        elif tag == "Str" and isinstance(x, str):
            parts.append(x)
        else:
            raise CoefficientError(f"Invalid tagged coefficient {data!r}.")
    return from_real_imag(*parts)


def _format_part(x):
    if isinstance(x, str):
        return x
    # shortest round-tripping mantissa, e.g. 0.5 -> "5e-1"
    text = np.format_float_scientific(x, trim="-", exp_digits=1)
    return text.replace("e+", "e")


def format_coefficient(c):
    """Text form ``"(re + i * im)"`` of a coefficient."""
    re_part, im_part = real_imag(c)
    return f"({_format_part(re_part)} + i * {_format_part(im_part)})"
