"""Complex value parser and display formatting.

Accepted inputs (whitespace is ignored, the imaginary unit may be ``i`` or
``j`` in either case):

  - Rectangular:  ``5``, ``-7``, ``3.14``, ``j``, ``-j``, ``5i``, ``j5``,
    ``3+4j``, ``2-5i``, ``1.5+2.3j``
  - Polar / phasor (angle in degrees):  ``10∠30°``, ``5∠-90``, ``3∠0°``

The text is split into tokens first and then read with a small grammar, so
every accepted shape is an explicit production rather than a side effect of
text substitution.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from solver import config
from solver.errors import ParseError
from solver.types import ComplexValue

ANGLE_MARK = "∠"
DEGREE_MARK = "°"

_TOKEN_RE = re.compile(
    r"(?P<number>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
    r"|(?P<sign>[+-])"
    r"|(?P<unit>[ijIJ])"
    rf"|(?P<angle>{ANGLE_MARK})"
    rf"|(?P<degree>{DEGREE_MARK})"
)
_WHITESPACE_RE = re.compile(r"\s+")


# ── Tokenizer ────────────────────────────────────────────────────────────

def _tokenize(compact: str, original: str) -> list[tuple[str, str]]:
    """Split whitespace-free *compact* text into ``(kind, text)`` tokens."""
    tokens = []
    pos = 0
    while pos < len(compact):
        m = _TOKEN_RE.match(compact, pos)
        if m is None:
            raise ParseError(original)
        tokens.append((m.lastgroup, m.group(0)))
        pos = m.end()
    return tokens


class _Reader:
    """Cursor over the token list with the grammar productions as methods."""

    def __init__(self, tokens, original: str):
        self._tokens = tokens
        self._pos = 0
        self._original = original

    def _fail(self):
        raise ParseError(self._original)

    def peek(self, kind: str) -> bool:
        return self._pos < len(self._tokens) and self._tokens[self._pos][0] == kind

    def accept(self, kind: str):
        if self.peek(kind):
            text = self._tokens[self._pos][1]
            self._pos += 1
            return text
        return None

    def expect(self, kind: str) -> str:
        text = self.accept(kind)
        if text is None:
            self._fail()
        return text

    def expect_end(self) -> None:
        if self._pos != len(self._tokens):
            self._fail()

    def sign(self):
        """Optional ``+``/``-``; returns 1.0, -1.0 or None when absent."""
        text = self.accept("sign")
        if text is None:
            return None
        return -1.0 if text == "-" else 1.0

    def number(self) -> float:
        return float(self.expect("number"))

    def real(self) -> float:
        """``[sign] number``"""
        sign = self.sign()
        return (sign or 1.0) * self.number()

    def imag(self) -> float:
        """``number unit | unit [number]``; returns the coefficient of the unit."""
        if self.accept("unit") is not None:
            coeff = self.accept("number")
            return 1.0 if coeff is None else float(coeff)
        coeff = self.number()
        self.expect("unit")
        return coeff


# ── Grammar ──────────────────────────────────────────────────────────────

def _read_polar(reader: _Reader) -> tuple[float, float]:
    radius = reader.real()
    reader.expect("angle")
    angle = math.radians(reader.real())
    reader.accept("degree")
    return radius * math.cos(angle), radius * math.sin(angle)


def _read_rect(reader: _Reader) -> tuple[float, float]:
    sign = reader.sign() or 1.0
    if reader.peek("unit"):
        return 0.0, sign * reader.imag()

    value = sign * reader.number()
    if reader.accept("unit") is not None:
        return 0.0, value

    im_sign = reader.sign()
    if im_sign is None:
        return value, 0.0
    # A second term is only valid as an imaginary part: "3+4" is rejected.
    return value, im_sign * reader.imag()


def parse_complex(text: str) -> ComplexValue:
    """Parse *text* into a :class:`ComplexValue`.

    Raises ParseError when the text is empty or is neither a rectangular nor
    a polar complex value.
    """
    original = text if text is not None else ""
    compact = _WHITESPACE_RE.sub("", original)
    if not compact:
        raise ParseError(original, "empty value")

    tokens = _tokenize(compact, original)
    reader = _Reader(tokens, original)
    if any(kind == "angle" for kind, _ in tokens):
        re_part, im_part = _read_polar(reader)
    else:
        re_part, im_part = _read_rect(reader)
    reader.expect_end()

    if not (math.isfinite(re_part) and math.isfinite(im_part)):
        raise ParseError(original)
    return ComplexValue(re_part, im_part)


# ── Display formatting ───────────────────────────────────────────────────

def format_significant(value: float, digits: int = config.DISPLAY_PRECISION) -> str:
    """Render *value* with *digits* significant digits.

    Fixed notation keeps trailing zeros (``3.000``); exponential notation
    (``1.235e+4``) is used when the decimal exponent is below -6 or at least
    *digits*.  Exact ties round away from zero (``2.5625`` gives ``2.563``).
    """
    if not math.isfinite(value):
        return str(value)
    if value == 0:
        return f"{0.0:.{digits - 1}f}"
    exact = Decimal(value)
    exponent = exact.adjusted()
    rounded = exact.quantize(Decimal(1).scaleb(exponent - digits + 1), rounding=ROUND_HALF_UP)
    if rounded.adjusted() != exponent:
        # Rounding carried into a new leading digit (9.9996 -> 10.00).
        exponent = rounded.adjusted()
        rounded = rounded.quantize(Decimal(1).scaleb(exponent - digits + 1))
    if exponent < -6 or exponent >= digits:
        mantissa = rounded.scaleb(-exponent)
        return f"{mantissa:.{digits - 1}f}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
    return f"{rounded:.{digits - 1 - exponent}f}"


def magnitude(c: ComplexValue) -> float:
    return math.hypot(c.re, c.im)


def angle_degrees(c: ComplexValue) -> float:
    return math.degrees(math.atan2(c.im, c.re))


def to_polar(c: ComplexValue) -> str:
    """``"<magnitude> ∠ <angle>°"`` with the angle in degrees."""
    return (
        f"{format_significant(magnitude(c))} {ANGLE_MARK} "
        f"{format_significant(angle_degrees(c))}{DEGREE_MARK}"
    )


def to_rect(c: ComplexValue) -> str:
    """``"<re> +<im>j"`` or ``"<re> -<im>j"``."""
    sign = "+" if c.im >= 0 else ""
    return f"{format_significant(c.re)} {sign}{format_significant(c.im)}j"
