"""Printf-style positional formatter for bundle templates.

Bundle text written for the JVM uses java.util.Formatter placeholders
("Hello %s!!!", "%1$s owes %2$,.2f"). PositionalFormatter implements that
syntax so such bundles format identically:

    %[argument_index$][flags][width][.precision]conversion

Supported conversions:
    s S   string (bools as true/false)        b B   boolean
    c C   character (str of length 1 or int)  d     decimal integer
    o     octal integer                       x X   hexadecimal integer
    e E   scientific notation                 f     fixed-point decimal
    g G   general scientific                  t T   date/time (suffix char)
    n     line separator                      %     literal percent

None renders as "null" for every conversion except b/B, where it is "false".
Floats under s/S follow Double.toString (1.0E20, 100.0, NaN, Infinity).
Numbers use the formatter locale's decimal and grouping symbols, and month
and weekday names come from CLDR via Babel. Rounding of e/f/g is half-up on
the shortest decimal representation of the value, as on the JVM.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import TYPE_CHECKING, Any, TypeAlias

from babel import Locale, UnknownLocaleError
from babel.numbers import get_decimal_symbol, get_group_symbol

from i18nregistry.constants import DEFAULT_LOCALE, FALSE_TOKEN, NULL_TOKEN, TRUE_TOKEN
from i18nregistry.diagnostics import ErrorTemplate, FormatError
from i18nregistry.locale_utils import coerce_locale, get_babel_locale

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from i18nregistry.runtime.value_types import FormatValue

    _Mismatch: TypeAlias = Callable[[str], FormatError]

__all__ = ["PositionalFormatter"]

_SPECIFIER = re.compile(
    r"%(?:(?P<index>\d+)\$)?"
    r"(?P<flags>[-#+ 0,(<]*)"
    r"(?P<width>\d+)?"
    r"(?:\.(?P<precision>\d+))?"
    r"(?P<date>[tT])?"
    r"(?P<conversion>[a-zA-Z%])"
)

# Flags accepted per conversion ('<' is handled separately).
_ALLOWED_FLAGS: dict[str, str] = {
    "s": "-",
    "b": "-",
    "c": "-",
    "d": "-+ 0,(",
    "o": "-#0",
    "x": "-#0",
    "e": "-#+ 0(",
    "f": "-#+ 0,(",
    "g": "-+ 0,(",
    "t": "-",
    "%": "-",
    "n": "",
}

_UPPER_CONVERSIONS = frozenset("SBCXEG")

_NO_PRECISION = frozenset("cdoxt%n")

_DATE_FIELDS = frozenset("YyCmdeBbhAajDF")
_TIME_FIELDS = frozenset("HIklMSLpRTrzZ")

_SCIENTIFIC_LOWER = Decimal("1e-4")


@dataclass(frozen=True, slots=True)
class _Spec:
    """One parsed format specifier."""

    text: str
    index: int | None
    relative: bool
    flags: str
    width: int | None
    precision: int | None
    date: bool
    conversion: str

    @property
    def kind(self) -> str:
        """Lower-case conversion family used for flag and type rules."""
        return "t" if self.date else self.conversion.lower()

    @property
    def upper(self) -> bool:
        if self.date:
            return self.text[-2] == "T"
        return self.conversion.isupper()

    @property
    def takes_argument(self) -> bool:
        return self.conversion not in "%n" or self.date


def _check_spec(spec: _Spec, template: str) -> None:
    """Reject specifiers whose flags, width or precision don't fit the conversion."""
    kind = spec.kind
    if spec.date:
        known = spec.conversion in _DATE_FIELDS | _TIME_FIELDS
    else:
        conversion = spec.conversion
        known = (
            conversion.lower() in _ALLOWED_FLAGS
            and conversion not in "tT"
            and (not conversion.isupper() or conversion in _UPPER_CONVERSIONS)
        )
    if not known:
        raise FormatError(
            ErrorTemplate.format_unknown_conversion(template, spec.text), template=template
        )

    def mismatch(reason: str) -> FormatError:
        return FormatError(
            ErrorTemplate.format_flags_mismatch(template, spec.text, reason), template=template
        )

    if len(set(spec.flags)) != len(spec.flags):
        raise mismatch("duplicate flag")
    disallowed = set(spec.flags) - set(_ALLOWED_FLAGS[kind])
    if disallowed:
        raise mismatch(f"flag(s) {''.join(sorted(disallowed))!r} not allowed here")
    if "-" in spec.flags and "0" in spec.flags:
        raise mismatch("'-' and '0' are mutually exclusive")
    if "+" in spec.flags and " " in spec.flags:
        raise mismatch("'+' and ' ' are mutually exclusive")
    if ("-" in spec.flags or "0" in spec.flags) and spec.width is None:
        raise mismatch("flag requires a width")
    if spec.precision is not None and kind in _NO_PRECISION:
        raise mismatch("precision not allowed")
    if kind == "n" and spec.width is not None:
        raise mismatch("width not allowed")
    if spec.relative and not spec.takes_argument:
        raise mismatch("'<' used on a conversion without argument")
    if spec.index == 0:
        raise mismatch("argument index must be 1 or greater")


@functools.lru_cache(maxsize=512)
def _parse_template(template: str) -> tuple[str | _Spec, ...]:
    """Split template into literal text and validated specifiers."""
    parts: list[str | _Spec] = []
    pos = 0
    while (start := template.find("%", pos)) != -1:
        if start > pos:
            parts.append(template[pos:start])
        match = _SPECIFIER.match(template, start)
        if match is None:
            raise FormatError(
                ErrorTemplate.format_unknown_conversion(template, template[start : start + 2]),
                template=template,
            )
        flags = match["flags"]
        spec = _Spec(
            text=match[0],
            index=int(match["index"]) if match["index"] else None,
            relative="<" in flags,
            flags=flags.replace("<", ""),
            width=int(match["width"]) if match["width"] else None,
            precision=int(match["precision"]) if match["precision"] is not None else None,
            date=match["date"] is not None,
            conversion=match["conversion"],
        )
        _check_spec(spec, template)
        parts.append(spec)
        pos = match.end()
    if pos < len(template):
        parts.append(template[pos:])
    return tuple(parts)


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _to_text(value: FormatValue) -> str:
    match value:
        case None:
            return NULL_TOKEN
        case bool():
            return TRUE_TOKEN if value else FALSE_TOKEN
        case float():
            return _double_to_text(value)
        case _:
            return str(value)


def _double_to_text(value: float) -> str:
    """Render a float the way the JVM's Double.toString does.

    Magnitudes in [1e-3, 1e7) are written as plain decimals with at least one
    fractional digit (100.0, 0.001); everything else uses d.dddE<n> (1.0E20).
    """
    number = Decimal(repr(value))
    if number.is_nan():
        return "NaN"
    if number.is_infinite():
        return "-Infinity" if number.is_signed() else "Infinity"
    sign = "-" if number.is_signed() else ""
    if number.is_zero():
        return sign + "0.0"

    digits = "".join(map(str, number.as_tuple().digits)).rstrip("0")
    point = number.adjusted()
    if -3 <= point < 7:
        if point < 0:
            return f"{sign}0.{'0' * (-point - 1)}{digits}"
        whole = digits[: point + 1].ljust(point + 1, "0")
        return f"{sign}{whole}.{digits[point + 1 :] or '0'}"
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{point}"


def _to_decimal(value: int | float | Decimal) -> Decimal:
    # repr() gives the shortest round-tripping digits, which is what half-up
    # rounding should operate on (0.125 -> "0.13", not the binary neighbour).
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _rounding_context(value: Decimal, places: int) -> Context:
    digits = max(value.adjusted() + 1, 1) + places + 2
    return Context(prec=max(28, digits), rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class PositionalFormatter:
    """Locale-aware printf-style formatter.

    Implements the Formatter protocol. Instances are immutable and safe to
    share across threads.

    Example:
        >>> fmt = PositionalFormatter("en_US")
        >>> fmt.format("Hello %s!!!", ["value1"])
        'Hello value1!!!'
        >>> fmt.format("Hello %s!!!", [None])
        'Hello null!!!'
        >>> fmt.format("%,.2f", [1234.5])
        '1,234.50'
        >>> PositionalFormatter("de_DE").format("%,.2f", [1234.5])
        '1.234,50'

    Attributes:
        locale: Locale code for number symbols and month/day names
    """

    locale: str = DEFAULT_LOCALE
    _babel_locale: Locale = field(init=False, repr=False, compare=False)
    _decimal_symbol: str = field(init=False, repr=False, compare=False)
    _group_symbol: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize the locale and cache its CLDR symbols.

        Raises:
            ValueError: If locale is malformed or unknown to CLDR
        """
        normalized = coerce_locale(self.locale)
        if normalized is None:
            msg = "Formatter locale cannot be None"
            raise ValueError(msg)
        try:
            babel_locale = get_babel_locale(normalized)
        except (UnknownLocaleError, ValueError) as e:
            msg = f"Unknown formatter locale: '{self.locale}'"
            raise ValueError(msg) from e
        object.__setattr__(self, "locale", normalized)
        object.__setattr__(self, "_babel_locale", babel_locale)
        object.__setattr__(self, "_decimal_symbol", get_decimal_symbol(babel_locale))
        object.__setattr__(self, "_group_symbol", get_group_symbol(babel_locale))

    def format(self, template: str, values: Sequence[FormatValue], /) -> str:
        """Substitute positional values into template.

        Args:
            template: Template text
            values: Positional values; surplus values are ignored

        Returns:
            Formatted text

        Raises:
            FormatError: On missing argument, type mismatch, unknown
                conversion, or illegal flag combination
        """
        out: list[str] = []
        ordinary = 0
        last: int | None = None

        for part in _parse_template(template):
            if isinstance(part, str):
                out.append(part)
                continue

            if not part.takes_argument:
                text = "\n" if part.conversion == "n" else "%"
            else:
                if part.relative:
                    position = last
                elif part.index is not None:
                    position = part.index - 1
                else:
                    position = ordinary
                    ordinary += 1
                if position is None or position >= len(values):
                    requested = 1 if position is None else position + 1
                    raise FormatError(
                        ErrorTemplate.format_missing_argument(template, part.text, requested),
                        template=template,
                    )
                last = position
                text = self._convert(part, values[position], position + 1, template)

            if part.width is not None and len(text) < part.width:
                text = text.ljust(part.width) if "-" in part.flags else text.rjust(part.width)
            out.append(text)

        return "".join(out)

    def _convert(self, spec: _Spec, value: FormatValue, position: int, template: str) -> str:
        kind = spec.kind

        def mismatch(expected: str) -> FormatError:
            return FormatError(
                ErrorTemplate.format_conversion_mismatch(
                    template, spec.text[1:], position, expected, value
                ),
                template=template,
            )

        if kind == "b":
            if value is None:
                text = FALSE_TOKEN
            elif isinstance(value, bool):
                text = TRUE_TOKEN if value else FALSE_TOKEN
            else:
                text = TRUE_TOKEN
        elif value is None:
            text = NULL_TOKEN
        else:
            match kind:
                case "s":
                    text = _to_text(value)
                case "c":
                    text = self._char(value, mismatch)
                case "d" | "o" | "x":
                    if not _is_integer(value):
                        raise mismatch("int")
                    text = self._integer(spec, value)  # type: ignore[arg-type]
                case "e" | "f" | "g":
                    if not _is_real(value):
                        raise mismatch("int, float or Decimal")
                    text = self._real(spec, value)  # type: ignore[arg-type]
                case _:
                    text = self._datetime(spec, value, mismatch)

        if spec.precision is not None and kind in "sb":
            text = text[: spec.precision]
        return text.upper() if spec.upper else text

    @staticmethod
    def _char(value: Any, mismatch: _Mismatch) -> str:
        if isinstance(value, str) and len(value) == 1:
            return value
        if _is_integer(value) and 0 <= value <= 0x10FFFF:
            return chr(value)
        raise mismatch("single-character str or code point int")

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _group(self, digits: str) -> str:
        head = len(digits) % 3 or 3
        groups = [digits[:head]] + [digits[i : i + 3] for i in range(head, len(digits), 3)]
        return self._group_symbol.join(groups)

    @staticmethod
    def _signed(spec: _Spec, negative: bool, body: str, *, zero_pad: bool = True) -> str:
        if negative:
            lead, trail = ("(", ")") if "(" in spec.flags else ("-", "")
        else:
            lead = "+" if "+" in spec.flags else (" " if " " in spec.flags else "")
            trail = ""
        if zero_pad and "0" in spec.flags and spec.width is not None:
            body = body.rjust(spec.width - len(lead) - len(trail), "0")
        return lead + body + trail

    def _integer(self, spec: _Spec, value: int) -> str:
        magnitude = abs(value)
        match spec.kind:
            case "d":
                digits = str(magnitude)
                if "," in spec.flags:
                    digits = self._group(digits)
                return self._signed(spec, value < 0, digits)
            case "o":
                digits, prefix = format(magnitude, "o"), "0"
            case _:
                digits, prefix = format(magnitude, "x"), "0x"

        sign = "-" if value < 0 else ""
        prefix = prefix if "#" in spec.flags else ""
        if "0" in spec.flags and spec.width is not None:
            digits = digits.rjust(spec.width - len(sign) - len(prefix), "0")
        return sign + prefix + digits

    def _real(self, spec: _Spec, value: int | float | Decimal) -> str:
        number = _to_decimal(value)
        negative = number.is_signed()

        if number.is_nan():
            return "NaN"
        if number.is_infinite():
            return self._signed(spec, negative, "Infinity", zero_pad=False)

        precision = 6 if spec.precision is None else spec.precision
        match spec.kind:
            case "f":
                body = self._fixed(number, precision, grouping="," in spec.flags)
                if precision == 0 and "#" in spec.flags:
                    body += self._decimal_symbol
            case "e":
                body = self._scientific(number, precision, alternate="#" in spec.flags)
            case _:
                body = self._general(number, max(precision, 1), grouping="," in spec.flags)
        return self._signed(spec, negative, body)

    def _fixed(self, number: Decimal, places: int, *, grouping: bool) -> str:
        magnitude = abs(number)
        context = _rounding_context(magnitude, places)
        rounded = magnitude.quantize(Decimal(1).scaleb(-places), context=context)
        whole, _, fraction = format(rounded, "f").partition(".")
        if grouping:
            whole = self._group(whole)
        return f"{whole}{self._decimal_symbol}{fraction}" if fraction else whole

    def _scientific(self, number: Decimal, places: int, *, alternate: bool = False) -> str:
        magnitude = abs(number)
        exponent = 0 if magnitude.is_zero() else magnitude.adjusted()
        quantum = Decimal(1).scaleb(-places)
        context = _rounding_context(Decimal(10), places)
        mantissa = magnitude.scaleb(-exponent).quantize(quantum, context=context)
        if mantissa >= 10:
            exponent += 1
            mantissa = magnitude.scaleb(-exponent).quantize(quantum, context=context)

        whole, _, fraction = format(mantissa, "f").partition(".")
        if fraction:
            digits = f"{whole}{self._decimal_symbol}{fraction}"
        else:
            digits = whole + (self._decimal_symbol if alternate else "")
        sign = "+" if exponent >= 0 else "-"
        return f"{digits}e{sign}{abs(exponent):02d}"

    def _general(self, number: Decimal, significant: int, *, grouping: bool) -> str:
        magnitude = abs(number)
        if magnitude.is_zero():
            return self._fixed(magnitude, significant - 1, grouping=grouping)

        exponent = magnitude.adjusted()
        context = _rounding_context(Decimal(10), significant)
        rounded = (
            magnitude.scaleb(-exponent)
            .quantize(Decimal(1).scaleb(-(significant - 1)), context=context)
            .scaleb(exponent)
        )
        if _SCIENTIFIC_LOWER <= rounded < Decimal(10) ** significant:
            places = max(significant - 1 - rounded.adjusted(), 0)
            return self._fixed(magnitude, places, grouping=grouping)
        return self._scientific(magnitude, significant - 1)

    # ------------------------------------------------------------------
    # Dates and times
    # ------------------------------------------------------------------

    def _datetime(self, spec: _Spec, value: Any, mismatch: _Mismatch) -> str:
        field_char = spec.conversion

        if _is_integer(value):
            # Epoch milliseconds, as accepted by the JVM formatter.
            value = datetime.fromtimestamp(value / 1000, tz=UTC)

        has_date = isinstance(value, date)
        has_time = isinstance(value, (datetime, time))
        if field_char in _DATE_FIELDS and not has_date:
            raise mismatch("date, datetime or epoch-millisecond int")
        if field_char in _TIME_FIELDS and not has_time:
            raise mismatch("datetime, time or epoch-millisecond int")
        if field_char in "zZ" and value.utcoffset() is None:
            raise mismatch("timezone-aware datetime or time")

        return self._date_field(field_char, value)

    def _date_field(self, field_char: str, value: Any) -> str:
        names = self._babel_locale
        match field_char:
            case "Y":
                return f"{value.year:04d}"
            case "C":
                return f"{value.year // 100:02d}"
            case "y":
                return f"{value.year % 100:02d}"
            case "m":
                return f"{value.month:02d}"
            case "d":
                return f"{value.day:02d}"
            case "e":
                return str(value.day)
            case "j":
                return f"{value.timetuple().tm_yday:03d}"
            case "B":
                return names.months["format"]["wide"][value.month]
            case "b" | "h":
                return names.months["format"]["abbreviated"][value.month]
            case "A":
                return names.days["format"]["wide"][value.weekday()]
            case "a":
                return names.days["format"]["abbreviated"][value.weekday()]
            case "D":
                return "/".join(self._date_field(c, value) for c in "mdy")
            case "F":
                return "-".join(self._date_field(c, value) for c in "Ymd")
            case "H":
                return f"{value.hour:02d}"
            case "k":
                return str(value.hour)
            case "I":
                return f"{(value.hour % 12) or 12:02d}"
            case "l":
                return str((value.hour % 12) or 12)
            case "M":
                return f"{value.minute:02d}"
            case "S":
                return f"{value.second:02d}"
            case "L":
                return f"{value.microsecond // 1000:03d}"
            case "p":
                period = "pm" if value.hour >= 12 else "am"
                return str(names.periods.get(period, period)).lower()
            case "R":
                return ":".join(self._date_field(c, value) for c in "HM")
            case "T":
                return ":".join(self._date_field(c, value) for c in "HMS")
            case "r":
                clock = ":".join(self._date_field(c, value) for c in "IMS")
                return f"{clock} {self._date_field('p', value).upper()}"
            case "z":
                minutes = int(value.utcoffset().total_seconds()) // 60
                sign = "-" if minutes < 0 else "+"
                hours, mins = divmod(abs(minutes), 60)
                return f"{sign}{hours:02d}{mins:02d}"
            case _:
                return value.tzname() or ""
