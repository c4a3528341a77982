"""
Type coercion: converting a raw string into the value a field expects.

coerce() dispatches on the descriptor built by envbind.descriptors.describe().
Built-in conversions raise CoercionError; custom decoders may raise anything
and the walker reports both as ParseError.
"""

import datetime
import math
import re
import struct
from fractions import Fraction
from typing import Any, Callable

from envbind.decoders import DecoderRegistry, decode_with
from envbind.descriptors import (
    CustomType,
    MapType,
    PointerType,
    ScalarType,
    SequenceType,
    TypeDescriptor,
    zero_value,
)


class CoercionError(ValueError):
    """A raw string does not parse as the target type."""


class _Unchanged:
    def __repr__(self) -> str:
        return "UNCHANGED"


# returned for types the engine does not fill; the field keeps its value
UNCHANGED: Any = _Unchanged()

_OCTAL = re.compile(r"0(_?[0-7])+")

_BOOL = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"([0-9]*)(?:\.([0-9]*))?(ns|us|µs|μs|ms|s|m|h)")
_MAX_NANOS = 2**63 - 1


def _syntax_error(raw: str) -> CoercionError:
    return CoercionError(f"invalid syntax: {raw!r}")


def parse_int(raw: str, bits: int | None = None, signed: bool = True) -> int:
    """
    Parse an integer with automatic base detection.

    Accepts decimal, 0x/0o/0b prefixes, a leading 0 for octal and _
    separators. bits, when given, bounds the result to that width.
    """
    if not raw or raw != raw.strip():
        raise _syntax_error(raw)
    sign, body = "", raw
    if body[0] in "+-":
        if not signed:
            raise _syntax_error(raw)
        sign, body = body[0], body[1:]
    if not body or body[0] in "+-" or not body.isascii():
        raise _syntax_error(raw)
    try:
        if _OCTAL.fullmatch(body):
            n = int(body.replace("_", ""), 8)
        else:
            n = int(body, 0)
    except ValueError:
        raise _syntax_error(raw) from None
    if sign == "-":
        n = -n
    if bits is not None:
        if signed:
            lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            lo, hi = 0, (1 << bits) - 1
        if not lo <= n <= hi:
            raise CoercionError(f"value out of range: {raw!r}")
    return n


def parse_bool(raw: str) -> bool:
    try:
        return _BOOL[raw]
    except KeyError:
        raise _syntax_error(raw) from None


def parse_float(raw: str, bits: int = 64) -> float:
    if not raw or raw != raw.strip() or not raw.isascii():
        raise _syntax_error(raw)
    try:
        f = float(raw)
    except ValueError:
        raise _syntax_error(raw) from None
    if math.isinf(f) and "inf" not in raw.lower():
        raise CoercionError(f"value out of range: {raw!r}")
    if bits == 32:
        try:
            f = struct.unpack("f", struct.pack("f", f))[0]
        except OverflowError:
            raise CoercionError(f"value out of range: {raw!r}") from None
    return f


def parse_duration(raw: str) -> datetime.timedelta:
    """
    Parse a duration literal such as "300ms", "1.5h" or "2h45m".

    Valid units are ns, us (or µs), ms, s, m and h. A bare "0" needs no
    unit. Precision below a microsecond is truncated.
    """
    s, negative = raw, False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return datetime.timedelta(0)
    if not s:
        raise CoercionError(f"invalid duration {raw!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        if m is None:
            raise CoercionError(f"invalid duration {raw!r}")
        whole, frac, unit = m.groups()
        if not whole and not frac:
            raise CoercionError(f"invalid duration {raw!r}")
        number = Fraction(int(whole or "0"))
        if frac:
            number += Fraction(int(frac), 10 ** len(frac))
        total += number * _DURATION_UNITS[unit]
        pos = m.end()

    nanos = int(total)
    if nanos > _MAX_NANOS + (1 if negative else 0):
        raise CoercionError(f"invalid duration {raw!r}: out of range")
    if negative:
        nanos = -nanos
    return datetime.timedelta(microseconds=int(Fraction(nanos, 1000)))


def parse_enum(raw: str, enum_type: type) -> Any:
    for member in enum_type:
        if str(member.value) == raw:
            return member
    try:
        return enum_type[raw]
    except KeyError:
        names = ", ".join(m.name for m in enum_type)
        raise CoercionError(f"{raw!r} is not a valid {enum_type.__name__} (one of {names})") from None


def parse_datetime(raw: str) -> datetime.datetime:
    try:
        return datetime.datetime.fromisoformat(raw)
    except ValueError:
        raise CoercionError(f"invalid ISO-8601 timestamp: {raw!r}") from None


def _coerce_scalar(value: str, desc: ScalarType) -> Any:
    kind = desc.kind
    if kind == "str":
        return value
    if kind == "bool":
        return parse_bool(value)
    if kind == "int":
        return parse_int(value, desc.bits, desc.signed)
    if kind == "float":
        return parse_float(value, desc.bits or 64)
    if kind == "bytes":
        return desc.hint(value.encode("utf-8"))
    if kind == "duration":
        return parse_duration(value)
    if kind == "enum":
        return parse_enum(value, desc.hint)
    if kind == "datetime":
        return parse_datetime(value)
    return UNCHANGED


def _element(value: str, desc: TypeDescriptor, registry: DecoderRegistry | None, sep: str) -> Any:
    result = coerce(value, desc, registry, sep)
    if result is UNCHANGED:
        return zero_value(desc)
    return result


def coerce(
    value: str,
    desc: TypeDescriptor,
    registry: DecoderRegistry | None = None,
    sep: str = ",",
) -> Any:
    """
    Convert value to the type described by desc.

    Registered decoders come first, then the type's own decoding method,
    then the built-in rules. Returns UNCHANGED for types the engine leaves
    alone.
    """
    decoder: Callable[[str], Any] | None = registry.lookup(desc.hint) if registry is not None else None
    if decoder is not None:
        return decoder(value)

    if isinstance(desc, CustomType):
        return decode_with(desc.hint, desc.capability, value)

    if isinstance(desc, PointerType):
        return coerce(value, desc.elem, registry, sep)

    if isinstance(desc, ScalarType):
        return _coerce_scalar(value, desc)

    if isinstance(desc, SequenceType):
        if not value.strip():
            return desc.container()
        return desc.container(_element(v, desc.elem, registry, sep) for v in value.split(sep))

    if isinstance(desc, MapType):
        result: dict[Any, Any] = {}
        if not value.strip():
            return result
        for pair in value.split(sep):
            kv = pair.split(":")
            if len(kv) != 2:
                raise CoercionError(f"invalid map item: {pair!r}")
            k = _element(kv[0], desc.key, registry, sep)
            result[k] = _element(kv[1], desc.value, registry, sep)
        return result

    # records without a decoder and opaque types
    return UNCHANGED
