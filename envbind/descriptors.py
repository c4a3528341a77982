"""
Type descriptors.

describe() turns a field annotation into one of a closed set of variants
that the coercer and the walker dispatch on, instead of inspecting typing
objects at every step.
"""

import collections.abc
import dataclasses
import datetime
import enum
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from envbind.decoders import capability_of
from envbind.numeric import Bits

_SEQUENCE_ORIGINS = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


@dataclass(frozen=True)
class TypeDescriptor:
    hint: Any

    @property
    def name(self) -> str:
        return getattr(self.hint, "__name__", None) or repr(self.hint)


@dataclass(frozen=True)
class ScalarType(TypeDescriptor):
    # str, int, float, bool, bytes, duration, enum, datetime
    kind: str = "str"
    bits: int | None = None
    signed: bool = True

    @property
    def name(self) -> str:
        if self.kind == "int" and self.bits:
            return f"{'' if self.signed else 'u'}int{self.bits}"
        if self.kind == "float" and self.bits:
            return f"float{self.bits}"
        return super().name


@dataclass(frozen=True)
class PointerType(TypeDescriptor):
    elem: TypeDescriptor = None

    @property
    def name(self) -> str:
        return f"Optional[{self.elem.name}]"


@dataclass(frozen=True)
class SequenceType(TypeDescriptor):
    elem: TypeDescriptor = None
    container: type = list

    @property
    def name(self) -> str:
        return f"{self.container.__name__}[{self.elem.name}]"


@dataclass(frozen=True)
class MapType(TypeDescriptor):
    key: TypeDescriptor = None
    value: TypeDescriptor = None

    @property
    def name(self) -> str:
        return f"dict[{self.key.name}, {self.value.name}]"


@dataclass(frozen=True)
class RecordType(TypeDescriptor):
    pass


@dataclass(frozen=True)
class CustomType(TypeDescriptor):
    capability: str = "decode"


@dataclass(frozen=True)
class OpaqueType(TypeDescriptor):
    """Anything the engine does not know how to fill; left untouched."""


def strip_annotated(hint: Any) -> tuple[Any, list[Any]]:
    extras: list[Any] = []
    while get_origin(hint) is Annotated:
        args = get_args(hint)
        hint = args[0]
        extras.extend(args[1:])
    return hint, extras


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def describe(hint: Any) -> TypeDescriptor:
    """Build the descriptor for a (possibly Annotated) type hint."""
    hint, extras = strip_annotated(hint)
    bits = next((m for m in extras if isinstance(m, Bits)), None)
    origin = get_origin(hint)
    args = get_args(hint)

    if _is_union(origin):
        inner = [a for a in args if a is not type(None)]
        if len(inner) == 1 and len(args) == 2:
            return PointerType(hint, elem=describe(inner[0]))
        return OpaqueType(hint)

    if origin in _SEQUENCE_ORIGINS:
        container = _SEQUENCE_ORIGINS[origin]
        if origin is tuple:
            # only homogeneous tuple[T, ...]
            if len(args) != 2 or args[1] is not Ellipsis:
                return OpaqueType(hint)
            args = args[:1]
        elem = describe(args[0]) if args else ScalarType(str, kind="str")
        return SequenceType(hint, elem=elem, container=container)

    if origin in _MAP_ORIGINS:
        key_hint, value_hint = args if len(args) == 2 else (str, str)
        return MapType(hint, key=describe(key_hint), value=describe(value_hint))

    if hint in (list, tuple, set, frozenset):
        return SequenceType(hint, elem=ScalarType(str, kind="str"), container=_SEQUENCE_ORIGINS[hint])
    if hint is dict:
        return MapType(hint, key=ScalarType(str, kind="str"), value=ScalarType(str, kind="str"))

    if not isinstance(hint, type):
        return OpaqueType(hint)

    # user types that decode themselves win over every built-in rule
    if hint.__module__ != "builtins":
        capability = capability_of(hint)
        if capability is not None:
            return CustomType(hint, capability=capability)

    if hint is bool:
        return ScalarType(hint, kind="bool")
    if hint is int:
        if bits is not None:
            return ScalarType(hint, kind="int", bits=bits.size, signed=bits.signed)
        return ScalarType(hint, kind="int")
    if hint is float:
        return ScalarType(hint, kind="float", bits=bits.size if bits else 64)
    if hint is str:
        return ScalarType(hint, kind="str")
    if hint in (bytes, bytearray):
        return ScalarType(hint, kind="bytes")
    if hint is datetime.timedelta:
        return ScalarType(hint, kind="duration")
    if hint is datetime.datetime:
        return ScalarType(hint, kind="datetime")
    if issubclass(hint, enum.Enum):
        return ScalarType(hint, kind="enum")
    if dataclasses.is_dataclass(hint):
        return RecordType(hint)
    return OpaqueType(hint)


def unwrap_pointer(desc: TypeDescriptor) -> TypeDescriptor:
    while isinstance(desc, PointerType):
        desc = desc.elem
    return desc


def is_record_list(desc: TypeDescriptor) -> bool:
    """True for a list of dataclasses, expanded from indexed keys."""
    desc = unwrap_pointer(desc)
    return (
        isinstance(desc, SequenceType)
        and desc.container is list
        and isinstance(desc.elem, RecordType)
    )


_ZERO = {
    "str": "",
    "int": 0,
    "float": 0.0,
    "bool": False,
    "duration": datetime.timedelta(0),
}


def zero_value(desc: TypeDescriptor) -> Any:
    """The value a field holds before anything is assigned to it."""
    if isinstance(desc, ScalarType):
        if desc.kind == "bytes":
            return desc.hint()
        return _ZERO.get(desc.kind)
    if isinstance(desc, SequenceType):
        return desc.container()
    if isinstance(desc, MapType):
        return {}
    if isinstance(desc, RecordType):
        return zero_record(desc.hint)
    return None


def zero_record(cls: type) -> Any:
    """Instantiate a dataclass, filling fields that have no default with zero values."""
    hints = typing.get_type_hints(cls, include_extras=True)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        kwargs[f.name] = zero_value(describe(hints[f.name]))
    return cls(**kwargs)
