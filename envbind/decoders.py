"""
Custom decoding hooks.

A field type can take over its own conversion by implementing one of the
protocols below. The type is instantiated with no arguments and the method
is called on the new instance; checked in this order:

    decode(value: str)           Decoder
    set(value: str)              Setter
    unmarshal_text(data: bytes)  TextUnmarshaler
    unmarshal_binary(data: bytes) BinaryUnmarshaler

Types you do not own can be handled by a DecoderRegistry passed to process().
"""

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class Decoder(Protocol):
    def decode(self, value: str) -> None: ...


@runtime_checkable
class Setter(Protocol):
    def set(self, value: str) -> None: ...


@runtime_checkable
class TextUnmarshaler(Protocol):
    def unmarshal_text(self, data: bytes) -> None: ...


@runtime_checkable
class BinaryUnmarshaler(Protocol):
    def unmarshal_binary(self, data: bytes) -> None: ...


CAPABILITIES: tuple[tuple[type, str], ...] = (
    (Decoder, "decode"),
    (Setter, "set"),
    (TextUnmarshaler, "unmarshal_text"),
    (BinaryUnmarshaler, "unmarshal_binary"),
)

_TAKES_BYTES = ("unmarshal_text", "unmarshal_binary")


def capability_of(typ: Any) -> str | None:
    """Name of the first decoding method the type implements, or None."""
    if not isinstance(typ, type):
        return None
    for proto, name in CAPABILITIES:
        if issubclass(typ, proto):
            return name
    return None


def decode_with(typ: type, capability: str, value: str) -> Any:
    """Build a zero instance of typ and let it decode value into itself."""
    obj = typ()
    method = getattr(obj, capability)
    if capability in _TAKES_BYTES:
        method(value.encode("utf-8"))
    else:
        method(value)
    return obj


class DecoderRegistry:
    """
    Ad hoc decoders for types that cannot implement a decoding method.

    Owned by the caller and passed into process(); nothing is shared between
    registries. Not locked: do not register or clear while a process() call
    using the same registry is running.
    """

    def __init__(self, decoders: dict[type, Callable[[str], Any]] | None = None):
        self._decoders: dict[type, Callable[[str], Any]] = dict(decoders or {})

    def register(self, typ: type, fn: Callable[[str], Any]) -> None:
        self._decoders[typ] = fn

    def unregister(self, typ: type) -> None:
        self._decoders.pop(typ, None)

    def clear(self) -> None:
        self._decoders.clear()

    def lookup(self, typ: Any) -> Callable[[str], Any] | None:
        try:
            return self._decoders.get(typ)
        except TypeError:
            # unhashable annotation
            return None

    def __contains__(self, typ: object) -> bool:
        return self.lookup(typ) is not None

    def __len__(self) -> int:
        return len(self._decoders)
