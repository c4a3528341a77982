"""
Usage text: list the variables a schema reads, their types, defaults and
descriptions.

    usage("app", Config())              # table on stdout
    usagef("app", Config(), out, DEFAULT_LIST_FORMAT)
    usagef("app", Config(), out, "{key}={default}\\n")

Row templates are str.format strings with the fields key, alt, type,
default, required and description.
"""

import sys
from collections.abc import Mapping
from typing import IO, Any, NamedTuple

from envbind.decoders import DecoderRegistry
from envbind.descriptors import (
    CustomType,
    MapType,
    PointerType,
    RecordType,
    ScalarType,
    SequenceType,
    TypeDescriptor,
    unwrap_pointer,
)
from envbind.source import snapshot
from envbind.walker import VarInfo, gather_info

_INTRO = (
    "This application is configured via the environment. The following environment\n"
    "variables can be used:\n"
)

_SEPARATOR_NAMES = {
    ",": "Comma",
    ";": "Semicolon",
    "-": "Dash",
    "/": "Slash",
    "\\": "Backslash",
    "|": "Bar",
    "~": "Tilde",
    "&": "Ampersand",
    "#": "Hash",
    "@": "At",
    ".": "Period",
    "*": "Asterisk",
    "+": "Plus",
}

_SCALAR_NAMES = {
    "str": "String",
    "bool": "True or False",
    "float": "Float",
    "bytes": "Bytes",
    "duration": "Duration",
    "datetime": "Timestamp",
}


class UsageFormat(NamedTuple):
    header: str
    row: str
    footer: str = ""


DEFAULT_TABLE_FORMAT = UsageFormat(
    header=_INTRO + "\nKEY\tTYPE\tDEFAULT\tREQUIRED\tDESCRIPTION\n",
    row="{key}\t{type}\t{default}\t{required}\t{description}\n",
)

DEFAULT_LIST_FORMAT = UsageFormat(
    header=_INTRO,
    row=(
        "\n{key}\n"
        "  [description] {description}\n"
        "  [type]        {type}\n"
        "  [default]     {default}\n"
        "  [required]    {required}"
    ),
    footer="\n",
)


def separator_name(sep: str) -> str:
    return _SEPARATOR_NAMES.get(sep or ",", f'"{sep}"')


def type_description(desc: TypeDescriptor, sep: str = ",") -> str:
    """Human readable type, e.g. "Comma-separated list of Integer"."""
    if isinstance(desc, PointerType):
        return type_description(desc.elem, sep)
    if isinstance(desc, SequenceType):
        return f"{separator_name(sep)}-separated list of {type_description(desc.elem, sep)}"
    if isinstance(desc, MapType):
        return (
            f"{separator_name(sep)}-separated list of "
            f"{type_description(desc.key, sep)}:{type_description(desc.value, sep)} pairs"
        )
    if isinstance(desc, ScalarType):
        if desc.kind == "int":
            return "Integer" if desc.signed else "Unsigned Integer"
        if desc.kind == "enum":
            return desc.hint.__name__
        return _SCALAR_NAMES[desc.kind]
    if isinstance(desc, (CustomType, RecordType)):
        return desc.hint.__name__
    return desc.name


def _row_fields(info: VarInfo) -> dict[str, Any]:
    if info.expands:
        elem = unwrap_pointer(info.desc).elem
        type_text = f"Indexed list of {elem.hint.__name__}"
    else:
        type_text = type_description(info.desc, info.tags.sep)
    return {
        "key": info.key,
        "alt": info.alt,
        "type": type_text,
        "default": info.tags.default,
        "required": "true" if info.tags.required else "",
        "description": info.tags.description,
    }


def align_columns(text: str, padding: int = 4) -> str:
    """Align tab-separated cells into space-padded columns. The last cell of a line is not padded."""
    lines = text.split("\n")
    rows = [line.split("\t") for line in lines]
    widths: list[int] = []
    for cells in rows:
        if len(cells) < 2:
            continue
        for i, cell in enumerate(cells[:-1]):
            if i == len(widths):
                widths.append(0)
            widths[i] = max(widths[i], len(cell))

    out = []
    for cells in rows:
        if len(cells) < 2:
            out.append(cells[0])
            continue
        padded = [cell.ljust(widths[i] + padding) for i, cell in enumerate(cells[:-1])]
        out.append("".join(padded) + cells[-1])
    return "\n".join(out)


def render(
    prefix: str,
    spec: Any,
    fmt: UsageFormat | str = DEFAULT_TABLE_FORMAT,
    env: Mapping[str, str] | None = None,
    registry: DecoderRegistry | None = None,
) -> str:
    if isinstance(fmt, str):
        fmt = UsageFormat("", fmt)
    infos = gather_info(prefix, spec, snapshot(env), registry)
    body = "".join(fmt.row.format(**_row_fields(info)) for info in infos)
    return fmt.header + body + fmt.footer


def usagef(
    prefix: str,
    spec: Any,
    out: IO[str],
    fmt: UsageFormat | str,
    env: Mapping[str, str] | None = None,
    registry: DecoderRegistry | None = None,
) -> None:
    """Write usage for spec to out using fmt. Unknown template fields raise KeyError."""
    out.write(render(prefix, spec, fmt, env, registry))


def usage(
    prefix: str,
    spec: Any,
    out: IO[str] | None = None,
    env: Mapping[str, str] | None = None,
    registry: DecoderRegistry | None = None,
) -> None:
    """Write the default usage table to out (stdout by default)."""
    text = render(prefix, spec, DEFAULT_TABLE_FORMAT, env, registry)
    (out or sys.stdout).write(align_columns(text))
