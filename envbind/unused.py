"""
Find environment variables that look like config but that no field reads.
"""

from collections.abc import Mapping
from typing import Any

from envbind.decoders import DecoderRegistry
from envbind.source import snapshot
from envbind.walker import gather_info


def unused(
    prefix: str,
    spec: Any,
    env: Mapping[str, str] | None = None,
    registry: DecoderRegistry | None = None,
) -> list[str]:
    """
    Keys set in env under PREFIX_ that are not the key, alias or smushed key of
    any field of spec. With an empty prefix every key in env is considered.
    """
    env = snapshot(env)
    used: set[str] = set()
    for info in gather_info(prefix, spec, env, registry):
        used.add(info.key)
        used.update(k for k in (info.alt, info.smushed) if k)

    head = f"{prefix.upper()}_" if prefix else ""
    return sorted(k for k in env if k and k.startswith(head) and k not in used)
