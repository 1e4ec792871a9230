"""
pkginfo output parsing — raw ``pkginfo -l`` text to field maps.

``pkginfo -l`` prints one block per package, blocks separated by blank
lines, each line ``   KEY:  value``. Lines that don't fit that shape
(wrapped descriptions, decoration) are ignored.
"""

from __future__ import annotations

import re
from types import MappingProxyType

_BLANK_RE = re.compile(r"^\s*$")
_FIELD_RE = re.compile(r"^\s*([^:]+):\s+(.+)$")

# Backend key → canonical attribute
NAMEMAP = MappingProxyType({
    "PKGINST": "name",
    "CATEGORY": "category",
    "ARCH": "platform",
    "VERSION": "ensure",
    "BASEDIR": "root",
    "VENDOR": "vendor",
    "DESC": "description",
})


def parse_pkginfo(text: str) -> list[dict[str, str]]:
    """Split pkginfo output into one ``{KEY: value}`` map per block.

    Blocks keep their input order and empty blocks are never emitted.
    Only the first colon separates key from value; a repeated key
    keeps its last value.
    """
    blocks: list[dict[str, str]] = []
    block: dict[str, str] = {}

    for line in text.splitlines():
        if _BLANK_RE.match(line):
            if block:
                blocks.append(block)
            block = {}
            continue
        m = _FIELD_RE.match(line)
        if m:
            block[m.group(1).strip()] = m.group(2).strip()

    if block:
        blocks.append(block)
    return blocks


def namemap(fields: dict[str, str]) -> dict[str, str]:
    """Rename backend keys to canonical attribute names.

    Keys outside ``NAMEMAP`` are dropped; attributes the block doesn't
    carry are left out rather than set to an empty string.
    """
    return {attr: fields[key] for key, attr in NAMEMAP.items() if key in fields}
