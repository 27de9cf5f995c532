from __future__ import annotations

import inspect
import re
from dataclasses import dataclass, field
from typing import Optional

_TAG_LINE = re.compile(r"^@([A-Za-z_][\w-]*)\s*(.*)$")


@dataclass(frozen=True)
class DocTag:
    name: str
    content: str


@dataclass(frozen=True)
class DocBlock:
    """
    Parsed handler docstring.

    Layout understood:

        Short description (up to the first blank line).

        Long description, any number of paragraphs.

        @resource Users
        @response {
            "id": 1
        }

    A tag runs from its ``@name`` line to the next tag line.
    """

    short_description: str = ""
    long_description: str = ""
    tags: tuple[DocTag, ...] = field(default_factory=tuple)

    def get_tags(self, name: str) -> list[DocTag]:
        wanted = name.lower()
        return [t for t in self.tags if t.name.lower() == wanted]

    def get_tag(self, name: str) -> Optional[DocTag]:
        found = self.get_tags(name)
        return found[0] if found else None

    def has_tag(self, name: str) -> bool:
        return bool(self.get_tags(name))


def parse_docblock(doc: Optional[str]) -> DocBlock:
    if not doc:
        return DocBlock()

    lines = inspect.cleandoc(doc).splitlines()

    text_lines: list[str] = []
    tags: list[DocTag] = []
    current: Optional[tuple[str, list[str]]] = None

    for line in lines:
        m = _TAG_LINE.match(line.strip())
        if m:
            if current is not None:
                tags.append(_make_tag(current))
            current = (m.group(1), [m.group(2)])
            continue
        if current is not None:
            current[1].append(line)
        else:
            text_lines.append(line)

    if current is not None:
        tags.append(_make_tag(current))

    short, long = _split_description("\n".join(text_lines).strip())
    return DocBlock(short_description=short, long_description=long, tags=tuple(tags))


def _make_tag(current: tuple[str, list[str]]) -> DocTag:
    name, content_lines = current
    return DocTag(name=name, content="\n".join(content_lines).strip())


def _split_description(text: str) -> tuple[str, str]:
    if not text:
        return "", ""
    parts = re.split(r"\n\s*\n", text, maxsplit=1)
    short = " ".join(ln.strip() for ln in parts[0].splitlines())
    long = parts[1].strip() if len(parts) > 1 else ""
    return short, long
