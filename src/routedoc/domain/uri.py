from __future__ import annotations

import re
from dataclasses import dataclass

_PLACEHOLDER = re.compile(r"\{(.*?)\}")


@dataclass(frozen=True)
class Placeholder:
    raw: str        # as written, e.g. "id?"
    name: str       # "?" trimmed
    optional: bool


def iter_placeholders(uri: str) -> list[Placeholder]:
    """Placeholders of a URI template in declaration order."""
    out: list[Placeholder] = []
    for m in _PLACEHOLDER.finditer(uri or ""):
        raw = m.group(1)
        name = raw.strip("?")
        out.append(Placeholder(raw=raw, name=name, optional=(name != raw)))
    return out


def blank_placeholders(uri: str) -> str:
    # users/{id}/posts/{post?} -> users//posts/
    return _PLACEHOLDER.sub("", uri or "")


def join_url(base_url: str, uri: str) -> str:
    return f"{(base_url or '').rstrip('/')}/{blank_placeholders(uri).lstrip('/')}"
