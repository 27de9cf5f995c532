from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

UNCLASSIFIED_GROUP = "Unclassified"


@dataclass(frozen=True)
class HandlerRef:
    """Class + method pair invoked for a route."""

    owner: type
    attribute: str

    @property
    def action_name(self) -> str:
        return f"{self.owner.__qualname__}.{self.attribute}"


@dataclass(frozen=True)
class EndpointDescriptor:
    uri: str
    methods: tuple[str, ...]
    handler_ref: Optional[HandlerRef] = None
    route_constraints: Mapping[str, str] = field(default_factory=dict)
    is_closure_handler: bool = False
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.methods:
            raise ValueError(f"Route {self.uri!r} declares no HTTP methods")
        object.__setattr__(self, "methods", tuple(m.upper() for m in self.methods))

    @property
    def action_name(self) -> str:
        if self.handler_ref is None:
            return "Closure"
        return self.handler_ref.action_name

    def label(self) -> str:
        # e.g. [GET,HEAD] users/{id}
        return f"[{','.join(self.methods)}] {self.uri}"


class ParameterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional[str] = None
    required: bool = False
    default: Any = None
    rules: tuple[str, ...] = ()
    description: str = ""


class RouteSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    resource_group: str = UNCLASSIFIED_GROUP
    uri: str
    methods: tuple[str, ...]
    title: str = ""
    description: str = ""

    path_parameters: tuple[ParameterSpec, ...] = ()
    query_parameters: tuple[ParameterSpec, ...] = ()
    responses: tuple[Any, ...] = ()

    def label(self) -> str:
        return f"[{','.join(self.methods)}] {self.uri}"


def route_signature(uri: str, methods: Any) -> str:
    """Stable section id for a route.

    Methods are hashed in the order given, so ``GET,HEAD`` and ``HEAD,GET``
    produce different ids.
    """
    base = f"{uri}:{''.join(methods)}"
    return hashlib.md5(base.encode("utf-8")).hexdigest()
