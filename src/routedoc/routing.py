from __future__ import annotations

import importlib
import inspect
import sys
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from routedoc.domain.models import EndpointDescriptor, HandlerRef


def route(
    uri: str,
    methods: Union[str, Iterable[str]],
    handler: Callable[..., Any],
    name: Optional[str] = None,
    where: Optional[Mapping[str, str]] = None,
) -> EndpointDescriptor:
    """
    Build an EndpointDescriptor from a handler callable.

        route("users/{id}", ["GET", "HEAD"], UserController.show, name="users.show",
              where={"id": "[0-9]+"})

    Functions defined directly on a class become class-method handlers.
    Lambdas, nested functions and module-level functions are closures.
    """
    if isinstance(methods, str):
        methods = [methods]

    ref = handler_ref_for(handler)
    return EndpointDescriptor(
        uri=uri,
        methods=tuple(methods),
        handler_ref=ref,
        route_constraints=dict(where or {}),
        is_closure_handler=ref is None,
        name=name,
    )


def handler_ref_for(handler: Callable[..., Any]) -> Optional[HandlerRef]:
    func = inspect.unwrap(getattr(handler, "__func__", handler))
    qualname = getattr(func, "__qualname__", "")
    if "<locals>" in qualname or "<lambda>" in qualname or "." not in qualname:
        return None

    owner_path, attribute = qualname.rsplit(".", 1)
    owner: Any = sys.modules.get(getattr(func, "__module__", ""), None)
    for part in owner_path.split("."):
        owner = getattr(owner, part, None)
    if not inspect.isclass(owner):
        return None
    return HandlerRef(owner=owner, attribute=attribute)


def load_registry(spec: str) -> list[EndpointDescriptor]:
    """
    Import ``module:attribute``. The attribute is a sequence of descriptors
    or a zero-argument callable returning one.
    """
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Registry must look like 'package.module:attribute', got {spec!r}")

    module = importlib.import_module(module_name)
    target: Any = module
    for part in attr.split("."):
        target = getattr(target, part)

    if callable(target):
        target = target()

    routes = list(target)
    for r in routes:
        if not isinstance(r, EndpointDescriptor):
            raise TypeError(f"{spec} yielded {type(r).__name__}, expected EndpointDescriptor")
    return routes
