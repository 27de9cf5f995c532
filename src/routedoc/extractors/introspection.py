from __future__ import annotations

import inspect
import logging
import re
import types
import typing
from dataclasses import dataclass
from typing import Any, Literal, Optional, Protocol, Union

from pydantic import BaseModel

from routedoc.domain.models import HandlerRef
from routedoc.extractors.docblock import DocBlock, parse_docblock
from routedoc.requests import ValidationRequest

logger = logging.getLogger(__name__)

TypeKind = Literal["primitive", "model", "class", "none"]

_PRIMITIVES = (int, str, float, bool, bytes, complex, dict, list, tuple, set, frozenset)
_PRIMITIVE_NAMES = {t.__name__: t for t in _PRIMITIVES}
_OPTIONAL_TEXT = re.compile(r"^(?:typing\.)?Optional\[(.*)\]$")


@dataclass(frozen=True)
class HandlerParameter:
    name: str
    kind: TypeKind
    type_name: Optional[str] = None
    has_default: bool = False
    default: Any = None
    request_class: Optional[type] = None   # set for ValidationRequest subclasses


@dataclass(frozen=True)
class HandlerMetadata:
    parameters: tuple[HandlerParameter, ...]
    method_doc: DocBlock
    class_doc: DocBlock

    @property
    def doc_blocks(self) -> tuple[DocBlock, DocBlock]:
        # method first: its tags win over the class ones
        return (self.method_doc, self.class_doc)


class MetadataProvider(Protocol):
    def describe(self, handler: HandlerRef) -> HandlerMetadata:
        ...


class ReflectionMetadataProvider:
    """
    MetadataProvider backed by ``inspect`` and per-parameter annotation evaluation.

    Parameters annotated with a subclass of one of ``model_bases`` are data
    model references; subclasses of ``request_base`` carry validation rules.
    """

    def __init__(
        self,
        model_bases: tuple[type, ...] = (BaseModel,),
        request_base: type = ValidationRequest,
    ):
        self.model_bases = model_bases
        self.request_base = request_base

    def describe(self, handler: HandlerRef) -> HandlerMetadata:
        func = getattr(handler.owner, handler.attribute)
        params = list(inspect.signature(func).parameters.values())

        # plain functions looked up on the class still expect `self`
        if inspect.isfunction(inspect.getattr_static(handler.owner, handler.attribute)) and params:
            params = params[1:]

        out: list[HandlerParameter] = []
        for p in params:
            if p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            annotation = _resolve_annotation(func, p.name, p.annotation)
            has_default = p.default is not inspect.Parameter.empty
            out.append(
                self._classify(
                    p.name,
                    annotation,
                    has_default=has_default,
                    default=p.default if has_default else None,
                )
            )

        return HandlerMetadata(
            parameters=tuple(out),
            method_doc=parse_docblock(getattr(func, "__doc__", None)),
            class_doc=parse_docblock(handler.owner.__doc__),
        )

    def _classify(self, name: str, annotation: Any, has_default: bool, default: Any) -> HandlerParameter:
        common = {"name": name, "has_default": has_default, "default": default}

        if annotation is inspect.Parameter.empty:
            return HandlerParameter(kind="none", **common)

        tp = _unwrap_optional(annotation)

        if isinstance(tp, str):
            # unresolvable forward reference; keep the written name
            short = _written_name(tp)
            kind: TypeKind = "primitive" if short in _PRIMITIVE_NAMES else "class"
            return HandlerParameter(kind=kind, type_name=short, **common)

        if tp in _PRIMITIVES or typing.get_origin(tp) in _PRIMITIVES:
            return HandlerParameter(kind="primitive", type_name=_type_name(tp), **common)

        if inspect.isclass(tp):
            if issubclass(tp, self.request_base):
                return HandlerParameter(kind="class", type_name=tp.__name__, request_class=tp, **common)
            if issubclass(tp, self.model_bases):
                return HandlerParameter(kind="model", type_name=tp.__name__, **common)
            return HandlerParameter(kind="class", type_name=tp.__name__, **common)

        return HandlerParameter(kind="class", type_name=_type_name(tp), **common)


def _resolve_annotation(func: Any, name: str, annotation: Any) -> Any:
    """Evaluate one string annotation in the handler's module.

    Each parameter is resolved on its own, so a hint that only exists under
    ``TYPE_CHECKING`` leaves its siblings typed. Failures keep the string.
    """
    if not isinstance(annotation, str):
        return annotation
    target = inspect.unwrap(getattr(func, "__func__", func))
    globalns = getattr(target, "__globals__", {})
    try:
        return eval(annotation, globalns)
    except Exception as exc:
        logger.debug("Cannot resolve annotation %r of parameter %s: %s", annotation, name, exc)
        return annotation


def _written_name(annotation: str) -> str:
    # "Optional[models.User]" / "models.User | None" -> "User"
    text = annotation.strip().strip("'\"")
    m = _OPTIONAL_TEXT.match(text)
    if m:
        text = m.group(1).strip()
    parts = [p.strip() for p in text.split("|") if p.strip() != "None"]
    if len(parts) == 1:
        text = parts[0]
    head, bracket, rest = text.partition("[")
    return head.rsplit(".", 1)[-1] + bracket + rest


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)
