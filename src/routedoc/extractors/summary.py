from __future__ import annotations

from typing import Any, Mapping, Optional

from routedoc.domain.models import (
    UNCLASSIFIED_GROUP,
    EndpointDescriptor,
    HandlerRef,
    ParameterSpec,
    RouteSummary,
    route_signature,
)
from routedoc.domain.uri import iter_placeholders
from routedoc.errors import (
    ExtractionFailure,
    MissingTypeError,
    RouteExtractionError,
    UnsupportedHandlerError,
)
from routedoc.extractors.introspection import (
    HandlerMetadata,
    HandlerParameter,
    MetadataProvider,
    ReflectionMetadataProvider,
)
from routedoc.requests import RequestRuleProvider, ValidationRuleProvider

RESOURCE_TAG = "resource"
RESPONSE_TAG = "response"
HIDE_TAG = "hideFromDocs"


class RouteSummaryExtractor:
    """
    EndpointDescriptor -> RouteSummary.

    Stateless across calls; the provider is asked again for every route.
    """

    def __init__(
        self,
        provider: Optional[MetadataProvider] = None,
        rule_provider: Optional[ValidationRuleProvider] = None,
        skip_type_checks: bool = False,
    ):
        self.provider = provider or ReflectionMetadataProvider()
        self.rule_provider = rule_provider or RequestRuleProvider()
        self.skip_type_checks = skip_type_checks

    # ----------------------------
    # public
    # ----------------------------

    def describe(self, descriptor: EndpointDescriptor) -> HandlerMetadata:
        """Introspect the route's handler once; feed the result to is_hidden/extract."""
        handler = self._handler(descriptor)
        try:
            return self.provider.describe(handler)
        except RouteExtractionError:
            raise
        except Exception as exc:
            raise ExtractionFailure(f"Cannot introspect {handler.action_name}: {exc}") from exc

    def is_hidden(self, descriptor: EndpointDescriptor, meta: Optional[HandlerMetadata] = None) -> bool:
        if meta is None:
            meta = self.describe(descriptor)
        return any(doc.has_tag(HIDE_TAG) for doc in meta.doc_blocks)

    def extract(self, descriptor: EndpointDescriptor, meta: Optional[HandlerMetadata] = None) -> RouteSummary:
        if meta is None:
            meta = self.describe(descriptor)
        try:
            return RouteSummary(
                id=route_signature(descriptor.uri, descriptor.methods),
                resource_group=self._resource_group(meta),
                uri=descriptor.uri,
                methods=descriptor.methods,
                title=meta.method_doc.short_description,
                description=meta.method_doc.long_description,
                path_parameters=self._path_parameters(descriptor, meta),
                query_parameters=self._query_parameters(meta),
                responses=tuple(t.content for t in meta.method_doc.get_tags(RESPONSE_TAG)),
            )
        except RouteExtractionError:
            raise
        except Exception as exc:
            raise ExtractionFailure(f"{descriptor.label()}: {exc}") from exc

    # ----------------------------
    # pieces
    # ----------------------------

    @staticmethod
    def _handler(descriptor: EndpointDescriptor) -> HandlerRef:
        if descriptor.is_closure_handler or descriptor.handler_ref is None:
            raise UnsupportedHandlerError(
                "Closure callbacks are not supported. Please use a controller method."
            )
        return descriptor.handler_ref

    @staticmethod
    def _resource_group(meta: HandlerMetadata) -> str:
        for doc in meta.doc_blocks:
            tag = doc.get_tag(RESOURCE_TAG)
            if tag and tag.content:
                return tag.content
        return UNCLASSIFIED_GROUP

    def _path_parameters(self, descriptor: EndpointDescriptor, meta: HandlerMetadata) -> list[ParameterSpec]:
        by_name = {p.name.lower(): p for p in reversed(meta.parameters)}  # first declared wins
        out: list[ParameterSpec] = []

        for ph in iter_placeholders(descriptor.uri):
            param = by_name.get(ph.name.lower())

            type_name: Optional[str] = None
            default: Any = None
            description = ""

            if param is not None:
                type_name, description = self._path_type(param)
                if param.has_default:
                    default = param.default

            required = not ph.optional
            rules: list[str] = []
            if required:
                rules.append("required")
            pattern = descriptor.route_constraints.get(ph.name)
            if pattern is not None:
                rules.append(f"regex:{pattern}")

            out.append(
                ParameterSpec(
                    name=ph.name,
                    type=type_name,
                    required=required,
                    default=default,
                    rules=rules,
                    description=description,
                )
            )
        return out

    def _path_type(self, param: HandlerParameter) -> tuple[Optional[str], str]:
        if param.kind == "none":
            if not self.skip_type_checks:
                raise MissingTypeError(param.name)
            return None, ""
        if param.kind == "model":
            return "model_id", f"{param.type_name} id"
        return param.type_name, ""

    def _query_parameters(self, meta: HandlerMetadata) -> list[ParameterSpec]:
        request_class = next((p.request_class for p in meta.parameters if p.request_class), None)
        if request_class is None:
            return []

        rules = self.rule_provider.rules_for(request_class)
        if not isinstance(rules, Mapping):
            raise ExtractionFailure(
                f"{request_class.__name__} returned {type(rules).__name__} rules, expected a mapping"
            )

        return [
            ParameterSpec(name=str(field), rules=normalize_rules(rule))
            for field, rule in rules.items()
        ]


def normalize_rules(rule: Any) -> list[str]:
    """
    "required|email"          -> ["required", "email"]
    ["integer", Min(18)]      -> ["integer", "min:18"]   (via str())
    Min(18)                   -> ["min:18"]
    """
    if isinstance(rule, str):
        return rule.split("|")
    if isinstance(rule, (list, tuple)):
        return [r if isinstance(r, str) else str(r) for r in rule]
    return [str(rule)]
