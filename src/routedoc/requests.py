from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol


class ValidationRequest:
    """
    Base class for request objects that carry validation rules.

    Handlers that take a subclass of this as a parameter get their query
    parameters documented from it. Subclasses either override ``rules()``
    or define ``validator(self, factory)`` returning a ``Validator``; when
    both exist the validator wins.

        class StoreUserRequest(ValidationRequest):
            def rules(self):
                return {"email": "required|email", "age": ["integer", Min(18)]}
    """

    def rules(self) -> Mapping[str, Any]:
        return {}


@dataclass
class Validator:
    initial_rules: Mapping[str, Any]
    data: Mapping[str, Any] = field(default_factory=dict)
    messages: Mapping[str, str] = field(default_factory=dict)


class ValidatorFactory:
    def make(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Optional[Mapping[str, str]] = None,
    ) -> Validator:
        return Validator(initial_rules=dict(rules), data=dict(data), messages=dict(messages or {}))


class ValidationRuleProvider(Protocol):
    def rules_for(self, request_class: type) -> Mapping[str, Any]:
        ...


class RequestRuleProvider:
    """Default rule provider: instantiates the request and asks it for rules."""

    def __init__(self, factory: Optional[ValidatorFactory] = None):
        self.factory = factory or ValidatorFactory()

    def rules_for(self, request_class: type) -> Mapping[str, Any]:
        request = request_class()

        hook = getattr(request, "validator", None)
        if callable(hook):
            validator = hook(self.factory)
            return validator.initial_rules

        return request.rules()
