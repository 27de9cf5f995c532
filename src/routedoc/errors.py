from __future__ import annotations


class RouteDocError(Exception):
    """Base class for routedoc errors."""


class RouteExtractionError(RouteDocError):
    """A single route could not be documented. The run carries on without it."""


class UnsupportedHandlerError(RouteExtractionError):
    """Closure handlers cannot be introspected; only class methods can."""


class MissingTypeError(RouteExtractionError):
    def __init__(self, parameter: str):
        super().__init__(f"No type specified for parameter `{parameter}`")
        self.parameter = parameter


class ExtractionFailure(RouteExtractionError):
    """Any other error raised while extracting a route."""


class SelectionCriteriaError(RouteDocError, ValueError):
    """Neither route names nor a URI prefix were given."""
