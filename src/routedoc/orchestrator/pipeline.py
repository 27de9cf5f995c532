from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from routedoc.domain.grouping import group_by_resource
from routedoc.domain.models import EndpointDescriptor, RouteSummary
from routedoc.errors import (
    MissingTypeError,
    RouteExtractionError,
    SelectionCriteriaError,
    UnsupportedHandlerError,
)
from routedoc.export.postman import build_collection, dump_collection
from routedoc.extractors.introspection import MetadataProvider
from routedoc.extractors.summary import RouteSummaryExtractor
from routedoc.publish.merge import Preamble, publish
from routedoc.render.markdown import default_frontmatter, default_info, render_route
from routedoc.requests import ValidationRuleProvider
from routedoc.store.files import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateOptions:
    output_path: Path = Path("public/docs")
    allowed_names: frozenset[str] = field(default_factory=frozenset)
    uri_prefix_pattern: Optional[str] = None
    skip_type_checks: bool = False
    write_collection: bool = True
    base_url: str = ""
    collection_name: str = "API"
    full_errors: bool = False

    def validate(self) -> None:
        if self.uri_prefix_pattern is None and not self.allowed_names:
            raise SelectionCriteriaError(
                "You must provide either a route prefix or a route to generate the documentation."
            )


@dataclass(frozen=True)
class GenerateResult:
    summaries: list[RouteSummary]
    skipped: int            # not selected, hidden or closures
    failed: int             # extraction errors
    preserved: list[RouteSummary]
    document_path: str
    snapshot_path: str
    collection_path: str | None


def is_selected(descriptor: EndpointDescriptor, options: GenerateOptions) -> bool:
    if descriptor.name is not None and descriptor.name in options.allowed_names:
        return True
    if options.uri_prefix_pattern is None:
        return False
    return fnmatch.fnmatchcase(descriptor.uri, options.uri_prefix_pattern)


def extract_summaries(
    descriptors: Iterable[EndpointDescriptor],
    options: GenerateOptions,
    extractor: RouteSummaryExtractor,
) -> tuple[list[RouteSummary], int, int]:
    """
    Returns (summaries, skipped, failed).

    A route that fails to extract is logged and left out; the rest carry on.
    Summaries sharing an id collapse into one: the later one takes the slot.
    """
    by_id: dict[str, RouteSummary] = {}
    skipped = 0
    failed = 0

    for d in descriptors:
        route_str = f"{d.label()} at {d.action_name}"

        if not is_selected(d, options):
            logger.debug("Skipping route %s", route_str)
            skipped += 1
            continue

        try:
            meta = extractor.describe(d)
            if extractor.is_hidden(d, meta):
                logger.info("Skipping hidden route %s", route_str)
                skipped += 1
                continue
            summary = extractor.extract(d, meta)
        except UnsupportedHandlerError:
            logger.warning("Skipping route %s: closure handlers are not supported", route_str)
            skipped += 1
            continue
        except MissingTypeError as exc:
            logger.warning("Skipping route %s: %s", route_str, exc)
            failed += 1
            continue
        except RouteExtractionError as exc:
            logger.error("Failed to process %s: %s", route_str, exc, exc_info=options.full_errors)
            failed += 1
            continue

        if summary.id in by_id:
            logger.warning(
                "Route %s has the same signature as %s; the later route wins",
                route_str,
                by_id[summary.id].label(),
            )
        by_id[summary.id] = summary
        logger.info("Processed route %s", route_str)

    return list(by_id.values()), skipped, failed


def run_generate(
    descriptors: Iterable[EndpointDescriptor],
    options: GenerateOptions,
    provider: Optional[MetadataProvider] = None,
    rule_provider: Optional[ValidationRuleProvider] = None,
) -> GenerateResult:
    options.validate()

    extractor = RouteSummaryExtractor(
        provider=provider,
        rule_provider=rule_provider,
        skip_type_checks=options.skip_type_checks,
    )
    summaries, skipped, failed = extract_summaries(descriptors, options, extractor)

    groups = group_by_resource(summaries)
    fresh = {s.id: render_route(s, base_url=options.base_url) for s in summaries}

    store = DocumentStore(options.output_path)
    default_preamble = Preamble(
        frontmatter=default_frontmatter(),
        info=default_info("collection.json" if options.write_collection else None),
    )

    result = publish(
        groups,
        fresh,
        published_text=store.read_published(),
        snapshot_text=store.read_snapshot(),
        default_preamble=default_preamble,
    )

    document_path = store.write_published(result.document)
    snapshot_path = store.write_snapshot(result.snapshot)
    logger.info("Wrote index.md to: %s", document_path)

    collection_path: str | None = None
    if options.write_collection:
        collection = build_collection(summaries, name=options.collection_name, base_url=options.base_url)
        collection_path = str(store.write_collection(dump_collection(collection)))
        logger.info("Wrote collection to: %s", collection_path)

    return GenerateResult(
        summaries=summaries,
        skipped=skipped,
        failed=failed,
        preserved=list(result.preserved),
        document_path=str(document_path),
        snapshot_path=str(snapshot_path),
        collection_path=collection_path,
    )
