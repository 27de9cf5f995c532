from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from routedoc.domain.models import RouteSummary
from routedoc.render.markdown import INFO_END, INFO_START, render_document

logger = logging.getLogger(__name__)

_REGION = re.compile(r"<!-- START_([0-9a-f]{32}) -->.*?<!-- END_\1 -->", re.DOTALL)
_INFO = re.compile(re.escape(INFO_START) + r"(.*?)" + re.escape(INFO_END), re.DOTALL)
_FRONTMATTER = re.compile(r"\A---\n(.*?)\n---\s*" + re.escape(INFO_START), re.DOTALL)


@dataclass(frozen=True)
class MergeOutcome:
    regions: Dict[str, str]          # id -> text to publish, in fresh order
    preserved: Tuple[str, ...]       # ids whose hand-edited text was kept


@dataclass(frozen=True)
class Preamble:
    frontmatter: str
    info: str


@dataclass(frozen=True)
class PublishResult:
    document: str
    snapshot: str
    preserved: Tuple[RouteSummary, ...]


def find_regions(text: Optional[str]) -> Dict[str, str]:
    """id -> full region text (markers included). First occurrence wins."""
    out: Dict[str, str] = {}
    for m in _REGION.finditer(text or ""):
        out.setdefault(m.group(1), m.group(0))
    return out


def merge_regions(
    fresh: Mapping[str, str],
    published: Mapping[str, str],
    snapshot: Mapping[str, str],
) -> MergeOutcome:
    """
    Three-way merge at region granularity.

    A published region that differs from the snapshot region with the same
    id was edited by hand and is kept as-is. Everything else takes the
    fresh rendering. Ids missing from ``fresh`` are dropped.
    """
    regions: Dict[str, str] = {}
    preserved: List[str] = []

    for rid, text in fresh.items():
        current = published.get(rid)
        baseline = snapshot.get(rid)

        if current is None or baseline is None or baseline == current:
            regions[rid] = text
        else:
            regions[rid] = current
            preserved.append(rid)

    return MergeOutcome(regions=regions, preserved=tuple(preserved))


def extract_preamble(text: Optional[str], default: Preamble) -> Preamble:
    """Front-matter and info block of a previous document, or the defaults."""
    if not text:
        return default

    frontmatter = default.frontmatter
    info = default.info

    m = _INFO.search(text)
    if m:
        info = m.group(1).strip("\n")

    m = _FRONTMATTER.search(text)
    if m:
        frontmatter = m.group(1).strip("\n")

    return Preamble(frontmatter=frontmatter, info=info)


def publish(
    groups: Sequence[Tuple[str, Sequence[RouteSummary]]],
    fresh: Mapping[str, str],
    published_text: Optional[str],
    snapshot_text: Optional[str],
    default_preamble: Preamble,
) -> PublishResult:
    """
    Build the new published document and snapshot.

    ``groups`` fixes the output order (see grouping.group_by_resource);
    ``fresh`` holds this run's rendering for every route id in ``groups``.
    """
    outcome = merge_regions(fresh, find_regions(published_text), find_regions(snapshot_text))
    preamble = extract_preamble(published_text, default_preamble)

    by_id = {s.id: s for _, summaries in groups for s in summaries}
    for rid in outcome.preserved:
        summary = by_id[rid]
        logger.warning("Skipping modified route [%s] %s", ",".join(summary.methods), summary.uri)

    document = render_document(
        preamble.frontmatter,
        preamble.info,
        [(group, [outcome.regions[s.id] for s in summaries]) for group, summaries in groups],
    )
    snapshot = render_document(
        preamble.frontmatter,
        preamble.info,
        [(group, [fresh[s.id] for s in summaries]) for group, summaries in groups],
    )

    return PublishResult(
        document=document,
        snapshot=snapshot,
        preserved=tuple(by_id[rid] for rid in outcome.preserved),
    )
