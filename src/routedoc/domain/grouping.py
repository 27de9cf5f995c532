from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from routedoc.domain.models import RouteSummary


def group_by_resource(summaries: Iterable[RouteSummary]) -> List[Tuple[str, List[RouteSummary]]]:
    """
    Group summaries by resource_group.

    Groups are sorted with plain ``sorted()`` (case-sensitive, so "Zebra"
    sorts before "apples"); routes keep their incoming order.
    """
    by_group: Dict[str, List[RouteSummary]] = {}
    for s in summaries:
        by_group.setdefault(s.resource_group, []).append(s)

    return [(group, by_group[group]) for group in sorted(by_group.keys())]
