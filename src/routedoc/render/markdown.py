from __future__ import annotations

import json
from typing import Any, Iterable, List, Sequence, Tuple

from routedoc.domain.models import ParameterSpec, RouteSummary
from routedoc.domain.uri import join_url

INFO_START = "<!-- START_INFO -->"
INFO_END = "<!-- END_INFO -->"


def start_marker(route_id: str) -> str:
    return f"<!-- START_{route_id} -->"


def end_marker(route_id: str) -> str:
    return f"<!-- END_{route_id} -->"


def render_route(summary: RouteSummary, base_url: str = "") -> str:
    """
    Render one route as a Markdown fragment wrapped in START/END markers.

    The markers are the only part later stages look at; the text between
    them can be edited freely.
    """
    url = join_url(base_url, summary.uri)
    method = summary.methods[0]
    fields = [p.name for p in (*summary.path_parameters, *summary.query_parameters)]

    lines: List[str] = [start_marker(summary.id)]
    lines.append(f"## {summary.title or summary.uri}")
    lines.append("")
    if summary.description:
        lines.append(summary.description)
        lines.append("")

    lines.append("> Example request:")
    lines.append("")
    lines.extend(_curl_example(method, url, fields))
    lines.append("")
    lines.extend(_javascript_example(method, url, fields))
    lines.append("")

    lines.append("> Example response:")
    lines.append("")
    if summary.responses:
        for response in summary.responses:
            lines.append("```json")
            lines.append(_response_text(response))
            lines.append("```")
            lines.append("")
    else:
        lines.append("> No response documented.")
        lines.append("")

    lines.append("### HTTP Request")
    lines.append("")
    for m in summary.methods:
        lines.append(f"`{m} {summary.uri}`")
        lines.append("")

    lines.extend(_parameter_table("Path parameters", summary.path_parameters))
    lines.extend(_parameter_table("Query parameters", summary.query_parameters))

    lines.append(end_marker(summary.id))
    return "\n".join(lines)


def _curl_example(method: str, url: str, fields: Sequence[str]) -> List[str]:
    parts = [f'curl -X {method} "{url}"', '-H "Accept: application/json"']
    parts.extend(f'-d "{name}"=""' for name in fields)
    return ["```bash", " \\\n    ".join(parts), "```"]


def _javascript_example(method: str, url: str, fields: Sequence[str]) -> List[str]:
    out = [
        "```javascript",
        "$.ajax({",
        "    crossDomain: true,",
        f'    url: "{url}",',
        f'    method: "{method}",',
        '    headers: {"accept": "application/json"},',
    ]
    if fields:
        data = json.dumps({name: "" for name in fields}, indent=4).replace("\n", "\n    ")
        out.append(f"    data: {data},")
    out.append("}).done(console.log);")
    out.append("```")
    return out


def _response_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    return json.dumps(response, indent=4, ensure_ascii=False)


def _parameter_table(title: str, parameters: Sequence[ParameterSpec]) -> List[str]:
    if not parameters:
        return []

    out = [
        f"### {title}",
        "",
        "Parameter | Type | Required | Description | Rules",
        "--------- | ---- | -------- | ----------- | -----",
    ]
    for p in parameters:
        required = "true" if p.required else "false"
        out.append(f"{p.name} | {p.type or ''} | {required} | {p.description} | {', '.join(p.rules)}")
    out.append("")
    return out


# ----------------------------
# whole document
# ----------------------------

def default_frontmatter(title: str = "API Reference") -> str:
    return "\n".join(
        [
            f"title: {title}",
            "",
            "language_tabs:",
            "- bash",
            "- javascript",
            "",
            "search: true",
        ]
    )


def default_info(collection_url: str | None = None) -> str:
    lines = ["# Info", "", "Welcome to the generated API reference."]
    if collection_url:
        lines.append(f"[Get Postman Collection]({collection_url})")
    return "\n".join(lines)


def render_document(frontmatter: str, info: str, groups: Iterable[Tuple[str, Sequence[str]]]) -> str:
    """
    Assemble front-matter, the info block and the grouped route regions.

    ``groups`` is (group name, [region text, ...]) in output order.
    """
    parts = [
        f"---\n{frontmatter}\n---\n",
        f"{INFO_START}\n{info}\n{INFO_END}\n",
    ]
    for group, regions in groups:
        parts.append(f"# {group}\n")
        parts.extend(f"{region}\n" for region in regions)
    return "\n".join(parts)
