from routedoc.domain.models import ParameterSpec, RouteSummary, route_signature
from routedoc.render.markdown import default_info, render_document, render_route


def _summary(**overrides) -> RouteSummary:
    data = dict(
        id=route_signature("users/{id}", ["GET", "HEAD"]),
        resource_group="Users",
        uri="users/{id}",
        methods=["GET", "HEAD"],
        title="Show a user",
        description="Fetch one user.",
        path_parameters=[
            ParameterSpec(name="id", type="model_id", required=True, rules=["required"], description="User id")
        ],
        query_parameters=[],
        responses=['{"id": 1}'],
    )
    data.update(overrides)
    return RouteSummary(**data)


def test_render_route_is_wrapped_in_markers():
    s = _summary()
    text = render_route(s)

    assert text.startswith(f"<!-- START_{s.id} -->\n")
    assert text.endswith(f"<!-- END_{s.id} -->")
    assert text.count("START_") == 1


def test_render_route_heading_falls_back_to_uri():
    assert "## Show a user\n" in render_route(_summary())
    assert "## users/{id}\n" in render_route(_summary(title=""))


def test_render_route_example_request_blanks_placeholders():
    text = render_route(_summary(), base_url="http://api.test/")

    assert 'curl -X GET "http://api.test/users/"' in text
    assert '-d "id"=""' in text
    assert 'method: "GET",' in text
    assert '"id": ""' in text


def test_render_route_responses():
    text = render_route(_summary(responses=['{"id": 1}', {"ok": True}]))
    assert '```json\n{"id": 1}\n```' in text
    assert '```json\n{\n    "ok": true\n}\n```' in text

    assert "> No response documented." in render_route(_summary(responses=[]))


def test_render_route_parameter_tables():
    text = render_route(
        _summary(query_parameters=[ParameterSpec(name="email", rules=["required", "email"])])
    )

    assert "### Path parameters" in text
    assert "id | model_id | true | User id | required" in text
    assert "### Query parameters" in text
    assert "email |  | false |  | required, email" in text


def test_render_route_omits_empty_tables():
    text = render_route(_summary(path_parameters=[], query_parameters=[]))
    assert "### Path parameters" not in text
    assert "### Query parameters" not in text
    assert "`GET users/{id}`" in text
    assert "`HEAD users/{id}`" in text


def test_render_document_layout():
    doc = render_document("title: API", "# Info", [("Users", ["<r1>", "<r2>"]), ("Zeta", ["<r3>"])])

    assert doc.startswith("---\ntitle: API\n---\n\n<!-- START_INFO -->\n# Info\n<!-- END_INFO -->\n")
    assert doc.index("# Users") < doc.index("<r1>") < doc.index("<r2>") < doc.index("# Zeta") < doc.index("<r3>")


def test_default_info_links_collection_only_when_written():
    assert "collection.json" in default_info("collection.json")
    assert "Collection" not in default_info(None)
