from __future__ import annotations

import uuid
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field

from routedoc.domain.grouping import group_by_resource
from routedoc.domain.models import RouteSummary
from routedoc.domain.uri import join_url

POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


class _PostmanModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Header(_PostmanModel):
    key: str
    value: str


class FormField(_PostmanModel):
    key: str
    value: str = ""
    type: Literal["text"] = "text"
    disabled: bool = False


class Body(_PostmanModel):
    mode: Literal["formdata"] = "formdata"
    formdata: list[FormField] = Field(default_factory=list)


class Request(_PostmanModel):
    url: str
    method: str
    header: list[Header] = Field(default_factory=list)
    body: Body = Field(default_factory=Body)
    description: str = ""


class RequestItem(_PostmanModel):
    id: str
    name: str
    request: Request
    response: list[Any] = Field(default_factory=list)


class Folder(_PostmanModel):
    id: str
    name: str
    description: str = ""
    item: list[RequestItem] = Field(default_factory=list)


class Info(_PostmanModel):
    postman_id: str = Field(alias="_postman_id")
    name: str
    description: str = ""
    schema_url: str = Field(default=POSTMAN_SCHEMA, alias="schema")


class Collection(_PostmanModel):
    info: Info
    item: list[Folder] = Field(default_factory=list)


ACCEPT_JSON = Header(key="Accept", value="application/json")


def build_collection(
    summaries: Iterable[RouteSummary],
    name: str = "API",
    base_url: str = "",
) -> Collection:
    """
    One folder per resource group (sorted), one request per route.

    Ids are UUIDv5 values derived from the collection name and the item's
    position, so the same input always yields the same file.
    """
    root = uuid.uuid5(uuid.NAMESPACE_URL, f"routedoc:{name}")
    folders: list[Folder] = []

    for gi, (group, routes) in enumerate(group_by_resource(summaries)):
        items = [
            RequestItem(
                id=str(uuid.uuid5(root, f"{gi}.{ri}")),
                name=s.title or s.uri,
                request=Request(
                    url=join_url(base_url, s.uri),
                    method=s.methods[0],
                    header=[ACCEPT_JSON],
                    body=Body(formdata=[FormField(key=p.name) for p in s.query_parameters]),
                    description=s.description,
                ),
            )
            for ri, s in enumerate(routes)
        ]
        folders.append(Folder(id=str(uuid.uuid5(root, str(gi))), name=group, item=items))

    return Collection(info=Info(postman_id=str(root), name=name), item=folders)


def dump_collection(collection: Collection) -> str:
    return collection.model_dump_json(by_alias=True, indent=2)
