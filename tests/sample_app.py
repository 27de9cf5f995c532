from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel

from routedoc.requests import ValidationRequest
from routedoc.routing import route

if TYPE_CHECKING:
    from decimal import Decimal


class User(BaseModel):
    id: int
    name: str = ""


class Min:
    def __init__(self, n: int):
        self.n = n

    def __str__(self) -> str:
        return f"min:{self.n}"


class StoreUserRequest(ValidationRequest):
    def rules(self):
        return {"email": "required|email", "age": ["integer", Min(18)], "nickname": Min(3)}


class SearchRequest(ValidationRequest):
    def rules(self):
        return {"ignored": "string"}

    def validator(self, factory):
        return factory.make({}, {"q": "required|string", "page": "integer"})


class BrokenRequest(ValidationRequest):
    def rules(self):
        return ["not", "a", "mapping"]


class UserController:
    """
    Users endpoints.

    @resource Users
    """

    def index(self):
        """
        List users

        Returns every user, paginated.

        @response {"data": []}
        """

    def show(self, id: User):
        """Show a user

        @response {
            "id": 1,
            "name": "Ada"
        }
        @response not found
        """

    def store(self, request: StoreUserRequest):
        """Create a user"""

    def search(self, request: SearchRequest, page: Optional[int] = 1):
        """Search users"""

    def untyped(self, id):
        """Legacy lookup"""

    def page(self, slug: str = "home"):
        """Page by slug"""

    def broken(self, request: BrokenRequest):
        """Broken rules"""

    def priced(self, id: User, price: Decimal = None):
        """Show a user with a price"""


class AccountController:
    def show(self, account: int):
        """
        Show account

        @resource Accounts
        """

    def settings(self):
        """Settings"""


class InternalController:
    """
    @hideFromDocs
    """

    def ping(self):
        """Ping"""


def module_level_handler():
    return "ok"


def routes():
    return [
        route("users", ["GET", "HEAD"], UserController.index, name="users.index"),
        route("users/{id}", ["GET", "HEAD"], UserController.show, name="users.show", where={"id": "[0-9]+"}),
        route("users", "POST", UserController.store, name="users.store"),
        route("users/search", "GET", UserController.search, name="users.search"),
        route("accounts/{account}", "GET", AccountController.show, name="accounts.show"),
        route("settings", "GET", AccountController.settings, name="settings"),
        route("internal/ping", "GET", InternalController.ping, name="internal.ping"),
        route("health", "GET", lambda: "ok", name="health"),
        route("legacy/{id}", "GET", UserController.untyped, name="legacy"),
    ]


def not_descriptors():
    return ["users"]
