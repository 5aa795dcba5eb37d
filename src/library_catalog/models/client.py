"""Client record for the Library Catalog service."""

from pydantic import Field

from .base import CamelModel, Entity


class Client(Entity):
    """
    A library member who can borrow books.

    Only the name is required; contact details are optional but the email,
    when given, must be unique across clients.
    """

    first_name: str = Field(..., min_length=1, max_length=50, examples=["Ada"])
    last_name: str = Field(..., min_length=1, max_length=50, examples=["Lovelace"])
    email: str | None = Field(None, max_length=50, examples=["ada@example.org"])
    address: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20, examples=["+44 20 7946 0000"])


class ClientPatch(CamelModel):
    """Merge-patch body for a client."""

    id: int | None = None
    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    email: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20)
