"""Publisher record for the Library Catalog service."""

from pydantic import Field

from .base import CamelModel, Entity


class Publisher(Entity):
    """A publishing house. Names are unique."""

    name: str = Field(
        ...,
        description="Name of the publisher",
        min_length=1,
        max_length=100,
        examples=["Penguin Books"],
    )


class PublisherPatch(CamelModel):
    """Merge-patch body for a publisher."""

    id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=100)
