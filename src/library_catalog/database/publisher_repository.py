"""Publisher repository for the Library Catalog service."""

from ..database.schema import Publisher as PublisherDB
from ..models.publisher import Publisher as PublisherModel
from ..models.publisher import PublisherPatch
from .repository import BaseRepository


class PublisherRepository(BaseRepository[PublisherDB, PublisherModel, PublisherPatch]):
    """CRUD access to publishers."""

    @property
    def model_class(self):
        return PublisherDB

    @property
    def response_schema(self):
        return PublisherModel
