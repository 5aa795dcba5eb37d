"""Client repository for the Library Catalog service."""

from ..database.schema import Client as ClientDB
from ..models.client import Client as ClientModel
from ..models.client import ClientPatch
from .repository import BaseRepository


class ClientRepository(BaseRepository[ClientDB, ClientModel, ClientPatch]):
    """CRUD access to library clients. Emails are unique when present."""

    @property
    def model_class(self):
        return ClientDB

    @property
    def response_schema(self):
        return ClientModel
