"""
CRUD routers for the Library Catalog entities.

Every entity exposes the same seven endpoints, so the routers are produced by
``build_router`` from an ``EntityResource`` describing the entity:

    POST   /api/<path>            create (body must not carry an id)
    PUT    /api/<path>/{id}       full replace
    PATCH  /api/<path>/{id}       merge-patch (application/merge-patch+json)
    GET    /api/<path>            filtered, paged list
    GET    /api/<path>/count      filtered count
    GET    /api/<path>/{id}       single entity
    DELETE /api/<path>/{id}       delete
"""

import logging
from dataclasses import dataclass

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..database import (
    AuthorRepository,
    BaseRepository,
    BookRepository,
    BorrowedBookRepository,
    ClientRepository,
    NotFoundError,
    PublisherRepository,
)
from ..models import (
    Author,
    AuthorPatch,
    Book,
    BookPatch,
    BorrowedBook,
    BorrowedBookPatch,
    CamelModel,
    Client,
    ClientPatch,
    Entity,
    Publisher,
    PublisherPatch,
)
from ..query import (
    AuthorQueryService,
    BookQueryService,
    BorrowedBookQueryService,
    ClientQueryService,
    PublisherQueryService,
    QueryService,
)
from .binding import bind_criteria, bind_pagination
from .deps import get_session
from .errors import BadRequestAlertError
from .headers import alert_headers, pagination_headers

logger = logging.getLogger(__name__)

MERGE_PATCH_JSON = "application/merge-patch+json"


@dataclass(frozen=True)
class EntityResource:
    """Configuration of one entity's REST resource."""

    path: str
    entity_name: str
    record: type[Entity]
    patch: type[CamelModel]
    repository_class: type[BaseRepository]
    query_service_class: type[QueryService]

    @property
    def criteria_class(self):
        return self.query_service_class.criteria_class


RESOURCES = [
    EntityResource("authors", "author", Author, AuthorPatch, AuthorRepository, AuthorQueryService),
    EntityResource("books", "book", Book, BookPatch, BookRepository, BookQueryService),
    EntityResource(
        "publishers",
        "publisher",
        Publisher,
        PublisherPatch,
        PublisherRepository,
        PublisherQueryService,
    ),
    EntityResource("clients", "client", Client, ClientPatch, ClientRepository, ClientQueryService),
    EntityResource(
        "borrowed-books",
        "borrowedBook",
        BorrowedBook,
        BorrowedBookPatch,
        BorrowedBookRepository,
        BorrowedBookQueryService,
    ),
]


def _check_update_id(entity_name: str, path_id: int, body_id: int | None) -> None:
    if body_id is None:
        raise BadRequestAlertError("Invalid id", entity_name, "idnull")
    if body_id != path_id:
        raise BadRequestAlertError("Invalid ID", entity_name, "idinvalid")


def _merge_patch_only(entity_name: str):
    def require_merge_patch(request: Request) -> None:
        media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        if media_type != MERGE_PATCH_JSON:
            raise BadRequestAlertError(
                f"Content type must be {MERGE_PATCH_JSON}",
                entity_name,
                "unsupportedmediatype",
                status_code=415,
            )

    return require_merge_patch


def build_router(resource: EntityResource) -> APIRouter:
    """Create the CRUD router for one entity."""
    router = APIRouter(prefix=f"/{resource.path}", tags=[resource.path])
    name = resource.entity_name
    record_model = resource.record
    patch_model = resource.patch

    @router.post("", status_code=201, response_model=record_model)
    def create_entity(
        entity: record_model,
        request: Request,
        response: Response,
        session: Session = Depends(get_session),
    ):
        logger.debug("REST request to save %s : %s", name, entity)
        if entity.id is not None:
            raise BadRequestAlertError(f"A new {name} cannot already have an ID", name, "idexists")
        result = resource.repository_class(session).save(entity)
        response.headers["Location"] = f"{request.url.path}/{result.id}"
        response.headers.update(alert_headers("created", name, result.id))
        return result

    @router.put("/{id}", response_model=record_model)
    def update_entity(
        id: int,
        entity: record_model,
        response: Response,
        session: Session = Depends(get_session),
    ):
        logger.debug("REST request to update %s : %s, %s", name, id, entity)
        _check_update_id(name, id, entity.id)
        repository = resource.repository_class(session)
        if not repository.exists(id):
            raise BadRequestAlertError("Entity not found", name, "idnotfound")
        result = repository.save(entity)
        response.headers.update(alert_headers("updated", name, result.id))
        return result

    @router.patch(
        "/{id}",
        response_model=record_model,
        dependencies=[Depends(_merge_patch_only(name))],
    )
    def partial_update_entity(
        id: int,
        patch: patch_model,
        response: Response,
        session: Session = Depends(get_session),
    ):
        logger.debug("REST request to partial update %s partially : %s, %s", name, id, patch)
        _check_update_id(name, id, patch.id)
        repository = resource.repository_class(session)
        if not repository.exists(id):
            raise BadRequestAlertError("Entity not found", name, "idnotfound")
        result = repository.partial_update(patch)
        response.headers.update(alert_headers("updated", name, result.id))
        return result

    @router.get("", response_model=list[record_model])
    def list_entities(
        request: Request,
        response: Response,
        session: Session = Depends(get_session),
    ):
        criteria = bind_criteria(resource.criteria_class, request.query_params)
        pagination = bind_pagination(request.query_params)
        logger.debug("REST request to get %ss by criteria: %s", name, criteria)
        page = resource.query_service_class.for_session(session).find_page_by_criteria(
            criteria, pagination
        )
        response.headers.update(pagination_headers(request.url, page))
        return page.items

    @router.get("/count", response_model=int)
    def count_entities(request: Request, session: Session = Depends(get_session)):
        criteria = bind_criteria(resource.criteria_class, request.query_params)
        logger.debug("REST request to count %ss by criteria: %s", name, criteria)
        return resource.query_service_class.for_session(session).count_by_criteria(criteria)

    @router.get("/{id}", response_model=record_model)
    def get_entity(id: int, session: Session = Depends(get_session)):
        logger.debug("REST request to get %s : %s", name, id)
        result = resource.repository_class(session).find_one(id)
        if result is None:
            raise NotFoundError(f"{name} {id} not found")
        return result

    @router.delete("/{id}", status_code=204, response_class=Response)
    def delete_entity(id: int, session: Session = Depends(get_session)):
        logger.debug("REST request to delete %s : %s", name, id)
        resource.repository_class(session).delete(id)
        return Response(status_code=204, headers=alert_headers("deleted", name, id))

    return router


def build_routers() -> list[APIRouter]:
    return [build_router(resource) for resource in RESOURCES]
