"""Generic CRUD handlers shared by the resource routers."""

from typing import Any, Awaitable, Callable, Optional

import pydantic
from fastapi import APIRouter, Request, Response, status

from natours.api.deps import Payload, QueryDict, Repos
from natours.core.exceptions import NotFoundError, ValidationError
from natours.schemas.common import BaseSchema
from natours.services.query import QueryFeatures
from natours.services.repository import Repositories, Repository

Document = dict[str, Any]
Prepare = Callable[[Request, Document, Repositories], Awaitable[Document]]
Present = Callable[[Document], Document]


def _identity(doc: Document) -> Document:
    return doc


def validate_payload(schema: type[BaseSchema], payload: Document, partial: bool = False) -> Document:
    """Validate a payload against a schema and return the stored document."""
    try:
        model = schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        details = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]) or "body",
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        messages = ". ".join(d["message"] for d in details)
        raise ValidationError(message=f"Invalid input data. {messages}", details=details)
    return model.to_document(partial=partial)


def envelope(data: Any, results: Optional[int] = None, **extra: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    body: dict[str, Any] = {"status": "success"}
    if results is not None:
        body["results"] = results
    body.update(extra)
    body["data"] = {"data": data}
    return body


def register_crud_routes(
    router: APIRouter,
    collection: str,
    resource: str,
    create_schema: type[BaseSchema],
    update_schema: type[BaseSchema],
    prepare_create: Optional[Prepare] = None,
    present: Present = _identity,
) -> APIRouter:
    """
    Attach list/create/get/update/delete routes for one collection.

    Args:
        router: Router to extend; routes with fixed paths must already be on it
        collection: Attribute name on ``Repositories``
        resource: Human readable name used in error messages
        create_schema: Validates POST bodies
        update_schema: Validates PATCH bodies
        prepare_create: Hook that may enrich or transform a new document
        present: Turns a stored document into its public representation
    """

    def repo(repos: Repositories) -> Repository:
        return repos.get(collection)

    async def get_or_404(repository: Repository, doc_id: str) -> Document:
        doc = await repository.get(doc_id)
        if doc is None:
            raise NotFoundError(resource=resource)
        return doc

    @router.get("", summary=f"List {collection}")
    async def list_documents(repos: Repos, query: QueryDict) -> dict[str, Any]:
        features = QueryFeatures.from_query(query)
        docs, total = await repo(repos).find(features)
        return envelope([present(doc) for doc in docs], results=len(docs), total=total)

    @router.post("", status_code=status.HTTP_201_CREATED, summary=f"Create a {resource.lower()}")
    async def create_document(request: Request, repos: Repos, payload: Payload) -> dict[str, Any]:
        doc = validate_payload(create_schema, payload)
        if prepare_create is not None:
            doc = await prepare_create(request, doc, repos)
        created = await repo(repos).create(doc)
        return envelope(present(created))

    @router.get("/{doc_id}", summary=f"Get a {resource.lower()}")
    async def get_document(doc_id: str, repos: Repos) -> dict[str, Any]:
        doc = await get_or_404(repo(repos), doc_id)
        return envelope(present(doc))

    @router.patch("/{doc_id}", summary=f"Update a {resource.lower()}")
    async def update_document(doc_id: str, repos: Repos, payload: Payload) -> dict[str, Any]:
        changes = validate_payload(update_schema, payload, partial=True)
        updated = await repo(repos).update(doc_id, changes)
        if updated is None:
            raise NotFoundError(resource=resource)
        return envelope(present(updated))

    @router.delete(
        "/{doc_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        summary=f"Delete a {resource.lower()}",
    )
    async def delete_document(doc_id: str, repos: Repos) -> Response:
        if not await repo(repos).delete(doc_id):
            raise NotFoundError(resource=resource)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
