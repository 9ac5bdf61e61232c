"""Error types raised by the post store and their HTTP mappings."""

from typing import Literal

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blog_posts_api.metrics import post_requests_total

log = structlog.get_logger()

Operation = Literal["create", "list", "read", "update", "delete"]

# Generic, non-leaking client messages per failed operation.
STORE_ERROR_MESSAGES: dict[str, str] = {
    "create": "Server could not create post due to a database error",
    "list": "Server could not read post because database issue",
    "read": "Server could not read post because database issue",
    "update": "Server could not update post because database connection",
    "delete": "Server could not delete post because database connection",
}

_NOT_FOUND_ACTIONS: dict[str, str] = {
    "read": "",
    "update": " to update",
    "delete": " to delete",
}


class PostNotFoundError(Exception):
    """No post row matched the requested id."""

    def __init__(self, post_id: int, operation: Operation = "read") -> None:
        self.post_id = post_id
        self.operation = operation
        action = _NOT_FOUND_ACTIONS.get(operation, "")
        super().__init__(f"Server could not find a requested post{action} (post id: {post_id})")


class StoreError(Exception):
    """The relational store failed while running ``operation``."""

    def __init__(self, operation: Operation) -> None:
        self.operation = operation
        super().__init__(STORE_ERROR_MESSAGES[operation])


async def _not_found_handler(request: Request, exc: PostNotFoundError) -> JSONResponse:
    post_requests_total.add(1, {"operation": exc.operation, "outcome": "not_found"})
    return JSONResponse(status_code=404, content={"message": str(exc)})


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    post_requests_total.add(1, {"operation": exc.operation, "outcome": "error"})
    return JSONResponse(status_code=500, content={"message": str(exc)})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    await log.ainfo("request_rejected", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={
            "message": "Server could not process the request because of invalid input",
            "errors": [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ],
        },
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostNotFoundError, _not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StoreError, _store_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        _validation_error_handler,  # type: ignore[arg-type]
    )
