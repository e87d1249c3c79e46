from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.errors import InvalidArgument, RelationshipError


async def relationship_error_handler(request: Request, exc: RelationshipError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and queries are reported like any other invalid argument
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        problems.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=InvalidArgument.status_code,
        content={"detail": "; ".join(problems), "kind": InvalidArgument.kind},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelationshipError, relationship_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
