"""Typed failures of the relationship core.

Each kind maps to one HTTP status; routes never build these responses by hand,
the handler registered in routes.errors does.
"""


class RelationshipError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class InvalidArgument(RelationshipError):
    kind = "invalid_argument"
    status_code = 400


class Forbidden(RelationshipError):
    kind = "forbidden"
    status_code = 403


class NotFound(RelationshipError):
    kind = "not_found"
    status_code = 404


class InvalidState(RelationshipError):
    kind = "invalid_state"
    status_code = 409


class Conflict(RelationshipError):
    kind = "conflict"
    status_code = 409


class Unavailable(RelationshipError):
    kind = "unavailable"
    status_code = 503
