"""
Typed failures raised by the gymtrack services.

Each carries a human-readable message and the HTTP status the API layer
translates it to.
"""


class GymTrackError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GymTrackError):
    status_code = 404


class ValidationError(GymTrackError):
    status_code = 400


class ConflictError(GymTrackError):
    status_code = 409


class InvalidStateError(GymTrackError):
    status_code = 400


class InternalError(GymTrackError):
    status_code = 500
