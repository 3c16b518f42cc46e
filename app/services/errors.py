"""Domain errors raised by services.

Each error carries the HTTP status the API layer should answer with.
Routers catch ``ServiceError`` and re-raise it as ``HTTPException``; the
HTTPException handler in app/main.py renders that as ``{"error": message}``.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    status_code = 404


class ServiceValidationError(ServiceError):
    status_code = 400


class ForbiddenError(ServiceError):
    status_code = 403


class LessonNotFoundError(NotFoundError):
    def __init__(self, message: str = "Lesson not found") -> None:
        super().__init__(message)


class CourseNotFoundError(NotFoundError):
    def __init__(self, message: str = "Course not found") -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class AlreadyEnrolledError(ServiceValidationError):
    def __init__(self, message: str = "Already enrolled") -> None:
        super().__init__(message)


class NotEnrolledError(ForbiddenError):
    def __init__(self, message: str = "Not enrolled in this course") -> None:
        super().__init__(message)


class ReviewValidationError(ServiceValidationError):
    pass


class AccountValidationError(ServiceValidationError):
    pass


class EmailAlreadyRegisteredError(ServiceValidationError):
    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class InvalidResetTokenError(ServiceValidationError):
    def __init__(self, message: str = "Invalid or expired reset token") -> None:
        super().__init__(message)
