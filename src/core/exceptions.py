"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    QUESTION_NOT_FOUND = "QUESTION_NOT_FOUND"
    ANSWER_NOT_FOUND = "ANSWER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    USERNAME_TAKEN = "USERNAME_TAKEN"
    PROFILE_EXISTS = "PROFILE_EXISTS"
    QUESTION_ALREADY_ANSWERED = "QUESTION_ALREADY_ANSWERED"
    PROFILE_CHANGED = "PROFILE_CHANGED"

    # Cooldown (429)
    USERNAME_COOLDOWN = "USERNAME_COOLDOWN"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ValidationError(AppException):
    """Malformed input, rejected before any write."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class ConflictError(AppException):
    """A uniqueness or state constraint was violated."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.USERNAME_TAKEN,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=409,
            details=details,
        )


class UsernameTakenError(ConflictError):
    """Username is already claimed by another profile."""

    def __init__(self, username: str) -> None:
        super().__init__(
            message=f"Username already taken: {username}",
            error_code=ErrorCode.USERNAME_TAKEN,
            details={"username": username},
        )


class ProfileExistsError(ConflictError):
    """A profile is already registered for this uid."""

    def __init__(self, uid: str) -> None:
        super().__init__(
            message="Profile already exists",
            error_code=ErrorCode.PROFILE_EXISTS,
            details={"uid": uid},
        )


class QuestionAlreadyAnsweredError(ConflictError):
    """Question has already transitioned to answered."""

    def __init__(self, question_id: str) -> None:
        super().__init__(
            message=f"Question already answered: {question_id}",
            error_code=ErrorCode.QUESTION_ALREADY_ANSWERED,
            details={"question_id": question_id},
        )


class ProfileChangedError(ConflictError):
    """The profile's username changed between read and write."""

    def __init__(self, uid: str) -> None:
        super().__init__(
            message="Profile was modified concurrently, retry the request",
            error_code=ErrorCode.PROFILE_CHANGED,
            details={"uid": uid},
        )


class CooldownError(AppException):
    """Username change attempted inside the cooldown window."""

    def __init__(self, remaining_ms: int) -> None:
        self.remaining_ms = remaining_ms
        self.remaining_days = remaining_ms / 86_400_000
        super().__init__(
            error_code=ErrorCode.USERNAME_COOLDOWN,
            message=f"Username can be changed again in {self.remaining_days:.1f} days",
            status_code=429,
            details={
                "remaining_ms": remaining_ms,
                "remaining_days": round(self.remaining_days, 2),
            },
        )


class NotFoundError(AppException):
    """Lookup by id or username yielded nothing."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=404,
            details=details,
        )


class ProfileNotFoundError(NotFoundError):
    """Profile not found."""

    def __init__(self, key: str) -> None:
        super().__init__(
            ErrorCode.PROFILE_NOT_FOUND,
            f"Profile not found: {key}",
            {"key": key},
        )


class QuestionNotFoundError(NotFoundError):
    """Question not found."""

    def __init__(self, question_id: str) -> None:
        super().__init__(
            ErrorCode.QUESTION_NOT_FOUND,
            f"Question not found: {question_id}",
            {"question_id": question_id},
        )


class AnswerNotFoundError(NotFoundError):
    """Answer not found."""

    def __init__(self, answer_id: str) -> None:
        super().__init__(
            ErrorCode.ANSWER_NOT_FOUND,
            f"Answer not found: {answer_id}",
            {"answer_id": answer_id},
        )


class PartialFailureError(AppException):
    """Answer was committed but its question could not be marked answered."""

    def __init__(self, answer_id: str, question_id: str) -> None:
        self.answer_id = answer_id
        self.question_id = question_id
        super().__init__(
            error_code=ErrorCode.PARTIAL_FAILURE,
            message="Answer saved but question could not be marked answered",
            status_code=500,
            details={"answer_id": answer_id, "question_id": question_id},
        )
