"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    code = "AppError"

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    code = "Validation"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class UnauthenticatedError(AppError):
    """Raised when no authenticated principal can be resolved."""

    code = "Unauthenticated"

    def __init__(self, message="Authentication required."):
        """Initialize the error."""
        super().__init__(message, 401)


class ForbiddenError(AppError):
    """Raised when the principal lacks the required role or ownership."""

    code = "Forbidden"

    def __init__(self, message="You do not have permission to do that."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "NotFound"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    code = "Conflict"

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class UserNotFound(NotFoundError):
    code = "UserNotFound"

    def __init__(self, message="User not found."):
        super().__init__(message)


class LeaderNotFound(NotFoundError):
    code = "LeaderNotFound"

    def __init__(self, message="Leader not found."):
        super().__init__(message)


class GridNotFound(NotFoundError):
    code = "GridNotFound"

    def __init__(self, message="Grid not found."):
        super().__init__(message)


class GroupNotFound(NotFoundError):
    code = "GroupNotFound"

    def __init__(self, message="Group not found."):
        super().__init__(message)


class CourseNotFound(NotFoundError):
    code = "CourseNotFound"

    def __init__(self, message="Course not found."):
        super().__init__(message)


class ServiceAreaNotFound(NotFoundError):
    code = "ServiceAreaNotFound"

    def __init__(self, message="Service area not found."):
        super().__init__(message)


class ActivityNotFound(NotFoundError):
    code = "ActivityNotFound"

    def __init__(self, message="Activity not found."):
        super().__init__(message)


class AttendanceRecordNotFound(NotFoundError):
    code = "AttendanceRecordNotFound"

    def __init__(self, message="Attendance record not found."):
        super().__init__(message)


class GridAlreadyExists(DuplicateResourceError):
    code = "GridAlreadyExists"

    def __init__(
        self, message="You already have a grid. A pastor can only own one grid."
    ):
        super().__init__(message)


class UserAlreadyInOtherGrid(DuplicateResourceError):
    code = "UserAlreadyInOtherGrid"

    def __init__(self, message="The user already belongs to another grid."):
        super().__init__(message)


class UserNotInThisGrid(DuplicateResourceError):
    code = "UserNotInThisGrid"

    def __init__(self, message="The user does not belong to your grid."):
        super().__init__(message)


class ProfileAlreadyComplete(DuplicateResourceError):
    code = "ProfileAlreadyComplete"

    def __init__(self, message="The profile is already complete."):
        super().__init__(message)


class AlreadyInGroup(DuplicateResourceError):
    code = "AlreadyInGroup"

    def __init__(self, message="You already belong to a group."):
        super().__init__(message)
