class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when the scheduler encounters a logical error or invalid state."""
    def __init__(self, message: str, details: dict = None, status_code: int = 400):
        super().__init__(message, status_code=status_code, details=details)

class PreconditionFailure(SchedulerError):
    """Raised when a generation run has nothing to work with (no subjects or no rooms)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details)

class GenerationInProgressError(SchedulerError):
    """Raised when another run or edit already holds the lease for the same groups and week."""
    def __init__(self, week_ref: str, scope_key: str):
        super().__init__(
            f"A timetable operation for {scope_key} in {week_ref} is already running",
            details={"week_ref": week_ref, "scope": scope_key},
            status_code=409,
        )

class SessionValidationError(AppError):
    """Raised when a session placement references missing or unusable resources."""
    def __init__(self, errors: list[str]):
        super().__init__("Invalid session placement", status_code=400, details={"errors": errors})
        self.errors = errors

class SessionConflictError(AppError):
    """Raised when a session placement overlaps existing sessions on a shared resource."""
    def __init__(self, conflicts: list[dict]):
        super().__init__("Session conflicts detected", status_code=409, details={"conflicts": conflicts})
        self.conflicts = conflicts

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
