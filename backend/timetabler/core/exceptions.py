class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when the scheduler encounters a logical error or invalid state."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class GenerationInProgressError(AppError):
    """Raised when a generate or reset request arrives while a run is in flight."""
    def __init__(self):
        super().__init__("A timetable generation run is already in progress", status_code=409)

class TimetablePersistenceError(AppError):
    """Raised when committed assignments cannot be written; aborts the run."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: int | str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
