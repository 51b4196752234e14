class FoodShareError(Exception):
    """Base for every error the lifecycle core raises to its caller."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

class ValidationError(FoodShareError):
    status_code = 422

class InvalidStateError(FoodShareError):
    status_code = 409

class NotFoundError(FoodShareError):
    status_code = 404

class ForbiddenError(FoodShareError):
    status_code = 403

class ConflictError(FoodShareError):
    """Record changed underneath a read-modify-write (version mismatch)."""
    status_code = 409

class NoVolunteerAvailableError(FoodShareError):
    status_code = 409
