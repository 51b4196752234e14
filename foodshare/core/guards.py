from pydantic import ValidationError as PydanticValidationError

from foodshare.core.errors import ForbiddenError, ValidationError

def ensure_role(user, role: str):
    if user.role != role:
        raise ForbiddenError(f"Only {role} users can do this")

def parse_or_reject(model, value, what: str):
    """Validate ``value`` into ``model``, reporting bad fields as a ValidationError."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in e.errors()})
        raise ValidationError(f"Invalid {what}: {', '.join(fields)}") from e
