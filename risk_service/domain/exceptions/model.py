"""Model store exceptions."""

from .base import DomainException


class ModelNotFoundException(DomainException):
    """Raised when a risk model cannot be found."""

    def __init__(self, model_id: str):
        super().__init__(
            message=f"Model not found: {model_id}",
            code="MODEL_NOT_FOUND",
        )
        self.model_id = model_id


class DuplicateModelException(DomainException):
    """Raised when registering a model whose id is already taken."""

    def __init__(self, model_id: str):
        super().__init__(
            message=f"Model already exists: {model_id}",
            code="DUPLICATE_MODEL",
        )
        self.model_id = model_id


class ModelNotScorableException(DomainException):
    """Raised when a model's lifecycle status does not allow scoring."""

    def __init__(self, model_id: str, status: str):
        super().__init__(
            message=f"Model {model_id} cannot be used for scoring in status {status}",
            code="MODEL_NOT_SCORABLE",
        )
        self.model_id = model_id
        self.status = status
