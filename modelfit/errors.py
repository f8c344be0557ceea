"""Error hierarchy for modelfit.

Incompatible machines are never errors: the evaluator reports them as data in
a Verdict. These exceptions cover inputs that could not be obtained or parsed.
"""

from typing import Optional


class ModelFitError(Exception):
    """Base exception for all modelfit errors."""

    pass


class ProfileError(ModelFitError):
    """Raised when a requirements or capability document is malformed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.source = source
        self.field = field


class SystemDetectionError(ModelFitError):
    """Raised when no usable capability profile could be obtained.

    Callers must not evaluate anything after this; it is a different failure
    from an incompatible machine.
    """

    kind = "system_detection"

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class RegistryError(ModelFitError):
    """Raised when a model registry file cannot be loaded."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class UnknownModelError(ModelFitError):
    """Raised by strict registry lookups for an id that is not registered."""

    kind = "model_definition"

    def __init__(self, model_id: str):
        super().__init__(f"Unknown model: {model_id}")
        self.model_id = model_id
