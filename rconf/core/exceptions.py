__all__ = [
    "BaseError",
    "BadRequestError",
    "ConflictError",
    "DanglingClusterReferenceError",
    "DocumentValidationError",
    "DuplicateComponentError",
    "DuplicateComponentIdError",
    "IllegalPhaseTransitionError",
    "InternalError",
    "LeaseError",
    "LeaseHeldByOtherError",
    "LeaseLostError",
    "LoadError",
    "LockedError",
    "MigrationGapError",
    "NotFoundError",
    "NotSupportedError",
    "UnavailableError",
    "UnsupportedSchemaVersionError",
    "ValidationError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class NotFoundError(BaseError):
    status_code = 404


class ConflictError(BaseError):
    """Conditional write lost a race.

    The caller may retry the whole read-modify-write cycle.
    """

    status_code = 409


class NotSupportedError(BaseError):
    status_code = 415


class LockedError(BaseError):
    status_code = 423


class UnavailableError(BaseError):
    """Backing store could not be reached."""

    status_code = 503


class InternalError(BaseError):
    status_code = 500


class LoadError(InternalError):
    pass


class LeaseError(LockedError):
    pass


class LeaseHeldByOtherError(LeaseError):
    """A live lease is held by another identity."""

    holder: str | None

    def __init__(self, message: str, holder: str | None = None):
        super().__init__(message)
        self.holder = holder


class LeaseLostError(LeaseError):
    """The lease was taken over or removed since it was acquired."""


class ValidationError(BadRequestError):
    pass


class DuplicateComponentError(ValidationError):
    pass


class DuplicateComponentIdError(ValidationError):
    pass


class DanglingClusterReferenceError(ValidationError):
    pass


class IllegalPhaseTransitionError(ValidationError):
    pass


class DocumentValidationError(ValidationError):
    """Document failed whole-document validation.

    ``violations`` holds every individual violation found.
    """

    violations: list[ValidationError]

    def __init__(self, violations: list[ValidationError]):
        super().__init__(
            "; ".join(str(violation) for violation in violations)
        )
        self.violations = list(violations)


class MigrationGapError(InternalError):
    """No registered migration accepts an intermediate schema version."""


class UnsupportedSchemaVersionError(InternalError):
    """Stored schema version is newer than this release understands."""
