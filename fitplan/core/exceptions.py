class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class PreconditionFailedError(DomainError):
    """The user has not finished onboarding (profile or preferences missing)."""

    def __init__(self, message: str, code: str = "PRE_ONBOARDING_001", details: dict | None = None):
        super().__init__(code, message, details)


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class NoAlternativeFoundError(BusinessRuleError):
    def __init__(self, message: str = "No alternative exercise found", details: dict | None = None):
        super().__init__(message, code="BR_NO_ALTERNATIVE", details=details)


class EmbeddingError(DomainError):
    pass


class ProviderUnavailableError(EmbeddingError):
    def __init__(self, message: str = "No embedding provider available", details: dict | None = None):
        super().__init__("EMB_UNAVAILABLE_001", message, details)


class EmbeddingDimensionMismatchError(EmbeddingError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            "EMB_DIMENSION_001",
            f"Embedding has {actual} dimensions, expected {expected}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual
