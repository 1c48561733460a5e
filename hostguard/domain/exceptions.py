"""Domain-specific exceptions following DDD principles."""


class HostGuardError(Exception):
    """Base exception for all hostguard errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MetricUnavailableError(HostGuardError):
    """Raised when a single platform counter cannot be read.

    Never escapes the estimator; the affected metric degrades to the sentinel.
    """

    def __init__(self, metric: str, reason: str = ""):
        super().__init__(
            f"Metric '{metric}' is unavailable" + (f": {reason}" if reason else ""),
            details={"metric": metric},
        )
        self.metric = metric
        self.reason = reason
        if reason:
            self.details["reason"] = reason


class TransientAnomalyError(HostGuardError):
    """Raised when a computation yields NaN or an out-of-range value."""

    def __init__(self, metric: str, value: float | None = None):
        super().__init__(
            f"Anomalous value for metric '{metric}': {value}", details={"metric": metric}
        )
        self.metric = metric
        self.value = value
        self.details["value"] = value


class InvalidConfigurationError(HostGuardError):
    """Raised when thresholds or settings are rejected."""

    pass


class ConfigurationError(InvalidConfigurationError):
    """Raised when configuration cannot be loaded from the environment."""

    pass
