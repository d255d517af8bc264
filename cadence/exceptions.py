"""
cadence.exceptions - Custom exception classes.

All Cadence-specific exceptions inherit from CadenceError.
"""


class CadenceError(Exception):
    """Base exception for all Cadence errors."""

    pass


class ConfigError(CadenceError):
    """Configuration loading or validation error."""

    pass


class DecodeError(CadenceError):
    """Audio buffer is empty, corrupt, or uses an unsupported codec."""

    pass


class AnalysisError(CadenceError):
    """Delivery analysis error."""

    pass


class AnalysisCancelledError(AnalysisError):
    """Analysis was cancelled through its cancellation token."""

    pass


class ValidationError(CadenceError):
    """Data validation error."""

    pass


class DependencyError(CadenceError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")


class UnsupportedEnvironmentError(DependencyError):
    """Host lacks the decoding or resampling capability the input needs."""

    pass
