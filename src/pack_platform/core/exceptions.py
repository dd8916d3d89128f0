"""Custom exceptions for Pack Platform."""

from typing import Optional, Sequence


class PackPlatformError(Exception):
    """Base exception for all platform errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class InvocationError(PackPlatformError):
    """The external pack tool exited non-zero or could not be launched."""

    def __init__(
        self,
        message: str,
        args: Sequence[str] = (),
        returncode: Optional[int] = None,
        output: bytes = b"",
    ):
        super().__init__(message, code="invocation_failed")
        self.command_args = list(args)
        self.returncode = returncode
        self.output = output

    @property
    def output_text(self) -> str:
        return self.output.decode("utf-8", errors="replace")


class OutputShapeError(PackPlatformError):
    """Tool output did not have the expected table shape."""

    def __init__(self, message: str, code: str = "unexpected_output"):
        super().__init__(message, code=code)


class PackNotFoundError(OutputShapeError):
    """Status output had no row for the requested pack deployment."""

    def __init__(self, message: str):
        super().__init__(message, code="pack_not_found")


class StateError(PackPlatformError):
    """Persisted resource state is corrupt or unsupported."""

    def __init__(self, message: str):
        super().__init__(message, code="invalid_state")


class InternalError(PackPlatformError):
    """Internal invariant violated."""

    def __init__(self, message: str):
        super().__init__(message, code="internal")


class ConfigurationError(PackPlatformError):
    """Configuration error."""

    def __init__(self, message: str):
        super().__init__(message, code="invalid_config")
