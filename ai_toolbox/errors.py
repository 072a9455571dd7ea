"""Exception types for the workflow execution core.

Every failure the core can produce is one of these. The action runner and the
dependency resolver catch them and fold them into failed ExecutionResults, so
callers of `execute_workflow()` never see them raised.
"""

from typing import Optional


class ToolboxError(Exception):
    """Base exception for the toolbox core."""


class ConfigurationError(ToolboxError):
    """Missing or invalid provider/model/credential configuration.

    Raised before any network call is attempted.
    """


class ValidationError(ToolboxError):
    """Invalid runtime input: empty prompt, missing input file, bad definition."""


class CapabilityError(ToolboxError):
    """The selected provider model does not support the requested operation."""


class TransportError(ToolboxError):
    """Network or HTTP failure talking to a provider."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GraphError(ToolboxError):
    """Circular or missing dependency between workflows."""

    def __init__(self, message: str, *, path: Optional[list[str]] = None):
        super().__init__(message)
        self.path = list(path or [])
