"""
Adapter errors

None of these are process-fatal; the orchestrator records the message on the
run and moves on.
"""


class AdapterError(Exception):
    """Base error for agent adapters."""
    pass


class MissingCredentialError(AdapterError):
    """The agent's API key is not configured."""
    pass


class AdapterTimeoutError(AdapterError):
    """The request did not complete within the adapter's timeout."""
    pass


class AdapterNetworkError(AdapterError):
    """The request failed below HTTP (DNS, connection, TLS, ...)."""
    pass


class AdapterHTTPError(AdapterError):
    """The provider answered with a non-2xx status."""

    def __init__(self, label: str, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"{label} API error: {status} {body}")


class UnknownAgentError(ValueError):
    """No adapter is registered for the agent kind."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown agent: {kind}")
