class UnauthorizedError(Exception):
    """Raised when a restart request carries a wrong or missing token."""


class ContainerRuntimeError(RuntimeError):
    """Raised when the container engine rejects or fails an operation."""
