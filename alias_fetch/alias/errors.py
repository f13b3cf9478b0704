"""Error types for alias resolution."""


class AliasCreationError(Exception):
    """Raised when the instance refuses to create an alias.

    Alias creation failures are fatal for a resolve call and are never
    retried.
    """

    def __init__(self, status_code: int, target: str) -> None:
        """Initialize the error.

        Args:
            status_code: HTTP status returned by the alias endpoint.
            target: Logical path the alias was requested for.
        """
        self.status_code = status_code
        self.target = target
        super().__init__(f"Failed to create alias: {status_code}")
