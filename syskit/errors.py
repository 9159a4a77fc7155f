"""Exception hierarchy for syskit."""


class SyskitError(Exception):
    """Base class for all syskit errors."""


class InvalidInput(SyskitError, ValueError):
    """The caller supplied a value that cannot be persisted."""


class BackendUnavailable(SyskitError):
    """A storage backend could not complete a read or write."""


class DecodeError(SyskitError, ValueError):
    """Stored content is not a valid encoded payload."""


class AllBackendsExhausted(SyskitError):
    def __init__(self, attempted):
        self.attempted = list(attempted)
        super().__init__(
            f"No storage backend accepted the write (tried: {', '.join(self.attempted) or 'nothing'})"
        )
