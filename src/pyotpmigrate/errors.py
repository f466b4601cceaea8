from typing import Optional


class MigrationError(ValueError):
    """Base class for everything that can go wrong while decoding an export."""

    stage = None

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class MalformedUri(MigrationError):
    """The export string is not a URI, or carries no ``data`` parameter."""

    stage = 'uri'


class MalformedPayload(MigrationError):
    """The ``data`` blob cannot be turned into a migration payload."""

    stage = 'wire'

    def __init__(self, message: str, stage: Optional[str] = None, offset: Optional[int] = None):
        super().__init__(message, stage)
        self.offset = offset
