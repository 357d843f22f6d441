"""Error taxonomy for workspace operations.

Every failure a caller can see derives from WorkspaceError so the CLI can
report it with one handler. Aborted is kept separate from real failures so
a declined prompt does not print as an error.
"""


class WorkspaceError(Exception):
    pass


class AlreadyExistsError(WorkspaceError):
    pass


class NotInitializedError(WorkspaceError):
    def __init__(self, message: str = "workspace is not configured"):
        super().__init__(message)


class NotFoundError(WorkspaceError):
    pass


class NotTrackedError(WorkspaceError):
    pass


class EncryptError(WorkspaceError):
    pass


class DecryptError(WorkspaceError):
    pass


class PassphraseError(WorkspaceError):
    pass


class WorkspaceIOError(WorkspaceError):
    pass


class StoreCorruptError(WorkspaceError):
    pass


class Aborted(WorkspaceError):
    def __init__(self, message: str = "aborted"):
        super().__init__(message)
