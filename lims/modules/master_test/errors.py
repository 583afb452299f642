class MasterTestUploadError(Exception):
    """Base class for failures of a master-test CSV upload."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MasterTestUploadError):
    """The upload was rejected before anything was parsed or written."""

    status_code = 400


class ParseError(MasterTestUploadError):
    """The CSV stream could not be read. Raised before any catalog mutation."""


class ReconciliationError(MasterTestUploadError):
    """Identity lookup or assignment failed. Raised before the catalog is cleared."""


class PersistenceError(MasterTestUploadError):
    """Clearing or repopulating the catalog failed.

    The clear and the upsert are two separate store calls, so by the time this
    is raised the catalog may already be empty or only partly repopulated.
    """
