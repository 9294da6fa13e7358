class StoreAdminError(Exception):
    """Base class for failures surfaced to the admin as a message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DocumentNotFound(StoreAdminError):
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class UploadError(StoreAdminError):
    """Upload service was unreachable, answered non-2xx, or answered success: false."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class WizardError(StoreAdminError):
    def __init__(self, step: int, message: str):
        super().__init__(message)
        self.step = step


class InvalidTransition(StoreAdminError):
    pass
