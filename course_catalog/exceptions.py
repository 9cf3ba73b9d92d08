class CatalogError(Exception):
    """Base class for failures that map onto an HTTP-equivalent status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreError(CatalogError):
    """The object store rejected or failed a read."""

    status_code = 502


class ListingError(StoreError):
    """A bucket or prefix listing failed."""


class SigningError(StoreError):
    """A signed URL could not be issued for an object key."""


class NotFoundError(CatalogError):
    """The requested object is absent at every candidate path."""

    status_code = 404


class ConversionError(CatalogError):
    """A subtitle block could not be converted."""

    status_code = 422


class BadRequestError(CatalogError):
    """The request is missing a required value."""

    status_code = 400
