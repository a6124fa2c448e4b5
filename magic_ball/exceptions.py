class ValidationError(Exception):
    """Inbound request carries a missing or malformed user identity."""


class StorageError(Exception):
    """The database could not complete the request. Nothing was committed."""


class GenerationFailure(Exception):
    """The text-generation call failed. Always recovered with a fallback text."""
