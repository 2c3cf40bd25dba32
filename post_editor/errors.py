class PostEditorError(Exception):
    """Base class for every error raised by the post editor backend."""


class InvalidPathError(PostEditorError):
    """Path is malformed or deeper than /{lang}/{slug}."""


class OperationNotAllowedError(PostEditorError):
    """Operation is never supported, e.g. mkdir or mv."""


class QueryError(PostEditorError):
    """A statement failed; the engine error is chained as __cause__."""


class DuplicateKeyError(QueryError):
    """A post already exists at (lang, slug)."""


class DecodeError(PostEditorError):
    """Save payload is not a well-formed field object."""


class DatabaseConnectionError(PostEditorError):
    """The backend has no usable database handle."""
