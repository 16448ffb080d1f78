"""Error types shared by the detector, the fixer and the host layers."""


class DictViewsError(Exception):
    """Base class for dict-views-linter errors."""


class FixerInconsistencyError(DictViewsError):
    """A Finding and the tree it is applied to have drifted apart.

    Raised when the fixer cannot re-locate the matched invocation or when the
    Finding's view payload is missing or malformed. Never a user diagnostic.
    """


class ConfigurationError(DictViewsError):
    """A [tool.dict-views] value cannot be used."""
