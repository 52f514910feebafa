"""Exception types raised while writing a diagnostic bundle.

Every failure below the writer facade is one of these. The facade records the
message text and never lets them reach the caller.
"""


class BundleError(Exception):
    """Base class for bundle write failures."""


class KindResolutionError(BundleError):
    """The kind of an object could not be determined."""


class MissingIdentityError(KindResolutionError):
    """An object placed by identity does not expose a name."""


class MarshalError(BundleError):
    """A value could not be rendered as YAML."""


class BundleIOError(BundleError):
    """Directory creation, file creation, read or write failed."""
