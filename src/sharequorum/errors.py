"""
Error kinds raised while decoding shares and reconstructing a secret.

Every error derives from SecretRecoveryError so callers (the CLI in
particular) can report any failure of a reconstruction run uniformly.
Where a built-in exception has the same meaning, the error also derives
from it, so ``except ValueError`` or ``except ZeroDivisionError`` keep
working for code that does not know about this module.
"""


class SecretRecoveryError(Exception):
    """Base class for all reconstruction failures."""


class InvalidDigitError(SecretRecoveryError, ValueError):
    """A character is not a valid digit in the stated base."""


class InvalidBaseError(SecretRecoveryError, ValueError):
    """A share declares a base outside [2, 36]."""


class DivideByZeroError(SecretRecoveryError, ZeroDivisionError):
    """A rational was built with, or divided by, zero."""


class InsufficientSharesError(SecretRecoveryError):
    """Fewer shares are available than the reconstruction threshold."""


class NoConsensusError(SecretRecoveryError):
    """Enumeration produced no candidate secret at all."""


class InvalidShareSetError(SecretRecoveryError, ValueError):
    """The share set itself is malformed (e.g. duplicate x-coordinates)."""


class ShareFileError(SecretRecoveryError):
    """The share document could not be read or does not follow the schema."""
