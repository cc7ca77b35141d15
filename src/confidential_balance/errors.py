"""Exception hierarchy for confidential balance operations."""


class ConfidentialBalanceError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ConfidentialBalanceError, ValueError):
    """Invalid solver or decomposer parameters."""


class RangeError(ConfidentialBalanceError, ValueError):
    """A plaintext or chunk input does not fit its declared bit width."""


class InvalidPointError(ConfidentialBalanceError, ValueError):
    """Bytes that do not decode to a point of the prime-order subgroup."""


class NotInitializedError(ConfidentialBalanceError, RuntimeError):
    """A solver was used before its tables finished building."""


class DiscreteLogNotFoundError(ConfidentialBalanceError, LookupError):
    """The target point is not x*Base for any x covered by the solver.

    Raised both for values outside every configured table and for
    ciphertexts decrypted with the wrong key; the two are indistinguishable.
    """
