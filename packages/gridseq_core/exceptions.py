"""Custom exceptions for Gridseq"""


class GridseqError(Exception):
    """Base exception for all Gridseq errors"""
    pass


class ConfigurationError(GridseqError, KeyError):
    """Unknown tonic/scale name or malformed scale tables.

    Raised for programmer or configuration mistakes; callers are not
    expected to recover from it at runtime.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class AudioUnavailableError(GridseqError):
    """The audio pipeline could not be created (fatal, not retried)"""
    pass


class ToneBankReleasedError(GridseqError):
    """A tone bank was used after its voices were released"""
    pass
