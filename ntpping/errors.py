"""
Error types for ntpping

Every error carries the address it concerns so the CLI can print
``error from <address>: <message>`` without extra bookkeeping.
"""


class NtpPingError(Exception):
    """Base class for all ntpping failures"""

    def __init__(self, address: str, message: str):
        super().__init__(message)
        self.address = address
        self.message = message

    def diagnostic(self) -> str:
        """Operator-facing one-line description"""
        return f"error from {self.address}: {self.message}"


class ResolutionError(NtpPingError):
    """Initial address could not be resolved"""


class QueryError(NtpPingError):
    """Network, protocol or timeout failure while querying a server"""


class FormatError(NtpPingError):
    """Output template could not be rendered"""


class InvalidChainAddress(NtpPingError):
    """Reference reported by a stratum > 1 server is not a literal IP"""

    def __init__(self, address: str, message: str = "invalid ip address"):
        super().__init__(address, message)
