"""
Error taxonomy for fundpulse.

Every error raised on a request path derives from FundPulseError and carries
the HTTP status code the web layer should answer with.
"""


class FundPulseError(Exception):
    """Base class for all fundpulse errors."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class InvalidPeriod(FundPulseError):
    """Requested display period is not one of the recognized symbols."""

    status_code = 400

    def __init__(self, period):
        from fundpulse.periods import VALID_PERIODS
        super().__init__(
            f"Invalid period. Must be one of: {', '.join(VALID_PERIODS)}"
        )
        self.period = period


class InvalidRequest(FundPulseError):
    """A query or body parameter is missing or malformed."""

    status_code = 400


class FundNotFound(FundPulseError):
    """No fund with the given scheme code exists in the local store."""

    status_code = 404

    def __init__(self, scheme_code: str):
        super().__init__("Fund not found")
        self.scheme_code = scheme_code


class UpstreamError(FundPulseError):
    """The PulseDB provider is unavailable or answered with garbage."""

    status_code = 502


class UpstreamAuthFailure(UpstreamError):
    """Partner login did not yield a session token."""


class UpstreamRequestFailure(UpstreamError):
    """A PulseDB endpoint call failed."""

    def __init__(self, endpoint: str, message: str = ""):
        super().__init__(f"PulseDB request failed for {endpoint}: {message}")
        self.endpoint = endpoint


class DataUnavailable(FundPulseError):
    """Derived data (NAV history, returns) cannot be produced for a fund."""

    status_code = 502


class EmptySeries(DataUnavailable):
    """A NAV series had zero points after parsing or filtering."""


class NoDataAvailable(DataUnavailable):
    """The provider returned no NAV history at all."""
