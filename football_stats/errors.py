from typing import Optional


class APIError(Exception):
    """Unified error class for all external API clients."""

    def __init__(self, source: str, code: str, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "code": self.code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }


class TransportError(APIError):
    """Upstream call failed: non-2xx status, timeout, connection or decode error."""

    def __init__(
        self,
        source: str,
        code: str,
        message: str,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(source, code, message, details)
        self.status_code = status_code

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.status_code is not None:
            data["status_code"] = self.status_code
        return data


class AggregationError(Exception):
    """A league's standings could not be retrieved; aborts the whole aggregation."""

    def __init__(self, message: str, league: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.league = league

    def to_dict(self) -> dict:
        data = {"source": "Aggregation", "code": "STANDINGS_UNAVAILABLE", "message": self.message}
        if self.league:
            data["league"] = self.league
        cause = self.__cause__
        if isinstance(cause, APIError):
            data["details"] = cause.to_dict()
        elif cause is not None:
            data["details"] = str(cause)
        return data


class PerformanceDataError(Exception):
    """Performance history could not be persisted for a user."""
