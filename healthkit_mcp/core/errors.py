"""Error types raised along the query path"""
from typing import Optional


class HealthKitError(Exception):
    """Base class for all errors surfaced to tool callers"""

    message = "Health data request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class InvalidDateFormatError(HealthKitError):
    """Missing, unparsable or calendar-invalid date argument"""

    message = "Invalid date format. Expected YYYY-MM-DD"


class UnknownOperationError(HealthKitError):
    """Tool name not in the catalog"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ProviderError(HealthKitError):
    """Failure reported by the health data provider"""

    message = "Health data query failed"


class HealthDataNotAvailableError(ProviderError):
    message = "Health data is not available on this device"


class AuthorizationDeniedError(ProviderError):
    message = "Health data authorization was denied"


class QueryExecutionError(ProviderError):
    """Storage-level failure while running a query"""
