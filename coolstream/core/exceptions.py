"""
Error Taxonomy
Exceptions shared by the stores, the catalog proxy and the catalog client
"""
from typing import Optional


class CoolStreamError(Exception):
    """Base class for all application errors"""


class ValidationError(CoolStreamError):
    """Caller supplied missing or malformed input (HTTP 400)"""


class UpstreamError(CoolStreamError):
    """Metadata provider failed or was unreachable (HTTP 500)"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class StorageError(CoolStreamError):
    """Key-value store failed (quota, connection, conflicting writers)"""


class FetchError(CoolStreamError):
    """Client-side failure calling a proxy endpoint"""

    def __init__(self, operation: str, status_code: Optional[int] = None):
        detail = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Failed to {operation}{detail}")
        self.operation = operation
        self.status_code = status_code
