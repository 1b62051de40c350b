"""
Error taxonomy for unit search and export
"""
from typing import List


class FilterValidationError(ValueError):
    """Search filters violated one or more domain constraints"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class StoreUnavailable(Exception):
    """The backing store could not be reached or a query failed"""


class ExportLimitExceeded(ValueError):
    """Requested export size is above the configured maximum"""

    def __init__(self, requested: int, maximum: int):
        self.requested = requested
        self.maximum = maximum
        super().__init__(f"Export limit exceeded. Maximum {maximum} records allowed")
