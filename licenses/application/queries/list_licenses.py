"""
Administrative license queries.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class ListLicensesQuery:
    """Query to search or page through licenses, newest first."""

    search: Optional[str] = None
    limit: int = 50
    offset: int = 0


@dataclass
class GetLicenseDetailQuery:
    """Query for one license with its activations."""

    license_id: uuid.UUID
