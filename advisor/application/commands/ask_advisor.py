"""
AskAdvisorCommand.

Command to ask the advisor a question on behalf of an activated device.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class AskAdvisorCommand:
    """Command to ask the advisor a question."""

    license_key: str
    device_id: str
    question: str
    context: Dict[str, Any] = field(default_factory=dict)
