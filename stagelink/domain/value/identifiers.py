"""Strongly typed identifiers for Stagelink domain entities.

Account ids are the primary provider's subject id, so they are opaque
strings rather than UUIDs we mint ourselves.
"""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", str)
RiskRecordId = NewType("RiskRecordId", UUID)
ClientContextId = NewType("ClientContextId", str)
