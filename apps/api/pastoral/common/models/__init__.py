"""Models package - re-exports every model and enum.

Models are organized into:
- base: Base class, metadata, and enums
- iam: pastoral members (users)
- baptism: baptisms and ceremony scales
- finance: finance transactions
- activities: meetings, events, requests, formations, communications
- system: uploads registry and config key-values
"""

from __future__ import annotations

from pastoral.common.models.base import (
    Base,
    metadata,
    NAMING_CONVENTION,
    # Enums
    UserRole,
    MemberStatus,
    BaptismStatus,
    Gender,
    AgeGroup,
    PresenceStatus,
    TransactionType,
    RequestType,
    Urgency,
)

from pastoral.common.models.iam import User

from pastoral.common.models.baptism import (
    Baptism,
    Schedule,
)

from pastoral.common.models.finance import FinanceTransaction

from pastoral.common.models.activities import (
    Meeting,
    Event,
    MemberRequest,
    Formation,
    Communication,
)

from pastoral.common.models.system import (
    Upload,
    Config,
)

__all__ = [
    # Base
    "Base",
    "metadata",
    "NAMING_CONVENTION",
    # Enums
    "UserRole",
    "MemberStatus",
    "BaptismStatus",
    "Gender",
    "AgeGroup",
    "PresenceStatus",
    "TransactionType",
    "RequestType",
    "Urgency",
    # Models
    "User",
    "Baptism",
    "Schedule",
    "FinanceTransaction",
    "Meeting",
    "Event",
    "MemberRequest",
    "Formation",
    "Communication",
    "Upload",
    "Config",
]
