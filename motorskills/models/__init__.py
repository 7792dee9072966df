"""SQLAlchemy ORM models.

All models are imported here so that Alembic can discover them
via ``Base.metadata`` when generating migrations.
"""

from motorskills.models.assessment import Assessment, FmsScore, SmcScore  # noqa: F401
from motorskills.models.child import Child  # noqa: F401
from motorskills.models.invitation import ParentInvitation  # noqa: F401
from motorskills.models.profile import Profile  # noqa: F401
from motorskills.models.relationship import ParentChildRelationship  # noqa: F401
from motorskills.models.shared_link import SharedLink  # noqa: F401

__all__ = [
    "Assessment",
    "Child",
    "FmsScore",
    "ParentChildRelationship",
    "ParentInvitation",
    "Profile",
    "SharedLink",
    "SmcScore",
]
