"""Database entity models - represents the actual structure stored in MongoDB"""

from .base import BaseEntity, PyObjectId, validate_object_id
from .project_ref import (
    AlertConfig,
    BuildVariant,
    EmailAlertData,
    ProjectRef,
    ProjectRefKeys,
    RepositoryErrorDetails,
    register_alert_settings,
)

__all__ = [
    # Base
    "BaseEntity",
    "PyObjectId",
    "validate_object_id",
    # Project references
    "AlertConfig",
    "BuildVariant",
    "EmailAlertData",
    "ProjectRef",
    "ProjectRefKeys",
    "RepositoryErrorDetails",
    "register_alert_settings",
]
