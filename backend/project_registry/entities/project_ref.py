"""
ProjectRef Entity - binds the CI system to a source repository.

A project reference carries everything needed to track a project
independent of the revision control system: where the code lives, how
often it is evaluated, who administers it, where alerts go, and the last
known consistency problem between the repository and the tracker.

Collection: project_ref
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, Field, field_validator

from project_registry.services.exceptions import ProjectRefValidationError

from .base import BaseEntity


class RepositoryErrorDetails(BaseModel):
    """Whether there is an invalid revision and, if so, the guessed merge base."""

    exists: bool = False
    invalid_revision: str = ""
    merge_base_revision: str = ""


class EmailAlertData(BaseModel):
    recipients: List[str] = Field(default_factory=list)


# provider name -> settings schema
_ALERT_SETTINGS_REGISTRY: Dict[str, Type[BaseModel]] = {
    "email": EmailAlertData,
}


def register_alert_settings(provider: str, model: Type[BaseModel]) -> None:
    """Register the settings schema used to parse a provider's alert settings."""
    _ALERT_SETTINGS_REGISTRY[provider] = model


class AlertConfig(BaseModel):
    """One alert delivery for a trigger, e.g. an e-mail to a list of recipients."""

    provider: str
    # Provider-specific delivery details, parsed by the provider at runtime
    settings: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("settings", mode="before")
    @classmethod
    def _null_settings(cls, value: Any) -> Any:
        return {} if value is None else value

    def get_settings_map(self) -> Dict[str, str]:
        return {key: f"{value}" for key, value in self.settings.items()}

    def typed_settings(self) -> Union[BaseModel, Dict[str, Any]]:
        """Settings parsed with the provider's registered schema, raw otherwise."""
        model = _ALERT_SETTINGS_REGISTRY.get(self.provider)
        if model is None:
            return dict(self.settings)
        return model.model_validate(self.settings)


class BuildVariant(BaseModel):
    name: str
    batch_time: Optional[int] = None


class ProjectRef(BaseEntity):
    """
    General information about a tracked project.

    ``identifier`` is the unique key and never changes once created, even
    if the repository or branch is renamed. ``tracked`` is maintained by
    reconciliation against the list of active projects.
    """

    identifier: str
    owner: str = Field(default="", alias="owner_name")
    repo: str = Field(default="", alias="repo_name")
    branch: str = Field(default="", alias="branch_name")
    repo_kind: str = ""
    enabled: bool = False
    private: bool = False
    batch_time: int = 0
    remote_path: str = ""
    display_name: str = ""
    local_config: str = ""
    deactivate_previous: bool = False
    # Whether the project is discoverable; false once its project file is gone
    tracked: bool = False

    # Users who are able to access the projects page
    admins: List[str] = Field(default_factory=list)

    # Trigger (e.g. "task-failed") -> alert deliveries processed for it
    alerts: Dict[str, List[AlertConfig]] = Field(
        default_factory=dict, alias="alert_settings"
    )

    repotracker_error: Optional[RepositoryErrorDetails] = None

    # Older documents store empty lists and maps as null
    @field_validator("admins", mode="before")
    @classmethod
    def _null_admins(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("alerts", mode="before")
    @classmethod
    def _null_alerts(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {trigger: configs or [] for trigger, configs in value.items()}
        return value

    def __str__(self) -> str:
        return self.identifier

    def get_batch_time(
        self, variant: Union[BuildVariant, int, None] = None
    ) -> int:
        """Batch time of a build variant when it overrides it, else the project's."""
        if isinstance(variant, BuildVariant):
            variant = variant.batch_time
        if variant is not None:
            return variant
        return self.batch_time

    def location(self, host: Optional[str] = None) -> str:
        """SSH hostname and path to the repository."""
        if not self.owner:
            raise ProjectRefValidationError(
                f"No owner in project ref: {self.identifier}",
                identifier=self.identifier,
                field="owner",
            )
        if not self.repo:
            raise ProjectRefValidationError(
                f"No repo in project ref: {self.identifier}",
                identifier=self.identifier,
                field="repo",
            )
        if host is None:
            from project_registry.config import settings

            host = settings.GIT_HOST
        return f"git@{host}:{self.owner}/{self.repo}.git"

    def upsert_fields(self) -> Dict[str, Any]:
        """Every recognized stored field except the identifier, keyed by stored name."""
        document = self.to_mongo()
        document.pop(ProjectRefKeys.IDENTIFIER, None)
        return document


def _field_key(name: str) -> str:
    field = ProjectRef.model_fields[name]
    return field.alias or name


class ProjectRefKeys:
    """Stored field names of ProjectRef, for building queries."""

    IDENTIFIER = _field_key("identifier")
    OWNER = _field_key("owner")
    REPO = _field_key("repo")
    BRANCH = _field_key("branch")
    REPO_KIND = _field_key("repo_kind")
    ENABLED = _field_key("enabled")
    PRIVATE = _field_key("private")
    BATCH_TIME = _field_key("batch_time")
    REMOTE_PATH = _field_key("remote_path")
    DISPLAY_NAME = _field_key("display_name")
    LOCAL_CONFIG = _field_key("local_config")
    DEACTIVATE_PREVIOUS = _field_key("deactivate_previous")
    TRACKED = _field_key("tracked")
    ADMINS = _field_key("admins")
    ALERTS = _field_key("alerts")
    REPOTRACKER_ERROR = _field_key("repotracker_error")
