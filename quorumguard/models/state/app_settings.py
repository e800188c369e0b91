"""Operator settings models."""

from pydantic import BaseModel, ConfigDict, Field

from quorumguard.constants.defaults import (
    COMMAND_TIMEOUT_DEFAULT,
    REQUEST_TIMEOUT_DEFAULT,
    REQUEUE_DELAY_DEFAULT,
    WATCH_RESTART_DELAY_DEFAULT,
    WORKER_COUNT_DEFAULT,
)
from quorumguard.constants.limits import MAX_WORKERS, MIN_WORKERS
from quorumguard.constants.values import (
    MON_APP_NAME,
    MON_PDB_NAME,
    OSD_APP_NAME,
)


class OperatorSettings(BaseModel):
    """Operator settings model with validation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Cluster scope
    namespace: str | None = None  # None watches all namespaces
    context: str | None = None

    # Naming conventions
    mon_pdb_name: str = MON_PDB_NAME
    mon_app_label: str = MON_APP_NAME
    osd_app_label: str = OSD_APP_NAME

    # kubectl
    request_timeout: str = REQUEST_TIMEOUT_DEFAULT
    command_timeout_seconds: int = Field(default=COMMAND_TIMEOUT_DEFAULT, ge=1)

    # Loop
    worker_count: int = Field(default=WORKER_COUNT_DEFAULT, ge=MIN_WORKERS, le=MAX_WORKERS)
    requeue_delay_seconds: float = Field(default=REQUEUE_DELAY_DEFAULT, ge=0)
    watch_restart_delay_seconds: float = Field(default=WATCH_RESTART_DELAY_DEFAULT, ge=0)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""
