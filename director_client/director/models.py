"""
Director models.

Wire schemas (pydantic) describe what the director sends; domain types
(dataclasses) describe what callers receive. Wire field names do not leave
the client layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Transport
# =============================================================================

@dataclass(frozen=True)
class RawResponse:
    """Status, headers and (possibly empty) buffered body of one exchange."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


# =============================================================================
# Orphaned VMs
# =============================================================================

class OrphanedVMResponse(BaseModel):
    """Wire shape of one entry of GET /orphaned_vms."""

    model_config = ConfigDict(extra="ignore")

    az: Optional[str] = None
    cid: str
    # null is accepted and read as empty
    deployment_name: Optional[str] = None
    ip_addresses: Optional[List[str]] = None
    instance_name: Optional[str] = None
    orphaned_at: str


@dataclass(frozen=True)
class OrphanedVM:
    """A VM the director no longer tracks in any deployment."""

    cid: str
    deployment_name: str
    instance_name: str
    az_name: Optional[str]
    ip_addresses: List[str]
    orphaned_at: datetime


# =============================================================================
# Clean up
# =============================================================================

class CleanableRelease(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    versions: List[str] = Field(default_factory=list)


class CleanUp(BaseModel):
    """
    Summary of what a cleanup removes.

    Populated by the dry-run preview only; a committed cleanup returns the
    empty value.
    """

    model_config = ConfigDict(extra="allow")

    releases: List[CleanableRelease] = Field(default_factory=list)
    stemcells: List[Dict[str, Any]] = Field(default_factory=list)
    compiled_packages: List[Dict[str, Any]] = Field(default_factory=list)
    orphaned_disks: List[Dict[str, Any]] = Field(default_factory=list)
    orphaned_vms: List[Dict[str, Any]] = Field(default_factory=list)
    exported_releases: List[str] = Field(default_factory=list)
    dns_blobs: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not any((
            self.releases,
            self.stemcells,
            self.compiled_packages,
            self.orphaned_disks,
            self.orphaned_vms,
            self.exported_releases,
            self.dns_blobs,
        ))


# =============================================================================
# Certificates
# =============================================================================

class CertificateExpiryInfo(BaseModel):
    """Expiry metadata for one certificate the director uses."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    path: str = Field(alias="certificate_path")
    expiry: str
    days_left: int


# =============================================================================
# Tasks
# =============================================================================

class TaskState(str, Enum):
    """Director task lifecycle states."""

    QUEUED = "queued"
    PROCESSING = "processing"
    CANCELLING = "cancelling"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"
    TIMEOUT = "timeout"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES

    @property
    def is_success(self) -> bool:
        return self is TaskState.DONE


_TERMINAL_STATES = frozenset({
    TaskState.DONE,
    TaskState.ERROR,
    TaskState.CANCELLED,
    TaskState.TIMEOUT,
})


class Task(BaseModel):
    """Director task as returned by GET /tasks/<id>."""

    model_config = ConfigDict(extra="ignore")

    id: int
    state: TaskState
    description: str = ""
    timestamp: Optional[int] = None
    started_at: Optional[int] = None
    result: Optional[str] = None
    user: str = ""
    deployment: Optional[str] = None
    context_id: Optional[str] = None
