#!/usr/bin/env python3
"""
KUBESHORT CORE MODELS
---------------------
Defines the typed structures behind the short PersistentVolume format.
A PersistentVolume is split into two halves: the metadata record and exactly
one volume source. On the wire both halves live side by side in one flat map.

Author: KubeShort Team
Date: 2026-01-16
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class AccessMode(str, Enum):
    """Kubernetes PersistentVolumeAccessMode values."""
    READ_ONLY_MANY = "ReadOnlyMany"
    READ_WRITE_MANY = "ReadWriteMany"
    READ_WRITE_ONCE = "ReadWriteOnce"


class ReclaimPolicy(str, Enum):
    RECYCLE = "recycle"
    DELETE = "delete"
    RETAIN = "retain"


class HostPathType(str, Enum):
    DIRECTORY_OR_CREATE = "dir-or-create"
    DIRECTORY = "dir"
    FILE_OR_CREATE = "file-or-create"
    FILE = "file"
    SOCKET = "socket"
    CHAR_DEVICE = "char-dev"
    BLOCK_DEVICE = "block-dev"


@dataclass
class ObjectReference:
    """Reference to the claim bound to the volume (core/v1 ObjectReference)."""
    kind: Optional[str] = None
    namespace: Optional[str] = None
    name: Optional[str] = None
    uid: Optional[str] = None
    api_version: Optional[str] = None
    resource_version: Optional[str] = None
    field_path: Optional[str] = None


@dataclass
class PersistentVolumeStatus:
    phase: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class PersistentVolumeMeta:
    """
    Everything about a PersistentVolume that is not its backing store.
    Owns none of the volume source fields.
    """
    version: Optional[str] = None
    cluster: Optional[str] = None
    name: Optional[str] = None
    namespace: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)

    storage: Optional[str] = None           # Quantity, e.g. "10Gi"
    access_modes: List[AccessMode] = field(default_factory=list)
    claim: Optional[ObjectReference] = None
    reclaim: Optional[ReclaimPolicy] = None
    storage_class: Optional[str] = None

    # comma-separated list of options
    mount_options: Optional[str] = None

    status: Optional[PersistentVolumeStatus] = None


@dataclass
class GcePDVolume:
    pd_name: str
    fs: Optional[str] = None
    partition: Optional[int] = None
    ro: bool = False


@dataclass
class AwsEBSVolume:
    volume_id: str
    fs: Optional[str] = None
    partition: Optional[int] = None
    ro: bool = False


@dataclass
class HostPathVolume:
    path: str
    type: Optional[HostPathType] = None


VolumeSource = Union[GcePDVolume, AwsEBSVolume, HostPathVolume]


@dataclass
class MarshalledVolume:
    """
    The output of a variant's encode step: its tag, the selector tokens that
    make up the compound identifier, and any fields it surfaces at top level.
    """
    type: str
    selector: List[str] = field(default_factory=list)
    extra_fields: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PersistentVolume:
    meta: PersistentVolumeMeta = field(default_factory=PersistentVolumeMeta)
    source: Optional[VolumeSource] = None
