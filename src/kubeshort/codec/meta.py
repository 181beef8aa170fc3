#!/usr/bin/env python3
"""
KUBESHORT METADATA CODEC
------------------------
Structural field mapping between PersistentVolumeMeta and its flat map.
Keys are lower-case and underscore-separated; keys the metadata does not
own (vol_type, vol_id, variant fields) are ignored on decode. Empty values
are left out on encode.

Author: KubeShort Team
Date: 2026-01-16
"""

from typing import Any, Dict, Mapping, Optional

from kubeshort.codec.access_modes import access_modes_from_string, access_modes_to_string
from kubeshort.codec.fields import get_object, get_optional_string, get_quantity, get_string_map
from kubeshort.core.errors import ExpectedObject, MissingOrInvalidField, UnrecognizedEnumValue
from kubeshort.core.models import ObjectReference, PersistentVolumeMeta, PersistentVolumeStatus, ReclaimPolicy

# Python attribute -> wire key for the claim reference (core/v1 naming)
CLAIM_KEYS = {
    "kind": "kind",
    "namespace": "namespace",
    "name": "name",
    "uid": "uid",
    "api_version": "apiVersion",
    "resource_version": "resourceVersion",
    "field_path": "fieldPath",
}
STATUS_KEYS = ("phase", "message", "reason")


def _put(obj: Dict[str, Any], key: str, value: Any):
    """Go-style omitempty."""
    if value is None or value == "" or value == {} or value == []:
        return
    obj[key] = value


def _decode_claim(raw: Optional[Mapping[str, Any]]) -> Optional[ObjectReference]:
    if raw is None:
        return None
    return ObjectReference(**{
        attr: get_optional_string(raw, key) for attr, key in CLAIM_KEYS.items()
    })


def _encode_claim(claim: ObjectReference) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for attr, key in CLAIM_KEYS.items():
        _put(obj, key, getattr(claim, attr))
    return obj


def _decode_status(raw: Optional[Mapping[str, Any]]) -> Optional[PersistentVolumeStatus]:
    if raw is None:
        return None
    return PersistentVolumeStatus(**{key: get_optional_string(raw, key) for key in STATUS_KEYS})


def _encode_status(status: PersistentVolumeStatus) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for key in STATUS_KEYS:
        _put(obj, key, getattr(status, key))
    return obj


def _decode_reclaim(obj: Mapping[str, Any]) -> Optional[ReclaimPolicy]:
    value = get_optional_string(obj, "reclaim")
    if value is None or value == "":
        return None
    try:
        return ReclaimPolicy(value)
    except ValueError:
        raise UnrecognizedEnumValue(value, "reclaim policy")


def decode_meta(obj: Any) -> PersistentVolumeMeta:
    if not isinstance(obj, Mapping):
        raise ExpectedObject(obj)

    modes = obj.get("modes")
    if modes is not None and not isinstance(modes, str):
        raise MissingOrInvalidField(modes, "modes", "string")

    return PersistentVolumeMeta(
        version=get_optional_string(obj, "version"),
        cluster=get_optional_string(obj, "cluster"),
        name=get_optional_string(obj, "name"),
        namespace=get_optional_string(obj, "namespace"),
        labels=get_string_map(obj, "labels"),
        annotations=get_string_map(obj, "annotations"),
        storage=get_quantity(obj, "storage"),
        access_modes=access_modes_from_string(modes) if modes is not None else [],
        claim=_decode_claim(get_object(obj, "claim")),
        reclaim=_decode_reclaim(obj),
        storage_class=get_optional_string(obj, "storage_class"),
        mount_options=get_optional_string(obj, "mount_options"),
        status=_decode_status(get_object(obj, "status")),
    )


def encode_meta(meta: PersistentVolumeMeta) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    _put(obj, "version", meta.version)
    _put(obj, "cluster", meta.cluster)
    _put(obj, "name", meta.name)
    _put(obj, "namespace", meta.namespace)
    _put(obj, "labels", dict(meta.labels or {}))
    _put(obj, "annotations", dict(meta.annotations or {}))
    _put(obj, "storage", meta.storage)
    _put(obj, "modes", access_modes_to_string(meta.access_modes))
    if meta.claim is not None:
        obj["claim"] = _encode_claim(meta.claim)
    if meta.reclaim is not None:
        if not isinstance(meta.reclaim, ReclaimPolicy):
            raise UnrecognizedEnumValue(meta.reclaim, "reclaim policy")
        obj["reclaim"] = meta.reclaim.value
    _put(obj, "storage_class", meta.storage_class)
    _put(obj, "mount_options", meta.mount_options)
    if meta.status is not None:
        obj["status"] = _encode_status(meta.status)
    return obj
