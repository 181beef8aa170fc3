#!/usr/bin/env python3
"""
KUBESHORT VOLUME REGISTRY - The Dispatcher
------------------------------------------
Maps the `vol_type` tag of a short PersistentVolume onto the codec for one
volume variant. Every variant exposes the same capability pair:

    decode(obj, selector) -> variant
    encode(variant)       -> MarshalledVolume

`obj` is the whole flat map (never mutated), `selector` is the compound
`vol_id` already split on ':'. The table is closed: an unknown tag is an
error, there is no fallback variant.

Author: KubeShort Team
Date: 2026-01-16
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from kubeshort.codec.fields import get_bool, get_optional_int, get_optional_string
from kubeshort.core.errors import EmptyUnion, InvalidSelector, UnrecognizedEnumValue, UnsupportedVariant
from kubeshort.core.models import (
    AwsEBSVolume,
    GcePDVolume,
    HostPathType,
    HostPathVolume,
    MarshalledVolume,
    VolumeSource,
)

VOLUME_TYPE_GCE_PD = "gce_pd"
VOLUME_TYPE_AWS_EBS = "aws_ebs"
VOLUME_TYPE_HOST_PATH = "hostpath"


@dataclass(frozen=True)
class VolumeCodec:
    """One registry entry: the tag, the variant class, and its codec pair."""
    tag: str
    kind: Type
    decode: Callable[[Mapping[str, Any], List[str]], VolumeSource]
    encode: Callable[[Any], MarshalledVolume]


def _disk_extra_fields(fs: Optional[str], partition: Optional[int], ro: bool) -> Dict[str, Any]:
    extra: Dict[str, Any] = {}
    if fs is not None:
        extra["fs"] = fs
    if partition is not None:
        extra["partition"] = partition
    if ro:
        extra["ro"] = True
    return extra


# --- gce_pd: "vol_id: <pd-name>" + fs/partition/ro ---

def decode_gce_pd(obj: Mapping[str, Any], selector: List[str]) -> GcePDVolume:
    if len(selector) != 1:
        raise InvalidSelector(selector, VOLUME_TYPE_GCE_PD, "1 (pd name)")
    return GcePDVolume(
        pd_name=selector[0],
        fs=get_optional_string(obj, "fs"),
        partition=get_optional_int(obj, "partition"),
        ro=get_bool(obj, "ro"),
    )


def encode_gce_pd(volume: GcePDVolume) -> MarshalledVolume:
    return MarshalledVolume(
        type=VOLUME_TYPE_GCE_PD,
        selector=[volume.pd_name],
        extra_fields=_disk_extra_fields(volume.fs, volume.partition, volume.ro),
    )


# --- aws_ebs: "vol_id: <volume-id>" + fs/partition/ro ---

def decode_aws_ebs(obj: Mapping[str, Any], selector: List[str]) -> AwsEBSVolume:
    if len(selector) != 1:
        raise InvalidSelector(selector, VOLUME_TYPE_AWS_EBS, "1 (volume id)")
    return AwsEBSVolume(
        volume_id=selector[0],
        fs=get_optional_string(obj, "fs"),
        partition=get_optional_int(obj, "partition"),
        ro=get_bool(obj, "ro"),
    )


def encode_aws_ebs(volume: AwsEBSVolume) -> MarshalledVolume:
    return MarshalledVolume(
        type=VOLUME_TYPE_AWS_EBS,
        selector=[volume.volume_id],
        extra_fields=_disk_extra_fields(volume.fs, volume.partition, volume.ro),
    )


# --- hostpath: "vol_id: <path>[:<type>]", selector only ---

def decode_host_path(obj: Mapping[str, Any], selector: List[str]) -> HostPathVolume:
    if not 1 <= len(selector) <= 2:
        raise InvalidSelector(selector, VOLUME_TYPE_HOST_PATH, "1 or 2 (path[:type])")

    path_type = None
    if len(selector) == 2:
        try:
            path_type = HostPathType(selector[1])
        except ValueError:
            raise UnrecognizedEnumValue(selector[1], "host path type")

    return HostPathVolume(path=selector[0], type=path_type)


def encode_host_path(volume: HostPathVolume) -> MarshalledVolume:
    selector = [volume.path]
    if volume.type is not None:
        if not isinstance(volume.type, HostPathType):
            raise UnrecognizedEnumValue(volume.type, "host path type")
        selector.append(volume.type.value)
    return MarshalledVolume(type=VOLUME_TYPE_HOST_PATH, selector=selector)


# Checked in this order on encode.
VOLUME_REGISTRY: Dict[str, VolumeCodec] = {
    codec.tag: codec for codec in (
        VolumeCodec(VOLUME_TYPE_GCE_PD, GcePDVolume, decode_gce_pd, encode_gce_pd),
        VolumeCodec(VOLUME_TYPE_AWS_EBS, AwsEBSVolume, decode_aws_ebs, encode_aws_ebs),
        VolumeCodec(VOLUME_TYPE_HOST_PATH, HostPathVolume, decode_host_path, encode_host_path),
    )
}


def decode_volume_source(obj: Mapping[str, Any], vol_type: str, selector: List[str]) -> VolumeSource:
    """Pure lookup by tag; variant errors propagate unchanged."""
    codec = VOLUME_REGISTRY.get(vol_type)
    if codec is None:
        raise UnsupportedVariant(vol_type)
    return codec.decode(obj, selector)


def encode_volume_source(source: Optional[VolumeSource]) -> MarshalledVolume:
    """Uses the first registry entry whose variant class matches the source."""
    if source is not None:
        for codec in VOLUME_REGISTRY.values():
            if isinstance(source, codec.kind):
                return codec.encode(source)
    raise EmptyUnion(source)
