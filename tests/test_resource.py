#!/usr/bin/env python3
"""
KUBESHORT TEST SUITE - Resource Merge & Split
---------------------------------------------
Verifies that the flat wire object is split into metadata + volume source
on decode and merged back (metadata last) on encode.

Author: KubeShort Team
Date: 2026-01-16
"""

import json

import pytest

from kubeshort.codec import resource
from kubeshort.codec.resource import (
    decode_persistent_volume,
    decode_wrapped,
    dumps,
    encode_persistent_volume,
    encode_wrapped,
    loads,
    merge_flat_objects,
)
from kubeshort.core.errors import (
    EmptyUnion,
    ExpectedObject,
    InvalidSelector,
    MalformedCompactValue,
    MissingOrInvalidField,
    UnrecognizedEnumValue,
    UnsupportedVariant,
)
from kubeshort.core.models import (
    AccessMode,
    AwsEBSVolume,
    GcePDVolume,
    HostPathType,
    HostPathVolume,
    MarshalledVolume,
    ObjectReference,
    PersistentVolume,
    PersistentVolumeMeta,
    PersistentVolumeStatus,
    ReclaimPolicy,
)

FULL_META = PersistentVolumeMeta(
    version="v1",
    cluster="prod-east",
    name="pv0003",
    namespace="storage",
    labels={"tier": "db"},
    annotations={"owner": "platform"},
    storage="5Gi",
    access_modes=[AccessMode.READ_WRITE_ONCE, AccessMode.READ_ONLY_MANY],
    claim=ObjectReference(kind="PersistentVolumeClaim", namespace="default", name="data-claim", uid="1234",
                          api_version="v1", resource_version="4711", field_path="spec.volumeName"),
    reclaim=ReclaimPolicy.RECYCLE,
    storage_class="slow",
    mount_options="hard,nfsvers=4.1",
    status=PersistentVolumeStatus(phase="Failed", message="recycler pod failed", reason="RecycleFailed"),
)

SAMPLE_VOLUMES = [
    PersistentVolume(meta=FULL_META, source=GcePDVolume(pd_name="pd-1", fs="ext4", partition=2, ro=True)),
    PersistentVolume(meta=FULL_META, source=AwsEBSVolume(volume_id="vol-0abc", fs="xfs")),
    PersistentVolume(meta=PersistentVolumeMeta(name="local"), source=HostPathVolume(path="/data", type=HostPathType.DIRECTORY)),
    PersistentVolume(source=HostPathVolume(path="/mnt/disk")),
    PersistentVolume(meta=PersistentVolumeMeta(claim=ObjectReference(), status=PersistentVolumeStatus()),
                     source=HostPathVolume(path="/d")),
]


@pytest.mark.parametrize("pv", SAMPLE_VOLUMES)
def test_round_trip(pv):
    """
    ROUND-TRIP TEST: decode(encode(pv)) reproduces every field.
    """
    assert decode_persistent_volume(encode_persistent_volume(pv)) == pv
    assert loads(dumps(pv)) == pv


def test_hostpath_scenario():
    pv = loads('{"vol_type":"hostpath","vol_id":"/data","modes":"ro,rw-once"}')

    assert pv.source == HostPathVolume(path="/data")
    assert pv.meta.access_modes == [AccessMode.READ_ONLY_MANY, AccessMode.READ_WRITE_ONCE]

    assert json.loads(dumps(pv)) == {"vol_type": "hostpath", "vol_id": "/data", "modes": "ro,rw-once"}


def test_flat_object_layout():
    obj = encode_persistent_volume(SAMPLE_VOLUMES[0])

    assert obj["vol_type"] == "gce_pd"
    assert obj["vol_id"] == "pd-1"
    assert obj["fs"] == "ext4"
    assert obj["partition"] == 2
    assert obj["ro"] is True
    assert obj["modes"] == "rw-once,ro"
    assert obj["reclaim"] == "recycle"
    assert obj["claim"] == {"kind": "PersistentVolumeClaim", "namespace": "default",
                            "name": "data-claim", "uid": "1234", "apiVersion": "v1",
                            "resourceVersion": "4711", "fieldPath": "spec.volumeName"}
    assert obj["status"] == {"phase": "Failed", "message": "recycler pod failed", "reason": "RecycleFailed"}
    # flat: no nested source or metadata objects
    assert "source" not in obj and "meta" not in obj


def test_empty_metadata_is_omitted():
    obj = encode_persistent_volume(PersistentVolume(source=AwsEBSVolume(volume_id="vol-1")))
    assert obj == {"vol_type": "aws_ebs", "vol_id": "vol-1"}


def test_metadata_wins_on_key_collision():
    assert merge_flat_objects({"name": "disk", "vol_type": "gce_pd"}, {"name": "pv1"}) == \
        {"name": "pv1", "vol_type": "gce_pd"}


def test_metadata_wins_through_encode(monkeypatch):
    """
    PRECEDENCE TEST: a variant field sharing a key with metadata is overwritten.
    """
    monkeypatch.setattr(resource, "encode_volume_source", lambda source: MarshalledVolume(
        type="gce_pd", selector=["disk"], extra_fields={"name": "from-volume", "fs": "ext4"}))

    pv = PersistentVolume(meta=PersistentVolumeMeta(name="pv1"), source=GcePDVolume(pd_name="disk"))
    obj = encode_persistent_volume(pv)

    assert obj["name"] == "pv1"
    assert obj["fs"] == "ext4"


def test_empty_selector_omits_vol_id(monkeypatch):
    monkeypatch.setattr(resource, "encode_volume_source", lambda source: MarshalledVolume(type="hostpath"))

    obj = encode_persistent_volume(PersistentVolume(source=HostPathVolume(path="")))

    assert obj == {"vol_type": "hostpath"}
    assert "vol_id" not in obj


@pytest.mark.parametrize("source, token", [
    (HostPathVolume(path="/mnt:dir"), "/mnt:dir"),
    (AwsEBSVolume(volume_id="aws://us-east-1a/vol-0abc"), "aws://us-east-1a/vol-0abc"),
    (GcePDVolume(pd_name="zone:disk"), "zone:disk"),
])
def test_separator_inside_selector_is_rejected(source, token):
    """
    A selector segment holding ':' would split differently on decode,
    so encode must fail instead of producing a different volume.
    """
    with pytest.raises(InvalidSelector) as exc:
        encode_persistent_volume(PersistentVolume(source=source))
    assert token in str(exc.value)


def test_empty_claim_and_status_stay_on_the_wire():
    pv = SAMPLE_VOLUMES[-1]
    obj = encode_persistent_volume(pv)

    assert obj["claim"] == {}
    assert obj["status"] == {}
    assert decode_persistent_volume(obj).meta.claim == ObjectReference()


def test_empty_union():
    with pytest.raises(EmptyUnion):
        encode_persistent_volume(PersistentVolume(meta=PersistentVolumeMeta(name="pv1")))


def test_unknown_tag():
    with pytest.raises(UnsupportedVariant) as exc:
        decode_persistent_volume({"vol_type": "nfs", "vol_id": "server:/export", "name": "pv1"})
    assert exc.value.value == "nfs"


@pytest.mark.parametrize("obj, field", [
    ({"vol_id": "/data"}, "vol_type"),
    ({"vol_type": 7, "vol_id": "/data"}, "vol_type"),
    ({"vol_type": "hostpath", "vol_id": ["/data"]}, "vol_id"),
])
def test_missing_or_invalid_tag_fields(obj, field):
    with pytest.raises(MissingOrInvalidField) as exc:
        decode_persistent_volume(obj)
    assert exc.value.field == field


@pytest.mark.parametrize("value", [[], "vol_type: hostpath", 42, None])
def test_decode_requires_an_object(value):
    with pytest.raises(ExpectedObject):
        decode_persistent_volume(value)


@pytest.mark.parametrize("data", ["[1, 2]", "{not json", b"\xff\xfe"])
def test_loads_requires_a_json_object(data):
    with pytest.raises(ExpectedObject):
        loads(data)


def test_volume_errors_surface_unchanged():
    with pytest.raises(InvalidSelector):
        decode_persistent_volume({"vol_type": "gce_pd", "vol_id": "zone:disk"})


def test_metadata_errors_surface_unchanged():
    with pytest.raises(MalformedCompactValue) as exc:
        decode_persistent_volume({"vol_type": "hostpath", "vol_id": "/data", "modes": "ro,bogus"})
    assert exc.value.token == "bogus"

    with pytest.raises(MissingOrInvalidField) as exc:
        decode_persistent_volume({"vol_type": "hostpath", "vol_id": "/data", "modes": ["ro"]})
    assert exc.value.field == "modes"

    with pytest.raises(UnrecognizedEnumValue):
        decode_persistent_volume({"vol_type": "hostpath", "vol_id": "/data", "reclaim": "archive"})


def test_unknown_fields_are_ignored():
    pv = decode_persistent_volume({"vol_type": "hostpath", "vol_id": "/data", "fs": "ext4", "color": "blue"})
    assert pv == PersistentVolume(source=HostPathVolume(path="/data"))


def test_numeric_storage_is_normalised():
    pv = decode_persistent_volume({"vol_type": "hostpath", "vol_id": "/data", "storage": 1024})
    assert pv.meta.storage == "1024"


def test_wrapped_document():
    pv = SAMPLE_VOLUMES[1]
    doc = encode_wrapped(pv)

    assert list(doc) == ["persistent_volume"]
    assert decode_wrapped(doc) == pv


def test_wrapped_document_requires_envelope():
    with pytest.raises(MissingOrInvalidField):
        decode_wrapped({"vol_type": "hostpath", "vol_id": "/data"})
    with pytest.raises(ExpectedObject):
        decode_wrapped("persistent_volume")
