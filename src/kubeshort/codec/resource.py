#!/usr/bin/env python3
"""
KUBESHORT RESOURCE CODEC - Merge & Split
----------------------------------------
Turns a PersistentVolume into one flat map and back again.

Encode: metadata and volume source are flattened independently, then merged
into a single map. The metadata is applied LAST, so on a key collision the
metadata value is the one that reaches the wire.

Decode: the same flat map is read twice. Once for the volume source (driven
by `vol_type` and the colon-separated `vol_id`), once for the metadata.
Either half failing fails the whole decode with that half's error.

Author: KubeShort Team
Date: 2026-01-16
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Union

from kubeshort.codec.fields import get_string_entry
from kubeshort.codec.meta import decode_meta, encode_meta
from kubeshort.codec.volumes import decode_volume_source, encode_volume_source
from kubeshort.core.errors import ExpectedObject, InvalidSelector, MissingOrInvalidField
from kubeshort.core.models import MarshalledVolume, PersistentVolume, VolumeSource

VOL_TYPE_KEY = "vol_type"
VOL_ID_KEY = "vol_id"
SELECTOR_SEPARATOR = ":"
WRAPPER_KEY = "persistent_volume"


def split_selector(obj: Mapping[str, Any]) -> List[str]:
    """Reads the optional compound identifier; absent means no selector."""
    if VOL_ID_KEY not in obj:
        return []
    vol_id = obj[VOL_ID_KEY]
    if not isinstance(vol_id, str):
        raise MissingOrInvalidField(vol_id, VOL_ID_KEY, "string")
    return vol_id.split(SELECTOR_SEPARATOR)


def marshal_volume_source(source: Optional[VolumeSource]) -> Dict[str, Any]:
    """Tagged flat map for the source half: extra fields + vol_type [+ vol_id]."""
    marshalled: MarshalledVolume = encode_volume_source(source)

    obj = dict(marshalled.extra_fields or {})
    obj[VOL_TYPE_KEY] = marshalled.type
    if marshalled.selector:
        for token in marshalled.selector:
            # tokens must come back unchanged from split_selector()
            if SELECTOR_SEPARATOR in token:
                raise InvalidSelector(marshalled.selector, marshalled.type, "separator-free",
                                      f"selector segment {token!r} of {marshalled.type} contains \"{SELECTOR_SEPARATOR}\"")
        obj[VOL_ID_KEY] = SELECTOR_SEPARATOR.join(marshalled.selector)
    return obj


def merge_flat_objects(source_obj: Mapping[str, Any], meta_obj: Mapping[str, Any]) -> Dict[str, Any]:
    """Metadata wins on collision."""
    merged = dict(source_obj)
    for key, value in meta_obj.items():
        merged[key] = value
    return merged


def decode_persistent_volume(obj: Any) -> PersistentVolume:
    if not isinstance(obj, Mapping):
        raise ExpectedObject(obj)

    selector = split_selector(obj)
    vol_type = get_string_entry(obj, VOL_TYPE_KEY)

    source = decode_volume_source(obj, vol_type, selector)
    meta = decode_meta(obj)

    return PersistentVolume(meta=meta, source=source)


def encode_persistent_volume(pv: PersistentVolume) -> Dict[str, Any]:
    meta_obj = encode_meta(pv.meta)
    source_obj = marshal_volume_source(pv.source)
    return merge_flat_objects(source_obj, meta_obj)


def decode_wrapped(doc: Any) -> PersistentVolume:
    """Decodes the `{"persistent_volume": {...}}` document envelope."""
    if not isinstance(doc, Mapping):
        raise ExpectedObject(doc, f"expected dictionary for {WRAPPER_KEY} document")
    if WRAPPER_KEY not in doc:
        raise MissingOrInvalidField(None, WRAPPER_KEY, "dictionary")
    return decode_persistent_volume(doc[WRAPPER_KEY])


def encode_wrapped(pv: PersistentVolume) -> Dict[str, Any]:
    return {WRAPPER_KEY: encode_persistent_volume(pv)}


def loads(data: Union[str, bytes]) -> PersistentVolume:
    """Decodes UTF-8 JSON wire text into a PersistentVolume."""
    try:
        obj = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ExpectedObject(data, f"expected dictionary for persistent volume: {e}")
    return decode_persistent_volume(obj)


def dumps(pv: PersistentVolume, indent: Optional[int] = None) -> str:
    return json.dumps(encode_persistent_volume(pv), indent=indent, ensure_ascii=False)
