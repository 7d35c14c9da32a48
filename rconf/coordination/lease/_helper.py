from __future__ import annotations

import json

from rconf.core.exceptions import BadRequestError

from ._models import LeaseHolder, LeaseKey, LeaseRecord


def normalize_key(key: str | dict | LeaseKey) -> LeaseKey:
    if isinstance(key, LeaseKey):
        return key
    if isinstance(key, dict):
        return LeaseKey.from_dict(key)
    if isinstance(key, str) and key:
        if "/" in key:
            namespace, name = key.split("/", 1)
            return LeaseKey(namespace=namespace, name=name or None)
        return LeaseKey(namespace=key)
    raise BadRequestError(f"Lease key format not supported: {key!r}")


def normalize_holder(holder: str | LeaseHolder | None) -> str:
    if holder is None:
        return LeaseHolder.default().to_identity()
    if isinstance(holder, LeaseHolder):
        return holder.to_identity()
    if not holder:
        raise BadRequestError("Lease holder identity is empty")
    return holder


def encode_record(record: LeaseRecord) -> bytes:
    return json.dumps(
        {
            "namespace": record.namespace,
            "name": record.name,
            "holderIdentity": record.holder_identity,
            "durationSeconds": record.duration_seconds,
            "acquireTime": record.acquire_time,
            "renewTime": record.renew_time,
        }
    ).encode()


def decode_record(value: bytes, etag: str | None) -> LeaseRecord:
    obj = json.loads(value)
    return LeaseRecord(
        namespace=obj["namespace"],
        name=obj["name"],
        holder_identity=obj["holderIdentity"],
        duration_seconds=obj["durationSeconds"],
        acquire_time=obj["acquireTime"],
        renew_time=obj["renewTime"],
        resource_version=etag,
    )


def can_take_over(record: LeaseRecord, holder: str) -> bool:
    """Check a live lease belongs to a dead process of the same user
    on this machine."""
    current = LeaseHolder.from_identity(record.holder_identity)
    caller = LeaseHolder.from_identity(holder)
    if current is None or caller is None:
        return False
    if not current.is_same_machine_identity(caller):
        return False
    if current.equals(caller):
        return False
    return not current.is_process_alive()
