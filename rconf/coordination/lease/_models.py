from __future__ import annotations

import getpass
import json
import os
import socket

from rconf.core import DataModel


class LeaseKey(DataModel):
    """Lease key."""

    namespace: str
    """Namespace the lease guards.
    """

    name: str | None = None
    """Lease name, defaults to the namespace.
    """

    @property
    def id(self) -> str:
        return f"{self.namespace}/leases/{self.name or self.namespace}"

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name or self.namespace}"


class LeaseHolder(DataModel):
    """Identity of a lease holder process."""

    username: str
    hostname: str
    process_id: int

    @staticmethod
    def default() -> LeaseHolder:
        return LeaseHolder(
            username=getpass.getuser(),
            hostname=socket.gethostname(),
            process_id=os.getpid(),
        )

    @staticmethod
    def from_identity(identity: str | None) -> LeaseHolder | None:
        """Parse a holder identity.

        Returns None for identities not written by a ``LeaseHolder``.
        """
        if not identity:
            return None
        try:
            obj = json.loads(identity)
        except ValueError:
            return None
        if not isinstance(obj, dict):
            return None
        try:
            return LeaseHolder(
                username=obj["username"],
                hostname=obj["hostname"],
                process_id=obj["pid"],
            )
        except (KeyError, ValueError):
            return None

    def to_identity(self) -> str:
        return json.dumps(
            {
                "username": self.username,
                "hostname": self.hostname,
                "pid": self.process_id,
            },
            separators=(",", ":"),
        )

    def equals(self, other: LeaseHolder) -> bool:
        return (
            self.is_same_machine_identity(other)
            and self.process_id == other.process_id
        )

    def is_same_machine_identity(self, other: LeaseHolder) -> bool:
        return (
            self.username == other.username
            and self.hostname == other.hostname
        )

    def is_process_alive(self) -> bool:
        """Check the holder process on this machine still runs."""
        if self.process_id <= 0:
            return False
        try:
            os.kill(self.process_id, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return True
        except OSError:
            return False
        return True

    def __str__(self) -> str:
        return f"{self.username}@{self.hostname}:{self.process_id}"


class LeaseRecord(DataModel):
    """Lease record as stored in the config store."""

    namespace: str
    name: str
    holder_identity: str
    duration_seconds: float
    acquire_time: float
    renew_time: float

    resource_version: str | None = None
    """Etag of the stored record, filled on read.
    """

    @property
    def expires_at(self) -> float:
        return self.renew_time + self.duration_seconds

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
