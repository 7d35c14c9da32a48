from __future__ import annotations

from rconf.core import Clock, Time, get_logger
from rconf.core.exceptions import (
    ConflictError,
    LeaseHeldByOtherError,
    LeaseLostError,
    NotFoundError,
    NotSupportedError,
)
from rconf.storage.config_store import (
    ConfigItem,
    ConfigStore,
    MatchCondition,
    StoreFeature,
)

from ._constants import DEFAULT_LEASE_DURATION
from ._helper import (
    can_take_over,
    decode_record,
    encode_record,
    normalize_holder,
    normalize_key,
)
from ._models import LeaseHolder, LeaseKey, LeaseRecord

logger = get_logger(__name__)


class Lease:
    """Mutual exclusion record kept in a config store.

    A lease is free when no record exists or the record expired. Every
    record write is conditional on the etag last read, so two
    processes never both believe a write of theirs took the lease.

    The async methods use the store's async operations directly, so a
    cancelled task stops at its next store call.
    """

    store: ConfigStore
    duration: float
    clock: Clock

    # (lease id, holder identity) -> etag of the record we last wrote
    _tokens: dict[tuple[str, str], str]

    def __init__(
        self,
        store: ConfigStore,
        duration: float = DEFAULT_LEASE_DURATION,
        clock: Clock | None = None,
    ):
        """Initialize.

        Args:
            store:
                Config store holding the lease records. It must
                support conditional writes and deletes.
            duration:
                Seconds a lease stays live without renewal.
            clock:
                Returns the current epoch seconds, defaults
                to wall clock time.
        """
        for feature in (
            StoreFeature.CONDITIONAL_WRITE,
            StoreFeature.CONDITIONAL_DELETE,
        ):
            if not store.__supports__(feature):
                raise NotSupportedError(
                    f"Lease store does not support {feature}"
                )
        self.store = store
        self.duration = duration
        self.clock = clock or Time.now
        self._tokens = dict()

    def acquire(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
        duration: float | None = None,
    ) -> LeaseRecord:
        """Acquire the lease.

        Succeeds when no record exists, the record expired, or the
        record is already held by ``holder``.

        Args:
            key: Lease key.
            holder: Holder identity, defaults to this process.
            duration: Lease duration, defaults to the lease default.

        Returns:
            Stored lease record.

        Raises:
            LeaseHeldByOtherError: A live lease is held by another holder.
        """
        lease_key = normalize_key(key)
        identity = normalize_holder(holder)
        current = self._read(lease_key)
        record, where = self._plan_acquire(
            lease_key, identity, duration, current
        )
        try:
            record = self._write(lease_key, identity, record, where)
        except ConflictError as e:
            winner = self._read(lease_key)
            raise self._acquire_conflict(lease_key, winner) from e
        logger.info("Acquired lease %s for %s", lease_key, identity)
        return record

    def renew(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> LeaseRecord:
        """Renew the lease.

        Args:
            key: Lease key.
            holder: Holder identity, defaults to this process.

        Returns:
            Stored lease record.

        Raises:
            LeaseLostError:
                The record changed since this holder last wrote it.
        """
        lease_key = normalize_key(key)
        identity = normalize_holder(holder)
        current = self._read(lease_key)
        token = self._check_renew(lease_key, identity, current)
        record = current.copy(update=dict(renew_time=self.clock()))
        try:
            return self._write(
                lease_key, identity, record, MatchCondition(if_match=token)
            )
        except ConflictError as e:
            raise self._renew_conflict(lease_key, identity) from e

    def release(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> None:
        """Release the lease.

        Clears the record only while ``holder`` still holds it.
        Releasing a lease not held is a no-op.

        Args:
            key: Lease key.
            holder: Holder identity, defaults to this process.
        """
        self._release(key, holder)

    def try_acquire(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
        duration: float | None = None,
    ) -> bool:
        try:
            self.acquire(key, holder, duration)
        except LeaseHeldByOtherError:
            return False
        return True

    def try_renew(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> bool:
        try:
            self.renew(key, holder)
        except LeaseLostError:
            return False
        return True

    def try_release(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> bool:
        """Release the lease and report whether a record was cleared."""
        return self._release(key, holder)

    def get(self, key: str | dict | LeaseKey) -> LeaseRecord | None:
        return self._read(normalize_key(key))

    def is_acquired(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> bool:
        record = self.get(key)
        return (
            record is not None
            and record.holder_identity == normalize_holder(holder)
            and not record.is_expired(self.clock())
        )

    def is_expired(self, key: str | dict | LeaseKey) -> bool:
        record = self.get(key)
        return record is None or record.is_expired(self.clock())

    async def aacquire(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
        duration: float | None = None,
    ) -> LeaseRecord:
        lease_key = normalize_key(key)
        identity = normalize_holder(holder)
        current = await self._aread(lease_key)
        record, where = self._plan_acquire(
            lease_key, identity, duration, current
        )
        try:
            record = await self._awrite(lease_key, identity, record, where)
        except ConflictError as e:
            winner = await self._aread(lease_key)
            raise self._acquire_conflict(lease_key, winner) from e
        logger.info("Acquired lease %s for %s", lease_key, identity)
        return record

    async def arenew(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> LeaseRecord:
        lease_key = normalize_key(key)
        identity = normalize_holder(holder)
        current = await self._aread(lease_key)
        token = self._check_renew(lease_key, identity, current)
        record = current.copy(update=dict(renew_time=self.clock()))
        try:
            return await self._awrite(
                lease_key, identity, record, MatchCondition(if_match=token)
            )
        except ConflictError as e:
            raise self._renew_conflict(lease_key, identity) from e

    async def arelease(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> None:
        await self._arelease(key, holder)

    async def atry_release(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None = None,
    ) -> bool:
        return await self._arelease(key, holder)

    async def aget(self, key: str | dict | LeaseKey) -> LeaseRecord | None:
        return await self._aread(normalize_key(key))

    def _plan_acquire(
        self,
        lease_key: LeaseKey,
        identity: str,
        duration: float | None,
        current: LeaseRecord | None,
    ) -> tuple[LeaseRecord, MatchCondition]:
        duration = duration if duration is not None else self.duration
        now = self.clock()
        if current is None:
            record = self._new_record(lease_key, identity, duration, now)
            return record, MatchCondition(exists=False)
        if current.holder_identity == identity:
            record = current.copy(
                update=dict(renew_time=now, duration_seconds=duration)
            )
            return record, MatchCondition(if_match=current.resource_version)
        if current.is_expired(now) or can_take_over(current, identity):
            logger.info(
                "Taking over lease %s from %s",
                lease_key,
                current.holder_identity,
            )
            record = self._new_record(lease_key, identity, duration, now)
            return record, MatchCondition(if_match=current.resource_version)
        raise LeaseHeldByOtherError(
            f"Lease {lease_key} is held by {current.holder_identity}",
            holder=current.holder_identity,
        )

    def _acquire_conflict(
        self, lease_key: LeaseKey, winner: LeaseRecord | None
    ) -> LeaseHeldByOtherError:
        return LeaseHeldByOtherError(
            f"Lease {lease_key} was acquired concurrently",
            holder=winner.holder_identity if winner else None,
        )

    def _check_renew(
        self,
        lease_key: LeaseKey,
        identity: str,
        current: LeaseRecord | None,
    ) -> str:
        token = self._tokens.get((lease_key.id, identity))
        if (
            token is None
            or current is None
            or current.holder_identity != identity
            or current.resource_version != token
        ):
            self._tokens.pop((lease_key.id, identity), None)
            raise LeaseLostError(
                f"Lease {lease_key} is no longer held by {identity}"
            )
        return token

    def _renew_conflict(
        self, lease_key: LeaseKey, identity: str
    ) -> LeaseLostError:
        self._tokens.pop((lease_key.id, identity), None)
        return LeaseLostError(
            f"Lease {lease_key} was taken over during renewal"
        )

    def _release_target(
        self,
        lease_key: LeaseKey,
        identity: str,
        current: LeaseRecord | None,
    ) -> MatchCondition | None:
        self._tokens.pop((lease_key.id, identity), None)
        if current is None or current.holder_identity != identity:
            return None
        return MatchCondition(if_match=current.resource_version)

    def _release(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None,
    ) -> bool:
        lease_key = normalize_key(key)
        identity = normalize_holder(holder)
        where = self._release_target(
            lease_key, identity, self._read(lease_key)
        )
        if where is None:
            return False
        try:
            self.store.delete(key=lease_key.id, where=where)
        except (ConflictError, NotFoundError):
            return False
        logger.info("Released lease %s for %s", lease_key, identity)
        return True

    async def _arelease(
        self,
        key: str | dict | LeaseKey,
        holder: str | LeaseHolder | None,
    ) -> bool:
        lease_key = normalize_key(key)
        identity = normalize_holder(holder)
        where = self._release_target(
            lease_key, identity, await self._aread(lease_key)
        )
        if where is None:
            return False
        try:
            await self.store.adelete(key=lease_key.id, where=where)
        except (ConflictError, NotFoundError):
            return False
        logger.info("Released lease %s for %s", lease_key, identity)
        return True

    def _read(self, lease_key: LeaseKey) -> LeaseRecord | None:
        try:
            response = self.store.get(key=lease_key.id)
        except NotFoundError:
            return None
        return self._decode(response.result)

    async def _aread(self, lease_key: LeaseKey) -> LeaseRecord | None:
        try:
            response = await self.store.aget(key=lease_key.id)
        except NotFoundError:
            return None
        return self._decode(response.result)

    def _decode(self, item: ConfigItem) -> LeaseRecord:
        return decode_record(item.value, item.properties.etag)

    def _write(
        self,
        lease_key: LeaseKey,
        identity: str,
        record: LeaseRecord,
        where: MatchCondition,
    ) -> LeaseRecord:
        response = self.store.put(
            key=lease_key.id, value=encode_record(record), where=where
        )
        return self._stored(lease_key, identity, record, response.result)

    async def _awrite(
        self,
        lease_key: LeaseKey,
        identity: str,
        record: LeaseRecord,
        where: MatchCondition,
    ) -> LeaseRecord:
        response = await self.store.aput(
            key=lease_key.id, value=encode_record(record), where=where
        )
        return self._stored(lease_key, identity, record, response.result)

    def _stored(
        self,
        lease_key: LeaseKey,
        identity: str,
        record: LeaseRecord,
        item: ConfigItem,
    ) -> LeaseRecord:
        etag = item.properties.etag
        self._tokens[(lease_key.id, identity)] = etag
        return record.copy(update=dict(resource_version=etag))

    def _new_record(
        self,
        lease_key: LeaseKey,
        identity: str,
        duration: float,
        now: float,
    ) -> LeaseRecord:
        return LeaseRecord(
            namespace=lease_key.namespace,
            name=lease_key.name or lease_key.namespace,
            holder_identity=identity,
            duration_seconds=duration,
            acquire_time=now,
            renew_time=now,
        )
