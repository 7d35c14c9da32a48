from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable

from rconf.coordination.lease import Lease, LeaseHolder
from rconf.core import Clock, Time, get_logger, warn
from rconf.core.exceptions import (
    BaseError,
    DocumentValidationError,
    NotFoundError,
    NotSupportedError,
)
from rconf.storage.config_store import (
    ConfigItem,
    ConfigStore,
    MatchCondition,
    StoreFeature,
)

from ._codec import RemoteConfigCodec
from ._flags import merge_common_flags
from ._models import Cluster, RemoteConfigDocument, RemoteConfigSnapshot
from .migrations import SchemaMigrationEngine
from .registry import ComponentsRegistry
from .settings import RemoteConfigSettings

logger = get_logger(__name__)

RegistryOperation = Callable[[ComponentsRegistry], ComponentsRegistry | None]
"""Changes a registry in place or returns a replacement."""

AsyncRegistryOperation = Callable[
    [ComponentsRegistry], Awaitable[ComponentsRegistry | None]
]


class RemoteConfigManager:
    """Read-modify-write access to a deployment's remote config.

    Mutations run under the deployment lease and persist with one
    conditional write on the etag they loaded. A write that loses a
    race raises ``ConflictError``; retrying is up to the caller.
    """

    store: ConfigStore
    lease: Lease
    settings: RemoteConfigSettings
    holder: str | LeaseHolder
    clock: Clock
    engine: SchemaMigrationEngine

    def __init__(
        self,
        store: ConfigStore,
        lease: Lease,
        settings: RemoteConfigSettings,
        holder: str | LeaseHolder | None = None,
        clock: Clock | None = None,
        engine: SchemaMigrationEngine | None = None,
    ):
        """Initialize.

        Args:
            store:
                Config store holding the document. It must
                support conditional writes.
            lease:
                Lease guarding mutations of the deployment.
            settings:
                Remote config settings.
            holder:
                Identity mutations run under, defaults
                to this process.
            clock:
                Returns the current epoch seconds.
            engine:
                Migration engine, defaults to the built-in migrations.
        """
        if not store.__supports__(StoreFeature.CONDITIONAL_WRITE):
            raise NotSupportedError(
                "Remote config store does not support conditional writes"
            )
        self.store = store
        self.lease = lease
        self.settings = settings
        self.holder = holder if holder is not None else LeaseHolder.default()
        self.clock = clock or Time.now
        self.engine = engine or SchemaMigrationEngine(clock=self.clock)

    def load(self) -> RemoteConfigSnapshot:
        """Load the document, migrated in memory.

        Returns:
            Snapshot with the document and the etag it was read at.
            An empty document with no etag when nothing is stored.
        """
        try:
            response = self.store.get(key=self.settings.document_key)
        except NotFoundError:
            return RemoteConfigSnapshot(document=RemoteConfigDocument())
        return self._decode(response.result)

    def get(self) -> RemoteConfigDocument:
        """Current document, read without taking the lease."""
        return self.load().document

    def persist(self, snapshot: RemoteConfigSnapshot) -> RemoteConfigSnapshot:
        """Write a document conditionally on the snapshot etag.

        Returns:
            Snapshot with the new etag.

        Raises:
            ConflictError: The stored document changed since the
                snapshot was loaded.
        """
        value, where = self._encode(snapshot)
        response = self.store.put(
            key=self.settings.document_key, value=value, where=where
        )
        return self._persisted(snapshot, response.result)

    def mutate(
        self,
        operation: RegistryOperation,
        command: str | None = None,
        flags: dict[str, Any] | None = None,
    ) -> RemoteConfigDocument:
        """Apply an operation to the document under the lease.

        Args:
            operation:
                Receives a working registry. It may change it in
                place or return a replacement.
            command:
                Command recorded in the history, defaults to the
                operation name.
            flags:
                Command flags merged into the common flags snapshot.

        Returns:
            Persisted document.

        Raises:
            LeaseHeldByOtherError: Another holder has the lease.
            LeaseLostError: The lease was taken over before persisting.
            ValidationError: The operation or the resulting document
                broke an invariant.
            ConflictError: Another writer persisted first.
        """
        lease_key = self.settings.lease_key
        self.lease.acquire(
            lease_key, self.holder, self.settings.lease_duration
        )
        try:
            snapshot = self.load()
            registry = ComponentsRegistry.from_document(snapshot.document)
            result = operation(registry)
            document = self._finish(
                snapshot, registry, result, operation, command, flags
            )
            self.lease.renew(lease_key, self.holder)
            saved = self.persist(
                RemoteConfigSnapshot(document=document, etag=snapshot.etag)
            )
            return saved.document
        finally:
            self._release()

    def create(
        self,
        cluster_ref: str,
        cluster: Cluster,
        node_aliases: list[str],
        command: str | None = None,
        flags: dict[str, Any] | None = None,
    ) -> RemoteConfigDocument:
        """Start a deployment with consensus nodes on one cluster.

        The stored clusters and components are discarded. The result
        holds only ``cluster`` under ``cluster_ref`` and one consensus
        node per alias in phase REQUESTED. Command history, flags and
        migration metadata are kept.
        """
        return self.mutate(
            self._creator(cluster_ref, cluster, node_aliases),
            command=command,
            flags=flags,
        )

    def delete_components(
        self,
        command: str | None = None,
    ) -> RemoteConfigDocument:
        def delete_components(registry: ComponentsRegistry) -> None:
            registry.components.clear()

        return self.mutate(delete_components, command=command)

    async def aload(self) -> RemoteConfigSnapshot:
        try:
            response = await self.store.aget(key=self.settings.document_key)
        except NotFoundError:
            return RemoteConfigSnapshot(document=RemoteConfigDocument())
        return self._decode(response.result)

    async def aget(self) -> RemoteConfigDocument:
        return (await self.aload()).document

    async def apersist(
        self, snapshot: RemoteConfigSnapshot
    ) -> RemoteConfigSnapshot:
        value, where = self._encode(snapshot)
        response = await self.store.aput(
            key=self.settings.document_key, value=value, where=where
        )
        return self._persisted(snapshot, response.result)

    async def amutate(
        self,
        operation: RegistryOperation | AsyncRegistryOperation,
        command: str | None = None,
        flags: dict[str, Any] | None = None,
    ) -> RemoteConfigDocument:
        """Async ``mutate``, the operation may be a coroutine function.

        Cancelling the task before the conditional write leaves the
        stored document untouched and still releases the lease.
        """
        lease_key = self.settings.lease_key
        await self.lease.aacquire(
            lease_key, self.holder, self.settings.lease_duration
        )
        try:
            snapshot = await self.aload()
            registry = ComponentsRegistry.from_document(snapshot.document)
            result = operation(registry)
            if inspect.isawaitable(result):
                result = await result
            document = self._finish(
                snapshot, registry, result, operation, command, flags
            )
            await self.lease.arenew(lease_key, self.holder)
            saved = await self.apersist(
                RemoteConfigSnapshot(document=document, etag=snapshot.etag)
            )
            return saved.document
        finally:
            await self._arelease()

    async def acreate(
        self,
        cluster_ref: str,
        cluster: Cluster,
        node_aliases: list[str],
        command: str | None = None,
        flags: dict[str, Any] | None = None,
    ) -> RemoteConfigDocument:
        return await self.amutate(
            self._creator(cluster_ref, cluster, node_aliases),
            command=command,
            flags=flags,
        )

    @staticmethod
    def compare(a: RemoteConfigDocument, b: RemoteConfigDocument) -> bool:
        """Check two documents span the same cluster references."""
        return set(a.clusters) == set(b.clusters)

    @staticmethod
    def _creator(
        cluster_ref: str,
        cluster: Cluster,
        node_aliases: list[str],
    ) -> RegistryOperation:
        def create(registry: ComponentsRegistry) -> ComponentsRegistry:
            created = ComponentsRegistry.initialize_with_nodes(
                node_aliases, cluster_ref, cluster.namespace
            )
            created.add_cluster(cluster_ref, cluster)
            return created

        return create

    def _decode(self, item: ConfigItem) -> RemoteConfigSnapshot:
        obj = RemoteConfigCodec.loads(item.value or b"")
        obj = self.engine.migrate(obj)
        return RemoteConfigSnapshot(
            document=RemoteConfigCodec.decode_document(obj),
            etag=item.properties.etag,
        )

    def _encode(
        self, snapshot: RemoteConfigSnapshot
    ) -> tuple[bytes, MatchCondition]:
        value = RemoteConfigCodec.dumps(
            RemoteConfigCodec.encode_document(snapshot.document)
        )
        if snapshot.etag is None:
            return value, MatchCondition(exists=False)
        return value, MatchCondition(if_match=snapshot.etag)

    def _persisted(
        self, snapshot: RemoteConfigSnapshot, item: ConfigItem
    ) -> RemoteConfigSnapshot:
        logger.info("Persisted remote config %s", self.settings.document_key)
        return RemoteConfigSnapshot(
            document=snapshot.document, etag=item.properties.etag
        )

    def _finish(
        self,
        snapshot: RemoteConfigSnapshot,
        registry: ComponentsRegistry,
        result: ComponentsRegistry | None,
        operation: Callable,
        command: str | None,
        flags: dict[str, Any] | None,
    ) -> RemoteConfigDocument:
        if isinstance(result, ComponentsRegistry):
            registry = result
        violations = registry.validate()
        if violations:
            raise DocumentValidationError(violations)
        return self._record_command(
            registry.apply(snapshot.document),
            command or getattr(operation, "__name__", "mutate"),
            flags,
        )

    def _record_command(
        self,
        document: RemoteConfigDocument,
        command: str,
        flags: dict[str, Any] | None,
    ) -> RemoteConfigDocument:
        entry = f"Executed by {self.holder}: {command}"
        history = [*document.command_history, entry]
        limit = self.settings.max_command_history
        if limit is not None:
            history = history[-limit:] if limit > 0 else []
        return document.copy(
            update=dict(
                command_history=history,
                last_executed_command=entry,
                flags=merge_common_flags(
                    document.flags, flags, self.settings.force
                ),
            )
        )

    def _release(self) -> None:
        try:
            self.lease.release(self.settings.lease_key, self.holder)
        except BaseError as e:
            warn(
                "Could not release lease %s: %s",
                self.settings.lease_key,
                e,
                logger=logger,
            )

    async def _arelease(self) -> None:
        try:
            await self.lease.arelease(self.settings.lease_key, self.holder)
        except BaseError as e:
            warn(
                "Could not release lease %s: %s",
                self.settings.lease_key,
                e,
                logger=logger,
            )
