from __future__ import annotations

import copy
import re

from rconf.core.exceptions import (
    BadRequestError,
    DanglingClusterReferenceError,
    DuplicateComponentError,
    DuplicateComponentIdError,
    NotFoundError,
    ValidationError,
)

from ._models import (
    BaseComponent,
    Cluster,
    ComponentType,
    ConsensusNodeComponent,
    RemoteConfigDocument,
)
from ._phase import DeploymentPhase, check_transition


def render_component_name(base: str, index: int) -> str:
    return f"{base}-{index}"


def parse_component_name(name: str) -> int:
    """Return the index suffix of a rendered component name."""
    _, _, suffix = name.rpartition("-")
    try:
        return int(suffix)
    except ValueError:
        raise BadRequestError(
            f"Component name {name} has no numeric index"
        ) from None


def component_type(type: ComponentType | str) -> ComponentType:
    try:
        return ComponentType(type)
    except ValueError:
        raise BadRequestError(f"Unknown component type {type}") from None


def node_id_from_alias(alias: str) -> int:
    """Consensus node id for an alias, ``node1`` is id 0."""
    match = re.fullmatch(r"node(\d+)", alias)
    if match is None or int(match.group(1)) < 1:
        raise BadRequestError(f"Invalid node alias {alias}")
    return int(match.group(1)) - 1


class ComponentsRegistry:
    """Invariant-enforcing view over a document's clusters and components.

    Components reference clusters by key only. A registry owns its
    maps; build one per document with ``from_document`` and write it
    back with ``apply``.
    """

    clusters: dict[str, Cluster]
    components: dict[ComponentType, dict[int, BaseComponent]]

    def __init__(
        self,
        clusters: dict[str, Cluster] | None = None,
        components: (
            dict[ComponentType, dict[int, BaseComponent]] | None
        ) = None,
    ):
        self.clusters = clusters if clusters is not None else dict()
        self.components = components if components is not None else dict()

    @staticmethod
    def from_document(document: RemoteConfigDocument) -> ComponentsRegistry:
        return ComponentsRegistry(
            clusters=copy.deepcopy(document.clusters),
            components=copy.deepcopy(document.components),
        )

    @staticmethod
    def initialize_with_nodes(
        aliases: list[str],
        cluster_ref: str,
        namespace: str,
    ) -> ComponentsRegistry:
        """Seed consensus nodes in phase REQUESTED on one cluster.

        The cluster itself must be added before the registry
        validates.
        """
        registry = ComponentsRegistry()
        nodes = registry.components.setdefault(
            ComponentType.CONSENSUS_NODE, dict()
        )
        for alias in aliases:
            node_id = node_id_from_alias(alias)
            nodes[node_id] = ConsensusNodeComponent(
                id=node_id,
                name=alias,
                cluster=cluster_ref,
                namespace=namespace,
                node_id=node_id,
            )
        return registry

    def apply(self, document: RemoteConfigDocument) -> RemoteConfigDocument:
        return document.copy(
            update=dict(
                clusters=copy.deepcopy(self.clusters),
                components=copy.deepcopy(self.components),
            )
        )

    def clone(self) -> ComponentsRegistry:
        return ComponentsRegistry(
            clusters=copy.deepcopy(self.clusters),
            components=copy.deepcopy(self.components),
        )

    def add_cluster(self, ref: str, cluster: Cluster) -> None:
        if ref in self.clusters:
            raise ValidationError(f"Cluster {ref} already exists")
        self.clusters[ref] = cluster

    def get_cluster(self, ref: str) -> Cluster:
        if ref not in self.clusters:
            raise NotFoundError(f"Cluster {ref} not found")
        return self.clusters[ref]

    def remove_cluster(self, ref: str) -> None:
        if ref not in self.clusters:
            raise NotFoundError(f"Cluster {ref} not found")
        for type in self.components:
            if self.get_components_by_cluster_reference(type, ref):
                raise ValidationError(
                    f"Cluster {ref} is still referenced by {type.value}"
                )
        self.clusters.pop(ref)

    def new_component_id(self, type: ComponentType | str) -> int:
        ids = self.components.get(component_type(type), {}).keys()
        return max(ids) + 1 if ids else 0

    def add_new_component(self, component: BaseComponent) -> BaseComponent:
        """Add a component under a newly allocated id.

        Args:
            component: Component to add, its ``id`` is overwritten.

        Returns:
            The stored component.

        Raises:
            DuplicateComponentError:
                A component of the same type and name exists.
            DanglingClusterReferenceError:
                The component's cluster is not registered.
        """
        if self._find(component.type, component.name) is not None:
            raise DuplicateComponentError(
                f"Component {component.name} of type "
                f"{component.type.value} already exists"
            )
        if component.cluster not in self.clusters:
            raise DanglingClusterReferenceError(
                f"Component {component.name} references unknown "
                f"cluster {component.cluster}"
            )
        id = self.new_component_id(component.type)
        stored = component.copy(deep=True, update=dict(id=id))
        self.components.setdefault(component.type, dict())[id] = stored
        return stored

    def edit_component(self, component: BaseComponent) -> BaseComponent:
        """Replace an existing component, keeping its id."""
        current = self.get_component(component.type, component.name)
        if component.cluster not in self.clusters:
            raise DanglingClusterReferenceError(
                f"Component {component.name} references unknown "
                f"cluster {component.cluster}"
            )
        stored = component.copy(deep=True, update=dict(id=current.id))
        self.components[component.type][current.id] = stored
        return stored

    def get_component(
        self, type: ComponentType | str, name: str
    ) -> BaseComponent:
        type = component_type(type)
        component = self._find(type, name)
        if component is None:
            raise NotFoundError(
                f"Component {name} of type {type.value} not found"
            )
        return component

    def get_component_by_id(
        self, type: ComponentType | str, id: int
    ) -> BaseComponent:
        type = component_type(type)
        components = self.components.get(type, {})
        if id not in components:
            raise NotFoundError(
                f"Component {id} of type {type.value} not found"
            )
        return components[id]

    def get_components_by_cluster_reference(
        self, type: ComponentType | str, cluster_ref: str
    ) -> list[BaseComponent]:
        return [
            component
            for _, component in sorted(
                self.components.get(component_type(type), {}).items()
            )
            if component.cluster == cluster_ref
        ]

    def remove_component(self, name: str, type: ComponentType | str) -> None:
        component = self.get_component(type, name)
        self.components[component_type(type)].pop(component.id)

    def change_node_phase(
        self,
        name: str,
        phase: DeploymentPhase | str,
        type: ComponentType | str = ComponentType.CONSENSUS_NODE,
    ) -> BaseComponent:
        """Move a component to another lifecycle phase.

        Raises:
            IllegalPhaseTransitionError:
                The transition is not allowed, nothing changes.
        """
        component = self.get_component(type, name)
        check_transition(name, component.phase, phase)
        component.phase = DeploymentPhase(phase)
        return component

    def validate(self) -> list[ValidationError]:
        """Collect every invariant violation without changing anything."""
        violations: list[ValidationError] = []
        for type, components in self.components.items():
            names: set[str] = set()
            for id, component in components.items():
                if component.id != id:
                    violations.append(
                        DuplicateComponentIdError(
                            f"Component {component.name} of type "
                            f"{type.value} is stored under id {id} "
                            f"but carries id {component.id}"
                        )
                    )
                if component.name in names:
                    violations.append(
                        DuplicateComponentError(
                            f"Component {component.name} of type "
                            f"{type.value} appears more than once"
                        )
                    )
                names.add(component.name)
                if component.cluster not in self.clusters:
                    violations.append(
                        DanglingClusterReferenceError(
                            f"Component {component.name} references "
                            f"unknown cluster {component.cluster}"
                        )
                    )
        node_ids: set[int] = set()
        for node in self.components.get(
            ComponentType.CONSENSUS_NODE, {}
        ).values():
            if isinstance(node, ConsensusNodeComponent):
                if node.node_id in node_ids:
                    violations.append(
                        DuplicateComponentIdError(
                            f"Consensus node id {node.node_id} is used "
                            "more than once"
                        )
                    )
                node_ids.add(node.node_id)
        return violations

    def _find(
        self, type: ComponentType, name: str
    ) -> BaseComponent | None:
        for component in self.components.get(type, {}).values():
            if component.name == name:
                return component
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComponentsRegistry):
            return NotImplemented
        return (
            self.clusters == other.clusters
            and self.components == other.components
        )
