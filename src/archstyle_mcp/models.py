"""
Minimal architecture model: tagged elements and relationships.

Only what style resolution needs is modelled here: elements and
relationships with ordered tags, containers inside software systems,
and deployment nodes whose container instances get relationship
instances linked back to the relationships between their containers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional


# ---------------------------------------------------------------------------
# Well-known tags
# ---------------------------------------------------------------------------

class Tags:
    """Tags the model assigns automatically."""
    ELEMENT = "Element"
    RELATIONSHIP = "Relationship"
    PERSON = "Person"
    SOFTWARE_SYSTEM = "Software System"
    CONTAINER = "Container"
    COMPONENT = "Component"
    DEPLOYMENT_NODE = "Deployment Node"
    CONTAINER_INSTANCE = "Container Instance"


class _Tagged:
    """Ordered, duplicate-free tag handling shared by elements and relationships."""

    tags: list[str]

    def add_tags(self, *tags: str) -> None:
        for tag in tags:
            if tag is None:
                continue
            tag = tag.strip()
            if tag and tag not in self.tags:
                self.tags.append(tag)

    def remove_tag(self, tag: str) -> bool:
        if tag in self.tags:
            self.tags.remove(tag)
            return True
        return False

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Relationship(_Tagged):
    """A directed relationship between two elements.

    A relationship instance (between two container instances) carries no
    tags of its own and points at the relationship it was derived from
    through ``linked_relationship``.
    """
    source: Element
    destination: Element
    description: str = ""
    technology: str = ""
    tags: list[str] = field(default_factory=list)
    linked_relationship: Optional[Relationship] = None

    def __post_init__(self) -> None:
        if self.linked_relationship is None:
            if Tags.RELATIONSHIP not in self.tags:
                self.tags.insert(0, Tags.RELATIONSHIP)


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Element(_Tagged):
    """Base class for everything that can appear as a box on a diagram."""
    name: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    model: Optional[Model] = field(default=None, repr=False)

    DEFAULT_TAGS: ClassVar[tuple[str, ...]] = (Tags.ELEMENT,)

    def __post_init__(self) -> None:
        self.tags[:0] = [t for t in self.DEFAULT_TAGS if t not in self.tags]

    def uses(self, destination: Element, description: str = "",
             technology: str = "") -> Relationship:
        """Add a relationship from this element to *destination*."""
        return self._require_model().add_relationship(
            self, destination, description, technology)

    @property
    def efferent_relationships(self) -> list[Relationship]:
        if self.model is None:
            return []
        return [r for r in self.model.relationships if r.source is self]

    def get_efferent_relationship_with(self, other: Element) -> Optional[Relationship]:
        for rel in self.efferent_relationships:
            if rel.destination is other:
                return rel
        return None

    def _require_model(self) -> Model:
        if self.model is None:
            raise ValueError(f"Element '{self.name}' does not belong to a model.")
        return self.model


@dataclass(eq=False)
class Person(Element):
    DEFAULT_TAGS = (Tags.ELEMENT, Tags.PERSON)


@dataclass(eq=False)
class Container(Element):
    technology: str = ""
    software_system: Optional[SoftwareSystem] = field(default=None, repr=False)

    DEFAULT_TAGS = (Tags.ELEMENT, Tags.CONTAINER)


@dataclass(eq=False)
class SoftwareSystem(Element):
    containers: list[Container] = field(default_factory=list, repr=False)

    DEFAULT_TAGS = (Tags.ELEMENT, Tags.SOFTWARE_SYSTEM)

    def add_container(self, name: str, description: str = "",
                      technology: str = "") -> Container:
        container = Container(name, description, model=self.model,
                              technology=technology, software_system=self)
        self.containers.append(container)
        if self.model is not None:
            self.model.elements.append(container)
        return container


@dataclass(eq=False)
class ContainerInstance(Element):
    container: Optional[Container] = field(default=None, repr=False)
    deployment_node: Optional[DeploymentNode] = field(default=None, repr=False)
    environment: str = "Default"

    DEFAULT_TAGS = (Tags.CONTAINER_INSTANCE,)


@dataclass(eq=False)
class DeploymentNode(Element):
    technology: str = ""
    environment: str = "Default"
    container_instances: list[ContainerInstance] = field(default_factory=list, repr=False)

    DEFAULT_TAGS = (Tags.ELEMENT, Tags.DEPLOYMENT_NODE)

    def add(self, container: Container) -> ContainerInstance:
        """Deploy *container* on this node.

        Relationships between *container* and containers already deployed
        in the same environment are replicated as relationship instances.
        """
        model = self._require_model()
        instance = ContainerInstance(container.name, container.description,
                                     model=model, container=container,
                                     deployment_node=self,
                                     environment=self.environment)
        self.container_instances.append(instance)
        model.elements.append(instance)
        model.replicate_relationships(instance)
        return instance


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Model:
    """Container of all elements and relationships of a workspace."""
    elements: list[Element] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    def add_person(self, name: str, description: str = "") -> Person:
        person = Person(name, description, model=self)
        self.elements.append(person)
        return person

    def add_software_system(self, name: str, description: str = "") -> SoftwareSystem:
        system = SoftwareSystem(name, description, model=self)
        self.elements.append(system)
        return system

    def add_deployment_node(self, name: str, description: str = "",
                            technology: str = "",
                            environment: str = "Default") -> DeploymentNode:
        node = DeploymentNode(name, description, model=self,
                              technology=technology, environment=environment)
        self.elements.append(node)
        return node

    def add_relationship(self, source: Element, destination: Element,
                         description: str = "", technology: str = "",
                         linked: Optional[Relationship] = None) -> Relationship:
        rel = Relationship(source, destination, description, technology,
                           linked_relationship=linked)
        self.relationships.append(rel)
        return rel

    def replicate_relationships(self, instance: ContainerInstance) -> None:
        """Create relationship instances between *instance* and its peers."""
        for other in self.elements:
            if (not isinstance(other, ContainerInstance) or other is instance
                    or other.environment != instance.environment):
                continue
            for source, destination in ((instance, other), (other, instance)):
                for rel in list(self.relationships):
                    if (rel.linked_relationship is None
                            and rel.source is source.container
                            and rel.destination is destination.container):
                        self.add_relationship(source, destination,
                                              rel.description, rel.technology,
                                              linked=rel)
