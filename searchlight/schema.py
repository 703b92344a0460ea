"""API groups, versions, kinds and resources."""

from __future__ import annotations

from dataclasses import dataclass

API_VERSION_INTERNAL = "__internal"

MONITORING_GROUP_NAME = "monitoring.appscode.com"
INCIDENTS_GROUP_NAME = "incidents.monitoring.appscode.com"


@dataclass(frozen=True)
class GroupKind:
    group: str
    kind: str

    def __str__(self) -> str:
        return f"{self.kind}.{self.group}" if self.group else self.kind


@dataclass(frozen=True)
class GroupResource:
    group: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource}.{self.group}" if self.group else self.resource


@dataclass(frozen=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def group_kind(self) -> GroupKind:
        return GroupKind(self.group, self.kind)

    @property
    def group_version(self) -> "GroupVersion":
        return GroupVersion(self.group, self.version)


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)


@dataclass(frozen=True)
class GroupVersion:
    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, kind)

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, resource)


MONITORING_V1ALPHA1 = GroupVersion(MONITORING_GROUP_NAME, "v1alpha1")
INCIDENTS_INTERNAL = GroupVersion(INCIDENTS_GROUP_NAME, API_VERSION_INTERNAL)
INCIDENTS_V1ALPHA1 = GroupVersion(INCIDENTS_GROUP_NAME, "v1alpha1")


def monitoring_resource(resource: str) -> GroupResource:
    """Qualify a resource with the monitoring group."""
    return MONITORING_V1ALPHA1.with_resource(resource).group_resource()


def incidents_kind(kind: str) -> GroupKind:
    """Qualify a kind with the incidents group."""
    return INCIDENTS_INTERNAL.with_kind(kind).group_kind()


def incidents_resource(resource: str) -> GroupResource:
    """Qualify a resource with the incidents group."""
    return INCIDENTS_INTERNAL.with_resource(resource).group_resource()


def incidents_v1alpha1_resource(resource: str) -> GroupResource:
    """Qualify a resource with the versioned incidents group."""
    return INCIDENTS_V1ALPHA1.with_resource(resource).group_resource()