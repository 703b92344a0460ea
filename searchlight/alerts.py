"""Cluster, node and pod alerts and their validation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, ClassVar, Mapping

from .icinga import (
    CLUSTER_COMMANDS,
    NODE_COMMANDS,
    POD_COMMANDS,
    NotifierLoader,
    Registry,
    SecretGetter,
    check_notifiers,
)
from .meta import (
    LabelSelector,
    ListMeta,
    ObjectMeta,
    ObjectReference,
    TypeMeta,
    format_duration,
    label_selector_as_selector,
    parse_duration,
)
from .plugin import ValidationError, validate_variables
from .schema import MONITORING_V1ALPHA1

RESOURCE_KIND_CLUSTER_ALERT = "ClusterAlert"
RESOURCE_PLURAL_CLUSTER_ALERT = "clusteralerts"
RESOURCE_SINGULAR_CLUSTER_ALERT = "clusteralert"

RESOURCE_KIND_NODE_ALERT = "NodeAlert"
RESOURCE_PLURAL_NODE_ALERT = "nodealerts"
RESOURCE_SINGULAR_NODE_ALERT = "nodealert"

RESOURCE_KIND_POD_ALERT = "PodAlert"
RESOURCE_PLURAL_POD_ALERT = "podalerts"
RESOURCE_SINGULAR_POD_ALERT = "podalert"


@dataclass
class Receiver:
    """Who is notified, for which state, and through which notifier."""

    state: str = ""
    to: list[str] = field(default_factory=list)
    notifier: str = ""

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.state:
            out["state"] = self.state
        if self.to:
            out["to"] = list(self.to)
        if self.notifier:
            out["notifier"] = self.notifier
        return out

    @staticmethod
    def _from_dict(data: Mapping[str, Any]) -> "Receiver":
        return Receiver(data.get("state", ""), list(data.get("to") or []), data.get("notifier", ""))


def _duration(data: Mapping[str, Any], key: str) -> timedelta:
    value = data.get(key)
    return parse_duration(value) if value else timedelta(0)


@dataclass
class _AlertSpec:
    check: str = ""
    check_interval: timedelta = timedelta(0)
    alert_interval: timedelta = timedelta(0)
    notifier_secret_name: str = ""
    receivers: list[Receiver] = field(default_factory=list)
    vars: dict[str, str] = field(default_factory=dict)
    paused: bool = False

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.check:
            out["check"] = self.check
        out["checkInterval"] = format_duration(self.check_interval)
        out["alertInterval"] = format_duration(self.alert_interval)
        if self.notifier_secret_name:
            out["notifierSecretName"] = self.notifier_secret_name
        if self.receivers:
            out["receivers"] = [r._to_dict() for r in self.receivers]
        if self.vars:
            out["vars"] = dict(self.vars)
        if self.paused:
            out["paused"] = True
        return out

    @staticmethod
    def _common(data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "check": data.get("check", ""),
            "check_interval": _duration(data, "checkInterval"),
            "alert_interval": _duration(data, "alertInterval"),
            "notifier_secret_name": data.get("notifierSecretName", ""),
            "receivers": [Receiver._from_dict(r) for r in data.get("receivers") or []],
            "vars": dict(data.get("vars") or {}),
            "paused": bool(data.get("paused", False)),
        }


@dataclass
class ClusterAlertSpec(_AlertSpec):
    """Desired state of a cluster-wide alert."""

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any]) -> "ClusterAlertSpec":
        return cls(**cls._common(data))


@dataclass
class NodeAlertSpec(_AlertSpec):
    """Desired state of an alert on nodes."""

    selector: dict[str, str] = field(default_factory=dict)
    node_name: str | None = None

    def _to_dict(self) -> dict[str, Any]:
        out = super()._to_dict()
        if self.selector:
            out["selector"] = dict(self.selector)
        if self.node_name is not None:
            out["nodeName"] = self.node_name
        return out

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any]) -> "NodeAlertSpec":
        return cls(
            selector=dict(data.get("selector") or {}),
            node_name=data.get("nodeName"),
            **cls._common(data),
        )


@dataclass
class PodAlertSpec(_AlertSpec):
    """Desired state of an alert on pods."""

    selector: LabelSelector | None = None
    pod_name: str | None = None

    def _to_dict(self) -> dict[str, Any]:
        out = super()._to_dict()
        if self.selector is not None:
            out["selector"] = self.selector.to_dict()
        if self.pod_name is not None:
            out["podName"] = self.pod_name
        return out

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any]) -> "PodAlertSpec":
        selector = data.get("selector")
        return cls(
            selector=LabelSelector.from_dict(selector) if selector is not None else None,
            pod_name=data.get("podName"),
            **cls._common(data),
        )


class Alert(ABC):
    """Behaviour shared by every kind of alert."""

    KIND: ClassVar[str]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def check_interval(self) -> timedelta:
        return self.spec.check_interval

    @property
    def alert_interval(self) -> timedelta:
        return self.spec.alert_interval

    @property
    def notifier_secret_name(self) -> str:
        return self.spec.notifier_secret_name

    @property
    def receivers(self) -> list[Receiver]:
        return self.spec.receivers

    def command(self) -> str:
        """Name of the check command run for this alert."""
        return self.spec.check

    @abstractmethod
    def is_valid(self, secrets: SecretGetter, load_notifier: NotifierLoader) -> None:
        """Raise ValidationError (or the notifier's error) when the alert is invalid."""

    def object_reference(self) -> ObjectReference:
        return ObjectReference(
            api_version=str(MONITORING_V1ALPHA1),
            kind=self.KIND,
            namespace=self.metadata.namespace,
            name=self.metadata.name,
            uid=self.metadata.uid,
            resource_version=self.metadata.resource_version,
        )

    def to_dict(self) -> dict[str, Any]:
        return {**self.type_meta.to_dict(), "metadata": self.metadata.to_dict(), "spec": self.spec._to_dict()}

    def _validate_command(
        self,
        registry: Registry,
        not_valid: str,
        unsupported_state: str,
        secrets: SecretGetter,
        load_notifier: NotifierLoader,
    ) -> None:
        spec = self.spec
        cmd = registry.get(spec.check)
        if cmd is None:
            raise ValidationError(not_valid.format(check=spec.check))
        validate_variables(cmd.vars, spec.vars)
        for receiver in spec.receivers:
            wanted = receiver.state.casefold()
            if not any(state.casefold() == wanted for state in cmd.states):
                raise ValidationError(unsupported_state.format(state=receiver.state, check=spec.check))
        check_notifiers(self, secrets, load_notifier)


@dataclass
class ClusterAlert(Alert):
    KIND: ClassVar[str] = RESOURCE_KIND_CLUSTER_ALERT

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterAlertSpec = field(default_factory=ClusterAlertSpec)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def command(self) -> str:
        return self.spec.check

    def is_valid(self, secrets: SecretGetter, load_notifier: NotifierLoader) -> None:
        if self.spec.paused:
            return
        self._validate_command(
            CLUSTER_COMMANDS,
            "'{check}' is not a valid cluster check command",
            "state '{state}' is unsupported for check command {check}",
            secrets,
            load_notifier,
        )

    def object_reference(self) -> ObjectReference:
        return super().object_reference()

    def to_dict(self) -> dict[str, Any]:
        return super().to_dict()

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ClusterAlert":
        return ClusterAlert(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ClusterAlertSpec._from_dict(data.get("spec") or {}),
            type_meta=TypeMeta.from_dict(data),
        )


@dataclass
class NodeAlert(Alert):
    KIND: ClassVar[str] = RESOURCE_KIND_NODE_ALERT

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: NodeAlertSpec = field(default_factory=NodeAlertSpec)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def command(self) -> str:
        return self.spec.check

    def is_valid(self, secrets: SecretGetter, load_notifier: NotifierLoader) -> None:
        if self.spec.paused:
            return
        if self.spec.node_name is not None and self.spec.selector:
            raise ValidationError("can't specify both node name and selector")
        self._validate_command(
            NODE_COMMANDS,
            "{check} is not a valid node check command",
            "state {state} is unsupported for check command {check}",
            secrets,
            load_notifier,
        )

    def object_reference(self) -> ObjectReference:
        return super().object_reference()

    def to_dict(self) -> dict[str, Any]:
        return super().to_dict()

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "NodeAlert":
        return NodeAlert(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=NodeAlertSpec._from_dict(data.get("spec") or {}),
            type_meta=TypeMeta.from_dict(data),
        )


@dataclass
class PodAlert(Alert):
    KIND: ClassVar[str] = RESOURCE_KIND_POD_ALERT

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PodAlertSpec = field(default_factory=PodAlertSpec)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def command(self) -> str:
        return self.spec.check

    def is_valid(self, secrets: SecretGetter, load_notifier: NotifierLoader) -> None:
        spec = self.spec
        if spec.paused:
            return
        if spec.pod_name is not None and spec.selector is not None:
            raise ValidationError("can't specify both pod name and selector")
        if spec.pod_name is None and spec.selector is None:
            raise ValidationError("specify either pod name or selector")
        if spec.selector is not None:
            try:
                label_selector_as_selector(spec.selector)
            except ValueError as err:
                raise ValidationError(str(err)) from err
        self._validate_command(
            POD_COMMANDS,
            "{check} is not a valid pod check command",
            "state {state} is unsupported for check command {check}",
            secrets,
            load_notifier,
        )

    def object_reference(self) -> ObjectReference:
        return super().object_reference()

    def to_dict(self) -> dict[str, Any]:
        return super().to_dict()

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PodAlert":
        return PodAlert(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=PodAlertSpec._from_dict(data.get("spec") or {}),
            type_meta=TypeMeta.from_dict(data),
        )


def _list_to_dict(items: list[Alert], metadata: ListMeta, type_meta: TypeMeta) -> dict[str, Any]:
    return {**type_meta.to_dict(), "metadata": metadata.to_dict(), "items": [i.to_dict() for i in items]}


def _list_kwargs(data: Mapping[str, Any], item: Callable[[Mapping[str, Any]], Alert]) -> dict[str, Any]:
    return {
        "items": [item(i) for i in data.get("items") or []],
        "metadata": ListMeta.from_dict(data.get("metadata")),
        "type_meta": TypeMeta.from_dict(data),
    }


@dataclass
class ClusterAlertList:
    items: list[ClusterAlert] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        return _list_to_dict(self.items, self.metadata, self.type_meta)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ClusterAlertList":
        return ClusterAlertList(**_list_kwargs(data, ClusterAlert.from_dict))


@dataclass
class NodeAlertList:
    items: list[NodeAlert] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        return _list_to_dict(self.items, self.metadata, self.type_meta)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "NodeAlertList":
        return NodeAlertList(**_list_kwargs(data, NodeAlert.from_dict))


@dataclass
class PodAlertList:
    items: list[PodAlert] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        return _list_to_dict(self.items, self.metadata, self.type_meta)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PodAlertList":
        return PodAlertList(**_list_kwargs(data, PodAlert.from_dict))