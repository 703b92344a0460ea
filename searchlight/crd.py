"""Custom resource definitions for the monitoring API types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .alerts import (
    RESOURCE_KIND_CLUSTER_ALERT,
    RESOURCE_KIND_NODE_ALERT,
    RESOURCE_KIND_POD_ALERT,
    RESOURCE_PLURAL_CLUSTER_ALERT,
    RESOURCE_PLURAL_NODE_ALERT,
    RESOURCE_PLURAL_POD_ALERT,
    RESOURCE_SINGULAR_CLUSTER_ALERT,
    RESOURCE_SINGULAR_NODE_ALERT,
    RESOURCE_SINGULAR_POD_ALERT,
)
from .incident import RESOURCE_KIND_INCIDENT, RESOURCE_PLURAL_INCIDENT, RESOURCE_SINGULAR_INCIDENT
from .plugin import (
    RESOURCE_KIND_SEARCHLIGHT_PLUGIN,
    RESOURCE_PLURAL_SEARCHLIGHT_PLUGIN,
    RESOURCE_SINGULAR_SEARCHLIGHT_PLUGIN,
)
from .schema import MONITORING_V1ALPHA1

NAMESPACE_SCOPED = "Namespaced"
CLUSTER_SCOPED = "Cluster"

CATEGORIES = ("monitoring", "appscode", "all")
LABELS = {"app": "searchlight"}


@dataclass(frozen=True)
class PrinterColumn:
    """An extra column shown when listing a custom resource."""

    name: str
    type: str
    json_path: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type, "JSONPath": self.json_path}


_AGE = PrinterColumn("Age", "date", ".metadata.creationTimestamp")
_ALERT_COLUMNS = (
    PrinterColumn("CheckCommand", "string", ".spec.check"),
    PrinterColumn("Paused", "boolean", ".spec.paused"),
    _AGE,
)


@dataclass(frozen=True)
class _Definition:
    plural: str
    singular: str
    short_names: tuple[str, ...]
    scope: str
    columns: tuple[PrinterColumn, ...]


_DEFINITIONS = {
    RESOURCE_KIND_CLUSTER_ALERT: _Definition(
        RESOURCE_PLURAL_CLUSTER_ALERT, RESOURCE_SINGULAR_CLUSTER_ALERT, ("ca",), NAMESPACE_SCOPED, _ALERT_COLUMNS
    ),
    RESOURCE_KIND_NODE_ALERT: _Definition(
        RESOURCE_PLURAL_NODE_ALERT, RESOURCE_SINGULAR_NODE_ALERT, ("noa",), NAMESPACE_SCOPED, _ALERT_COLUMNS
    ),
    RESOURCE_KIND_POD_ALERT: _Definition(
        RESOURCE_PLURAL_POD_ALERT, RESOURCE_SINGULAR_POD_ALERT, ("poa",), NAMESPACE_SCOPED, _ALERT_COLUMNS
    ),
    RESOURCE_KIND_INCIDENT: _Definition(
        RESOURCE_PLURAL_INCIDENT,
        RESOURCE_SINGULAR_INCIDENT,
        (),
        NAMESPACE_SCOPED,
        (PrinterColumn("LastNotification", "string", ".status.lastNotificationType"), _AGE),
    ),
    RESOURCE_KIND_SEARCHLIGHT_PLUGIN: _Definition(
        RESOURCE_PLURAL_SEARCHLIGHT_PLUGIN,
        RESOURCE_SINGULAR_SEARCHLIGHT_PLUGIN,
        ("sp",),
        CLUSTER_SCOPED,
        (PrinterColumn("Command", "string", ".spec.command"), _AGE),
    ),
}


def custom_resource_definition(kind: str, enable_status_subresource: bool = False) -> dict[str, Any]:
    """Build the custom resource definition for one of the monitoring kinds."""
    try:
        definition = _DEFINITIONS[kind]
    except KeyError:
        raise ValueError(f"no custom resource definition for kind {kind!r}") from None
    group = MONITORING_V1ALPHA1.group
    version = MONITORING_V1ALPHA1.version
    names: dict[str, Any] = {
        "plural": definition.plural,
        "singular": definition.singular,
        "kind": kind,
        "listKind": f"{kind}List",
        "categories": list(CATEGORIES),
    }
    if definition.short_names:
        names["shortNames"] = list(definition.short_names)
    spec: dict[str, Any] = {
        "group": group,
        "version": version,
        "names": names,
        "scope": definition.scope,
        "versions": [{"name": version, "served": True, "storage": True}],
        "additionalPrinterColumns": [c.to_dict() for c in definition.columns],
    }
    if enable_status_subresource:
        spec["subresources"] = {"status": {}}
    return {
        "apiVersion": "apiextensions.k8s.io/v1beta1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{definition.plural}.{group}", "labels": dict(LABELS)},
        "spec": spec,
    }