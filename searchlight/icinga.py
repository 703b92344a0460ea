"""Registries of check commands and notifier credential checks."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from .incident import IncidentNotificationType
from .plugin import PluginVars

CHECK_POD_STATUS = "pod-status"
CHECK_POD_VOLUME = "pod-volume"
CHECK_POD_EXEC = "pod-exec"

CHECK_NODE_VOLUME = "node-volume"
CHECK_NODE_STATUS = "node-status"

CHECK_COMPONENT_STATUS = "component-status"
CHECK_JSON_PATH = "json-path"
CHECK_NODE_EXISTS = "node-exists"
CHECK_POD_EXISTS = "pod-exists"
CHECK_EVENT = "event"
CHECK_CA_CERT = "ca-cert"


@dataclass
class IcingaCommand:
    name: str
    vars: PluginVars | None = None
    states: list[str] = field(default_factory=list)


class Registry:
    """Thread-safe mapping of command names to check commands."""

    def __init__(self) -> None:
        self._reg: dict[str, IcingaCommand] = {}
        self._lock = threading.RLock()

    def get(self, cmd: str) -> IcingaCommand | None:
        with self._lock:
            return self._reg.get(cmd)

    def insert(self, cmd: str, command: IcingaCommand) -> None:
        with self._lock:
            self._reg[cmd] = command

    def delete(self, cmd: str) -> None:
        with self._lock:
            self._reg.pop(cmd, None)

    def __contains__(self, cmd: object) -> bool:
        with self._lock:
            return cmd in self._reg


POD_COMMANDS = Registry()
NODE_COMMANDS = Registry()
CLUSTER_COMMANDS = Registry()


def alert_type(t: str) -> IncidentNotificationType:
    """Map a notification type name, case-insensitively, to its enum value."""
    return {
        "PROBLEM": IncidentNotificationType.PROBLEM,
        "ACKNOWLEDGEMENT": IncidentNotificationType.ACKNOWLEDGEMENT,
        "RECOVERY": IncidentNotificationType.RECOVERY,
    }.get(t.upper(), IncidentNotificationType.CUSTOM)


SecretGetter = Callable[[str, str], Mapping[str, bytes]]
NotifierLoader = Callable[[str, Callable[[str], Optional[str]]], Any]


def check_notifiers(alert: Any, secrets: SecretGetter, load_notifier: NotifierLoader) -> None:
    """Check that every receiver's notifier loads from the alert's secret.

    ``secrets(namespace, name)`` returns the secret's data; ``load_notifier(name, lookup)``
    builds a notifier, reading credentials through ``lookup(key)``. Errors propagate.
    """
    if not alert.notifier_secret_name and not alert.receivers:
        return
    data = secrets(alert.namespace, alert.notifier_secret_name)

    def lookup(key: str) -> str | None:
        raw = data.get(key)
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, (bytes, bytearray)) else str(raw)

    for receiver in alert.receivers:
        load_notifier(receiver.notifier, lookup)