"""Incidents recorded for alerts and their notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from .meta import ListMeta, ObjectMeta, TypeMeta, _format_time, _opt_time

RESOURCE_KIND_INCIDENT = "Incident"
RESOURCE_PLURAL_INCIDENT = "incidents"
RESOURCE_SINGULAR_INCIDENT = "incident"


class IncidentNotificationType(str, Enum):
    PROBLEM = "Problem"
    ACKNOWLEDGEMENT = "Acknowledgement"
    RECOVERY = "Recovery"
    CUSTOM = "Custom"

    def __str__(self) -> str:
        return self.value


@dataclass
class IncidentNotification:
    type: IncidentNotificationType
    last_state: str = ""
    check_output: str = ""
    author: str | None = None
    comment: str | None = None
    first_timestamp: datetime | None = None
    last_timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type.value, "checkOutput": self.check_output}
        if self.author is not None:
            out["author"] = self.author
        if self.comment is not None:
            out["comment"] = self.comment
        if self.first_timestamp is not None:
            out["firstTimestamp"] = _format_time(self.first_timestamp)
        if self.last_timestamp is not None:
            out["lastTimestamp"] = _format_time(self.last_timestamp)
        out["state"] = self.last_state
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "IncidentNotification":
        return IncidentNotification(
            type=IncidentNotificationType(data["type"]),
            last_state=data.get("state", ""),
            check_output=data.get("checkOutput", ""),
            author=data.get("author"),
            comment=data.get("comment"),
            first_timestamp=_opt_time(data, "firstTimestamp"),
            last_timestamp=_opt_time(data, "lastTimestamp"),
        )


@dataclass
class IncidentStatus:
    last_notification_type: IncidentNotificationType | None = None
    notifications: list[IncidentNotification] = field(default_factory=list)


@dataclass
class Incident:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: IncidentStatus = field(default_factory=IncidentStatus)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        last = self.status.last_notification_type
        status: dict[str, Any] = {"lastNotificationType": last.value if last else ""}
        if self.status.notifications:
            status["notifications"] = [n.to_dict() for n in self.status.notifications]
        return {**self.type_meta.to_dict(), "metadata": self.metadata.to_dict(), "status": status}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Incident":
        status = data.get("status") or {}
        last = status.get("lastNotificationType")
        return Incident(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            status=IncidentStatus(
                last_notification_type=IncidentNotificationType(last) if last else None,
                notifications=[IncidentNotification.from_dict(n) for n in status.get("notifications") or []],
            ),
            type_meta=TypeMeta.from_dict(data),
        )


@dataclass
class IncidentList:
    items: list[Incident] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.type_meta.to_dict(),
            "metadata": self.metadata.to_dict(),
            "items": [i.to_dict() for i in self.items],
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "IncidentList":
        return IncidentList(
            items=[Incident.from_dict(i) for i in data.get("items") or []],
            metadata=ListMeta.from_dict(data.get("metadata")),
            type_meta=TypeMeta.from_dict(data),
        )