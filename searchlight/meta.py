"""Object metadata, label selectors and duration helpers shared by all API types."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping

LABEL_KEY_ALERT = "monitoring.appscode.com/alert"
LABEL_KEY_ALERT_TYPE = "monitoring.appscode.com/alert-type"
LABEL_KEY_OBJECT_NAME = "monitoring.appscode.com/object-name"
LABEL_KEY_PROBLEM_RECOVERED = "monitoring.appscode.com/recovered"

ANNOTATION_KEY_ALERTS = "monitoring.appscode.com/alerts"

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _parse_time(text: str) -> datetime:
    return datetime.strptime(text, _TIME_FORMAT).replace(tzinfo=timezone.utc)


def _opt_time(data: Mapping[str, Any], key: str) -> datetime | None:
    value = data.get(key)
    return _parse_time(value) if value else None


_UNITS_US = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}
_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"1h30m"`` or ``"300ms"``."""
    if not isinstance(text, str) or not text:
        raise ValueError(f"invalid duration {text!r}")
    body = text
    sign = 1
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")
    total = 0.0
    pos = 0
    while pos < len(body):
        match = _PART.match(body, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _UNITS_US[match.group(2)]
        pos = match.end()
    return timedelta(microseconds=sign * total)


def _trim(number: str) -> str:
    if "." in number:
        number = number.rstrip("0").rstrip(".")
    return number


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way durations are written in resources, e.g. ``"5m0s"``."""
    micros = value // timedelta(microseconds=1)
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim(f'{micros / 1000:.3f}')}ms"
    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _trim(f"{rest / 1_000_000:.6f}")
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


@dataclass
class TypeMeta:
    """API version and kind of an object."""

    api_version: str = ""
    kind: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.api_version:
            out["apiVersion"] = self.api_version
        if self.kind:
            out["kind"] = self.kind
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "TypeMeta":
        return TypeMeta(data.get("apiVersion", ""), data.get("kind", ""))


@dataclass
class ObjectMeta:
    """Identity and labels of a stored object."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    creation_timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in (
            ("name", self.name),
            ("namespace", self.namespace),
            ("uid", self.uid),
            ("resourceVersion", self.resource_version),
        ):
            if value:
                out[key] = value
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.creation_timestamp is not None:
            out["creationTimestamp"] = _format_time(self.creation_timestamp)
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any] | None) -> "ObjectMeta":
        data = data or {}
        return ObjectMeta(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            uid=data.get("uid", ""),
            resource_version=data.get("resourceVersion", ""),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            creation_timestamp=_opt_time(data, "creationTimestamp"),
        )


@dataclass
class ListMeta:
    """Metadata of a list of objects."""

    resource_version: str = ""
    continue_token: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.resource_version:
            out["resourceVersion"] = self.resource_version
        if self.continue_token:
            out["continue"] = self.continue_token
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any] | None) -> "ListMeta":
        data = data or {}
        return ListMeta(data.get("resourceVersion", ""), data.get("continue", ""))


@dataclass(frozen=True)
class ObjectReference:
    """A reference to a specific object."""

    api_version: str = ""
    kind: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    resource_version: str = ""


class _Operator(str, Enum):
    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass
class LabelSelectorRequirement:
    """One expression of a label selector."""

    key: str
    operator: str
    values: list[str] = field(default_factory=list)


@dataclass
class LabelSelector:
    """Label selector made of exact matches and expressions."""

    match_labels: dict[str, str] = field(default_factory=dict)
    match_expressions: list[LabelSelectorRequirement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.match_labels:
            out["matchLabels"] = dict(self.match_labels)
        if self.match_expressions:
            out["matchExpressions"] = [
                {"key": r.key, "operator": r.operator, **({"values": list(r.values)} if r.values else {})}
                for r in self.match_expressions
            ]
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any] | None) -> "LabelSelector":
        data = data or {}
        return LabelSelector(
            match_labels=dict(data.get("matchLabels") or {}),
            match_expressions=[
                LabelSelectorRequirement(e["key"], e["operator"], list(e.get("values") or []))
                for e in data.get("matchExpressions") or []
            ],
        )


def selector_from_set(labels: Mapping[str, str] | None) -> str:
    """Render a label set as a selector string with keys in sorted order."""
    return ",".join(f"{k}={v}" for k, v in sorted((labels or {}).items()))


def _requirement(req: LabelSelectorRequirement) -> str:
    try:
        op = _Operator(req.operator)
    except ValueError:
        raise ValueError(f"{req.operator!r} is not a valid pod selector operator") from None
    if op in (_Operator.IN, _Operator.NOT_IN):
        if not req.values:
            raise ValueError(f"for '{op.value}' operator, values set can't be empty")
        word = "in" if op is _Operator.IN else "notin"
        return f"{req.key} {word} ({','.join(sorted(req.values))})"
    if req.values:
        raise ValueError(f"values set must be empty for {op.value}")
    return req.key if op is _Operator.EXISTS else f"!{req.key}"


def label_selector_as_selector(selector: LabelSelector | None) -> str:
    """Convert a LabelSelector to its string form; raise ValueError when invalid."""
    if selector is None:
        return ""
    parts = [(k, f"{k}={v}") for k, v in selector.match_labels.items()]
    parts += [(r.key, _requirement(r)) for r in selector.match_expressions]
    return ",".join(text for _, text in sorted(parts, key=lambda p: p[0]))