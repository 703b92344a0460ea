"""Check plugins and validation of the variables passed to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Mapping

from .meta import ListMeta, ObjectMeta, TypeMeta, parse_duration

RESOURCE_KIND_SEARCHLIGHT_PLUGIN = "SearchlightPlugin"
RESOURCE_PLURAL_SEARCHLIGHT_PLUGIN = "searchlightplugins"
RESOURCE_SINGULAR_SEARCHLIGHT_PLUGIN = "searchlightplugin"


class ValidationError(ValueError):
    """Raised when an object or its variables are invalid."""


class VarType(str, Enum):
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    DURATION = "duration"

    def __str__(self) -> str:
        return self.value


def _raw(values: Mapping[str, str], key: str) -> str:
    if key not in values:
        raise KeyError(key)
    return values[key]


def _plain(text: str) -> str:
    if text != text.strip() or "_" in text or not text:
        raise ValueError(f"invalid syntax: {text!r}")
    return text


def get_int(values: Mapping[str, str], key: str) -> int:
    return int(_plain(_raw(values, key)), 10)


def get_float(values: Mapping[str, str], key: str) -> float:
    return float(_plain(_raw(values, key)))


_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def get_bool(values: Mapping[str, str], key: str) -> bool:
    text = _raw(values, key)
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def get_string(values: Mapping[str, str], key: str) -> str:
    return _raw(values, key)


def get_duration(values: Mapping[str, str], key: str) -> timedelta:
    return parse_duration(_raw(values, key))


Parser = Callable[[Mapping[str, str], str], Any]

_var_parsers: dict[VarType, Parser] = {}


def register_var_value_parser(var_type: VarType, parser: Parser) -> None:
    _var_parsers[VarType(var_type)] = parser


register_var_value_parser(VarType.INTEGER, get_int)
register_var_value_parser(VarType.NUMBER, get_float)
register_var_value_parser(VarType.BOOLEAN, get_bool)
register_var_value_parser(VarType.STRING, get_string)
register_var_value_parser(VarType.DURATION, get_duration)


@dataclass
class PluginVarField:
    type: VarType
    description: str = ""


@dataclass
class PluginVars:
    fields: dict[str, PluginVarField] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "fields": {
                name: {"type": f.type.value, **({"description": f.description} if f.description else {})}
                for name, f in self.fields.items()
            }
        }
        if self.required:
            out["required"] = list(self.required)
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PluginVars":
        return PluginVars(
            fields={
                name: PluginVarField(VarType(f["type"]), f.get("description", ""))
                for name, f in (data.get("fields") or {}).items()
            },
            required=list(data.get("required") or []),
        )


def validate_variables(plugin_vars: PluginVars | None, variables: Mapping[str, str] | None) -> None:
    """Check variables against a plugin's declared fields; raise ValidationError."""
    if plugin_vars is None:
        return
    variables = variables or {}
    for key in variables:
        spec = plugin_vars.fields.get(key)
        if spec is None:
            raise ValidationError(f"var '{key}' is unsupported")
        parser = _var_parsers.get(spec.type)
        if parser is None:
            raise ValidationError(f'type "{spec.type}" is not registered')
        try:
            parser(variables, key)
        except (ValueError, KeyError) as err:
            raise ValidationError(
                f'validation failure: variable "{key}" must be of type {spec.type}: {err}'
            ) from err
    for key in plugin_vars.required:
        if key not in variables:
            raise ValidationError(f"plugin variable '{key}' is required")


@dataclass
class PluginArguments:
    vars: PluginVars | None = None
    host: dict[str, str] = field(default_factory=dict)


@dataclass
class WebhookServiceSpec:
    name: str
    namespace: str = ""


@dataclass
class SearchlightPluginSpec:
    command: str = ""
    webhook: WebhookServiceSpec | None = None
    alert_kinds: list[str] = field(default_factory=list)
    arguments: PluginArguments = field(default_factory=PluginArguments)
    states: list[str] = field(default_factory=list)


def _spec_to_dict(spec: SearchlightPluginSpec) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if spec.command:
        out["command"] = spec.command
    if spec.webhook is not None:
        hook = {"name": spec.webhook.name}
        if spec.webhook.namespace:
            hook["namespace"] = spec.webhook.namespace
        out["webhook"] = hook
    out["alertKinds"] = list(spec.alert_kinds)
    args: dict[str, Any] = {}
    if spec.arguments.vars is not None:
        args["vars"] = spec.arguments.vars.to_dict()
    if spec.arguments.host:
        args["host"] = dict(spec.arguments.host)
    out["arguments"] = args
    out["states"] = list(spec.states)
    return out


def _spec_from_dict(data: Mapping[str, Any]) -> SearchlightPluginSpec:
    hook = data.get("webhook")
    args = data.get("arguments") or {}
    return SearchlightPluginSpec(
        command=data.get("command", ""),
        webhook=WebhookServiceSpec(hook["name"], hook.get("namespace", "")) if hook else None,
        alert_kinds=list(data.get("alertKinds") or []),
        arguments=PluginArguments(
            vars=PluginVars.from_dict(args["vars"]) if args.get("vars") is not None else None,
            host=dict(args.get("host") or {}),
        ),
        states=list(data.get("states") or []),
    )


@dataclass
class SearchlightPlugin:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SearchlightPluginSpec = field(default_factory=SearchlightPluginSpec)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        return {**self.type_meta.to_dict(), "metadata": self.metadata.to_dict(), "spec": _spec_to_dict(self.spec)}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "SearchlightPlugin":
        return SearchlightPlugin(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=_spec_from_dict(data.get("spec") or {}),
            type_meta=TypeMeta.from_dict(data),
        )


@dataclass
class SearchlightPluginList:
    items: list[SearchlightPlugin] = field(default_factory=list)
    metadata: ListMeta = field(default_factory=ListMeta)
    type_meta: TypeMeta = field(default_factory=TypeMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.type_meta.to_dict(),
            "metadata": self.metadata.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "SearchlightPluginList":
        return SearchlightPluginList(
            items=[SearchlightPlugin.from_dict(i) for i in data.get("items") or []],
            metadata=ListMeta.from_dict(data.get("metadata")),
            type_meta=TypeMeta.from_dict(data),
        )