# searchlight

Typed Python models for monitoring alerts that run as Icinga checks against a
Kubernetes cluster, the rules that decide whether an alert is valid, and the
custom resource definitions for these resource kinds. The package has no
dependencies outside the standard library.

## Modules

- `searchlight.meta`: object metadata (`TypeMeta`, `ObjectMeta`, `ListMeta`),
  `ObjectReference`, `LabelSelector` and `LabelSelectorRequirement`; duration
  strings such as `"1h30m"` with `parse_duration` and `format_duration`; label
  selector strings with `selector_from_set` and `label_selector_as_selector`;
  the label and annotation keys (`LABEL_KEY_ALERT`, `ANNOTATION_KEY_ALERTS`
  and others).
- `searchlight.schema`: `GroupVersion`, `GroupVersionKind`,
  `GroupVersionResource`, `GroupKind`, `GroupResource`, the group versions
  `MONITORING_V1ALPHA1`, `INCIDENTS_INTERNAL` and `INCIDENTS_V1ALPHA1`, and
  the helpers `monitoring_resource`, `incidents_kind`, `incidents_resource`
  and `incidents_v1alpha1_resource`.
- `searchlight.alerts`: `ClusterAlert`, `NodeAlert` and `PodAlert`, each with
  its spec and list type, the common base `Alert`, and `Receiver`.
- `searchlight.icinga`: the check command `Registry` and the three registries
  `CLUSTER_COMMANDS`, `NODE_COMMANDS` and `POD_COMMANDS`, `IcingaCommand`,
  the check command names (`CHECK_NODE_EXISTS`, `CHECK_POD_STATUS`, ...),
  `alert_type` and `check_notifiers`.
- `searchlight.plugin`: `SearchlightPlugin` and its list, the plugin variable
  declarations (`VarType`, `PluginVarField`, `PluginVars`), the value parsers
  `get_int`, `get_float`, `get_bool`, `get_string`, `get_duration`,
  `register_var_value_parser`, `validate_variables` and `ValidationError`.
- `searchlight.incident`: `Incident`, `IncidentList`, `IncidentStatus`,
  `IncidentNotification` and `IncidentNotificationType`.
- `searchlight.crd`: `custom_resource_definition` and `PrinterColumn`.

## Installing

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Validating an alert

Check commands are registered in one of the command registries. An alert is
valid when its check is registered, its variables fit the command's declared
variables (unknown variables, values of the wrong type and missing required
variables are all rejected), every receiver names a state the command
supports (compared without regard to case), and every receiver's notifier
can be loaded from the notifier secret. A paused alert is always valid.

```python
from searchlight.alerts import ClusterAlert, ClusterAlertSpec, Receiver
from searchlight.icinga import CLUSTER_COMMANDS, IcingaCommand
from searchlight.meta import ObjectMeta
from searchlight.plugin import PluginVarField, PluginVars, ValidationError, VarType

CLUSTER_COMMANDS.insert(
    "node-exists",
    IcingaCommand(
        name="node-exists",
        vars=PluginVars(fields={"count": PluginVarField(VarType.INTEGER)}),
        states=["OK", "Critical", "Unknown"],
    ),
)

alert = ClusterAlert(
    metadata=ObjectMeta(name="nodes", namespace="demo"),
    spec=ClusterAlertSpec(
        check="node-exists",
        vars={"count": "3"},
        notifier_secret_name="notifier",
        receivers=[Receiver(state="Critical", to=["ops"], notifier="webhook")],
    ),
)


def secrets(namespace, name):
    # Return the data of the secret `name` in `namespace`.
    return {"WEBHOOK_URL": b"http://localhost:8080"}


def load_notifier(name, lookup):
    # Build the notifier `name`, reading credentials with lookup(key);
    # raise if it cannot be built.
    if lookup("WEBHOOK_URL") is None:
        raise ValueError("WEBHOOK_URL is missing")


alert.is_valid(secrets, load_notifier)   # returns None when valid

alert.spec.vars["count"] = "three"
try:
    alert.is_valid(secrets, load_notifier)
except ValidationError as err:
    print(err)
```

`is_valid` raises `ValidationError` for invalid alerts; errors raised by
`secrets` or `load_notifier` propagate unchanged. A `NodeAlert` may not give
both a node name and a selector; a `PodAlert` must give exactly one of a pod
name and a label selector, and the selector must be well formed.

`alert_type` maps a notification type name, in any case, to
`IncidentNotificationType`, with anything unknown becoming `CUSTOM`.

## Encoding and decoding

Every resource converts to and from the dictionaries of its JSON form with
`to_dict` and `from_dict`:

```python
document = alert.to_dict()
assert ClusterAlert.from_dict(document) == alert
```

Durations are written in the form `"5m0s"` and timestamps as
`"2024-01-02T03:04:05Z"`.

## Custom resource definitions

```python
from searchlight.crd import custom_resource_definition

crd = custom_resource_definition("PodAlert", enable_status_subresource=True)
crd["metadata"]["name"]   # "podalerts.monitoring.appscode.com"
```

Definitions exist for `ClusterAlert`, `NodeAlert`, `PodAlert`, `Incident` and
`SearchlightPlugin`; any other kind raises `ValueError`.

## What the package does not do

- It does not talk to a Kubernetes cluster or to Icinga. Secrets and
  notifiers reach the validation rules only through the callables you pass
  to `is_valid` and `check_notifiers`.
- It has no command line program and runs no operator or server.
- There is no registry of types that picks the class from a document's
  `apiVersion` and `kind`; call `from_dict` on the class you expect.
- Acknowledgements of incidents are not modelled.