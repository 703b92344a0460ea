from datetime import datetime, timedelta, timezone

import pytest

from searchlight.alerts import (
    RESOURCE_KIND_CLUSTER_ALERT,
    RESOURCE_KIND_POD_ALERT,
    Alert,
    ClusterAlert,
    ClusterAlertList,
    ClusterAlertSpec,
    NodeAlert,
    NodeAlertList,
    NodeAlertSpec,
    PodAlert,
    PodAlertList,
    PodAlertSpec,
    Receiver,
)
from searchlight.icinga import CLUSTER_COMMANDS, NODE_COMMANDS, POD_COMMANDS, IcingaCommand
from searchlight.meta import LabelSelector, LabelSelectorRequirement, ListMeta, ObjectMeta, ObjectReference
from searchlight.plugin import PluginVarField, PluginVars, ValidationError, VarType
from searchlight.schema import MONITORING_V1ALPHA1


class _Secrets:
    def __init__(self, data=None):
        self.data = data or {}
        self.calls = []

    def __call__(self, namespace, name):
        self.calls.append((namespace, name))
        return self.data


class _Loader:
    def __init__(self):
        self.loaded = []

    def __call__(self, name, lookup):
        self.loaded.append((name, lookup("WEBHOOK_URL")))


def _command(name):
    return IcingaCommand(
        name=name,
        vars=PluginVars(
            fields={"count": PluginVarField(VarType.INTEGER), "selector": PluginVarField(VarType.STRING)},
            required=[],
        ),
        states=["OK", "Critical", "Unknown"],
    )


@pytest.fixture
def cluster_check():
    cmd = _command("test-cluster-check")
    CLUSTER_COMMANDS.insert(cmd.name, cmd)
    yield cmd.name
    CLUSTER_COMMANDS.delete(cmd.name)


@pytest.fixture
def node_check():
    cmd = IcingaCommand(
        name="test-node-check",
        vars=PluginVars(fields={"warning": PluginVarField(VarType.NUMBER)}, required=["warning"]),
        states=["OK", "Warning", "Critical"],
    )
    NODE_COMMANDS.insert(cmd.name, cmd)
    yield cmd.name
    NODE_COMMANDS.delete(cmd.name)


@pytest.fixture
def pod_check():
    cmd = _command("test-pod-check")
    POD_COMMANDS.insert(cmd.name, cmd)
    yield cmd.name
    POD_COMMANDS.delete(cmd.name)


def _cluster_alert(check, **spec):
    return ClusterAlert(
        metadata=ObjectMeta(name="ca", namespace="demo", labels={"app": "searchlight-e2e"}),
        spec=ClusterAlertSpec(
            check=check,
            check_interval=timedelta(seconds=5),
            alert_interval=timedelta(minutes=5),
            **spec,
        ),
    )


def test_valid_cluster_alert_loads_notifiers(cluster_check):
    alert = _cluster_alert(
        cluster_check,
        vars={"count": "3"},
        notifier_secret_name="notifier",
        receivers=[Receiver(state="critical", to=["ops"], notifier="webhook")],
    )
    secrets = _Secrets({"WEBHOOK_URL": b"http://localhost:9000"})
    loader = _Loader()
    alert.is_valid(secrets, loader)
    assert secrets.calls == [("demo", "notifier")]
    assert loader.loaded == [("webhook", "http://localhost:9000")]


def test_no_receivers_and_no_secret_skips_notifiers(cluster_check):
    alert = _cluster_alert(cluster_check)
    secrets = _Secrets()
    loader = _Loader()
    alert.is_valid(secrets, loader)
    assert secrets.calls == []
    assert loader.loaded == []


def test_paused_alert_is_not_checked():
    alert = _cluster_alert("no-such-check", paused=True, receivers=[Receiver(state="x", notifier="y")])
    secrets = _Secrets()
    alert.is_valid(secrets, _Loader())
    assert secrets.calls == []


def test_unknown_cluster_command():
    alert = _cluster_alert("no-such-check")
    with pytest.raises(ValidationError, match="'no-such-check' is not a valid cluster check command"):
        alert.is_valid(_Secrets(), _Loader())


def test_bad_variable_type(cluster_check):
    alert = _cluster_alert(cluster_check, vars={"count": "abc"})
    with pytest.raises(ValidationError, match='variable "count" must be of type integer'):
        alert.is_valid(_Secrets(), _Loader())


def test_unsupported_variable(cluster_check):
    alert = _cluster_alert(cluster_check, vars={"foo": "1"})
    with pytest.raises(ValidationError, match="var 'foo' is unsupported"):
        alert.is_valid(_Secrets(), _Loader())


def test_unsupported_receiver_state(cluster_check):
    alert = _cluster_alert(cluster_check, receivers=[Receiver(state="Warning", notifier="webhook")])
    with pytest.raises(ValidationError, match="state 'Warning' is unsupported for check command"):
        alert.is_valid(_Secrets(), _Loader())


def test_notifier_errors_propagate(cluster_check):
    alert = _cluster_alert(cluster_check, receivers=[Receiver(state="OK", notifier="broken")])

    def loader(name, lookup):
        raise RuntimeError(f"cannot load {name}")

    with pytest.raises(RuntimeError, match="cannot load broken"):
        alert.is_valid(_Secrets(), loader)


def test_alert_accessors(cluster_check):
    alert = _cluster_alert(cluster_check, notifier_secret_name="notifier")
    assert alert.command() == cluster_check
    assert alert.name == "ca"
    assert alert.namespace == "demo"
    assert alert.check_interval == timedelta(seconds=5)
    assert alert.alert_interval == timedelta(minutes=5)
    assert alert.notifier_secret_name == "notifier"


def test_alert_is_abstract():
    with pytest.raises(TypeError):
        Alert()


def test_cluster_alert_object_reference():
    alert = ClusterAlert(metadata=ObjectMeta(name="ca", namespace="demo", uid="uid-1", resource_version="7"))
    assert alert.object_reference() == ObjectReference(
        api_version=str(MONITORING_V1ALPHA1),
        kind=RESOURCE_KIND_CLUSTER_ALERT,
        namespace="demo",
        name="ca",
        uid="uid-1",
        resource_version="7",
    )


def test_cluster_alert_round_trip(cluster_check):
    alert = _cluster_alert(
        cluster_check,
        vars={"count": "2"},
        notifier_secret_name="notifier",
        receivers=[Receiver(state="Critical", to=["ops"], notifier="webhook")],
    )
    alert.metadata.creation_timestamp = datetime(2019, 5, 1, 12, 0, tzinfo=timezone.utc)
    data = alert.to_dict()
    assert data["spec"]["checkInterval"] == "5s"
    assert data["spec"]["check"] == cluster_check
    assert ClusterAlert.from_dict(data) == alert


def test_node_alert_rejects_name_and_selector(node_check):
    alert = NodeAlert(
        metadata=ObjectMeta(name="na", namespace="demo"),
        spec=NodeAlertSpec(check=node_check, node_name="node-1", selector={"role": "worker"}),
    )
    with pytest.raises(ValidationError, match="can't specify both node name and selector"):
        alert.is_valid(_Secrets(), _Loader())


def test_node_alert_unknown_command():
    alert = NodeAlert(spec=NodeAlertSpec(check="bogus"))
    with pytest.raises(ValidationError, match="bogus is not a valid node check command"):
        alert.is_valid(_Secrets(), _Loader())


def test_node_alert_required_variable(node_check):
    alert = NodeAlert(spec=NodeAlertSpec(check=node_check))
    with pytest.raises(ValidationError, match="plugin variable 'warning' is required"):
        alert.is_valid(_Secrets(), _Loader())


def test_node_alert_unsupported_state_message(node_check):
    alert = NodeAlert(
        spec=NodeAlertSpec(check=node_check, vars={"warning": "1.0"}, receivers=[Receiver(state="Unknown")])
    )
    with pytest.raises(ValidationError, match=f"state Unknown is unsupported for check command {node_check}"):
        alert.is_valid(_Secrets(), _Loader())


def test_node_alert_valid_with_selector(node_check):
    alert = NodeAlert(
        metadata=ObjectMeta(name="na", namespace="demo"),
        spec=NodeAlertSpec(
            check=node_check,
            selector={"role": "worker"},
            vars={"warning": "100.0"},
            receivers=[Receiver(state="warning", notifier="mailgun")],
        ),
    )
    loader = _Loader()
    secrets = _Secrets()
    alert.is_valid(secrets, loader)
    assert loader.loaded == [("mailgun", None)]
    assert secrets.calls == [("demo", "")]


def test_node_alert_round_trip():
    alert = NodeAlert(
        metadata=ObjectMeta(name="na", namespace="demo"),
        spec=NodeAlertSpec(check="node-status", node_name="node-1", check_interval=timedelta(seconds=30)),
    )
    data = alert.to_dict()
    assert data["spec"]["nodeName"] == "node-1"
    assert NodeAlert.from_dict(data) == alert


def test_pod_alert_requires_name_or_selector(pod_check):
    alert = PodAlert(spec=PodAlertSpec(check=pod_check))
    with pytest.raises(ValidationError, match="specify either pod name or selector"):
        alert.is_valid(_Secrets(), _Loader())


def test_pod_alert_rejects_name_and_selector(pod_check):
    alert = PodAlert(
        spec=PodAlertSpec(check=pod_check, pod_name="p", selector=LabelSelector(match_labels={"app": "x"}))
    )
    with pytest.raises(ValidationError, match="can't specify both pod name and selector"):
        alert.is_valid(_Secrets(), _Loader())


def test_pod_alert_bad_selector(pod_check):
    selector = LabelSelector(match_expressions=[LabelSelectorRequirement("app", "Near", ["x"])])
    alert = PodAlert(spec=PodAlertSpec(check=pod_check, selector=selector))
    with pytest.raises(ValidationError):
        alert.is_valid(_Secrets(), _Loader())


def test_pod_alert_unknown_command():
    alert = PodAlert(spec=PodAlertSpec(check="bogus", pod_name="p"))
    with pytest.raises(ValidationError, match="bogus is not a valid pod check command"):
        alert.is_valid(_Secrets(), _Loader())


def test_pod_alert_valid(pod_check):
    alert = PodAlert(
        metadata=ObjectMeta(name="pa", namespace="demo"),
        spec=PodAlertSpec(
            check=pod_check,
            selector=LabelSelector(match_labels={"app": "web"}),
            notifier_secret_name="notifier",
            receivers=[Receiver(state="Critical", notifier="webhook")],
        ),
    )
    loader = _Loader()
    alert.is_valid(_Secrets({"WEBHOOK_URL": "http://localhost:1"}), loader)
    assert loader.loaded == [("webhook", "http://localhost:1")]


def test_pod_alert_object_reference_and_round_trip():
    alert = PodAlert(
        metadata=ObjectMeta(name="pa", namespace="demo", uid="u"),
        spec=PodAlertSpec(
            check="pod-status",
            selector=LabelSelector(
                match_labels={"app": "web"},
                match_expressions=[LabelSelectorRequirement("tier", "In", ["a", "b"])],
            ),
            receivers=[Receiver(state="Critical", to=["ops"], notifier="webhook")],
        ),
    )
    ref = alert.object_reference()
    assert ref.kind == RESOURCE_KIND_POD_ALERT
    assert ref.uid == "u"
    assert PodAlert.from_dict(alert.to_dict()) == alert


def test_alert_lists_round_trip():
    clusters = ClusterAlertList(items=[ClusterAlert(metadata=ObjectMeta(name="a"))], metadata=ListMeta("9"))
    nodes = NodeAlertList(items=[NodeAlert(metadata=ObjectMeta(name="b"))])
    pods = PodAlertList(items=[PodAlert(metadata=ObjectMeta(name="c"), spec=PodAlertSpec(pod_name="p"))])
    assert ClusterAlertList.from_dict(clusters.to_dict()) == clusters
    assert NodeAlertList.from_dict(nodes.to_dict()) == nodes
    assert PodAlertList.from_dict(pods.to_dict()) == pods
    assert [i.name for i in ClusterAlertList.from_dict(clusters.to_dict()).items] == ["a"]