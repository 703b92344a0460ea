from datetime import datetime, timezone

import pytest

from searchlight.incident import (
    Incident,
    IncidentList,
    IncidentNotification,
    IncidentNotificationType,
    IncidentStatus,
)
from searchlight.meta import ObjectMeta


def _notification():
    return IncidentNotification(
        type=IncidentNotificationType.PROBLEM,
        last_state="Critical",
        check_output="down",
        author="e2e",
        comment="test",
        first_timestamp=datetime(2019, 5, 1, tzinfo=timezone.utc),
        last_timestamp=datetime(2019, 5, 2, tzinfo=timezone.utc),
    )


def test_notification_keys():
    data = IncidentNotification(IncidentNotificationType.RECOVERY, last_state="OK").to_dict()
    assert data == {"type": "Recovery", "checkOutput": "", "state": "OK"}


def test_notification_round_trip():
    n = _notification()
    assert IncidentNotification.from_dict(n.to_dict()) == n


def test_incident_round_trip():
    inc = Incident(
        metadata=ObjectMeta(name="i", namespace="ns"),
        status=IncidentStatus(IncidentNotificationType.PROBLEM, [_notification()]),
    )
    assert Incident.from_dict(inc.to_dict()) == inc
    lst = IncidentList(items=[inc, Incident()])
    assert IncidentList.from_dict(lst.to_dict()) == lst


@pytest.mark.parametrize(
    "kind,text",
    [
        (IncidentNotificationType.PROBLEM, "Problem"),
        (IncidentNotificationType.ACKNOWLEDGEMENT, "Acknowledgement"),
        (IncidentNotificationType.RECOVERY, "Recovery"),
        (IncidentNotificationType.CUSTOM, "Custom"),
    ],
)
def test_type_serialised_as_text(kind, text):
    data = IncidentNotification(kind, last_state="OK").to_dict()
    assert data["type"] == text
    assert IncidentNotification.from_dict(data).type is kind