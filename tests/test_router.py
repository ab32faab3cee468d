import json

import pytest

from ssap.message import Message
from tvremote.commands import Dispatcher, PendingAction
from tvremote.errors import ResolutionError
from tvremote.router import Outcome, ResponseRouter, Route, resolve_app_id


APPS = {
    "apps": [
        {"title": "YouTube", "id": "youtube.leanback.v4"},
        {"title": "Youtube Kids", "id": "youtube.kids"},
        {"title": "Netflix", "id": "netflix"},
    ]
}


def response(msg_id, payload=None):
    return Message(type="response", id=msg_id, payload=payload)


def test_first_match_wins():
    assert resolve_app_id(APPS, "youtube") == "youtube.leanback.v4"


def test_match_on_id_ignores_case():
    assert resolve_app_id(APPS, "YOUTUBE.KIDS") == "youtube.kids"


def test_no_partial_matches():
    with pytest.raises(ResolutionError, match="Could not find app"):
        resolve_app_id(APPS, "you")


def test_case_match_is_per_character():
    apps = {"apps": [{"title": "Straße TV", "id": "de.strasse"}]}

    assert resolve_app_id(apps, "STRAßE tv") == "de.strasse"
    with pytest.raises(ResolutionError, match="Could not find app"):
        resolve_app_id(apps, "STRASSE TV")


def test_entries_without_title_are_matched_by_id():
    assert resolve_app_id({"apps": [{"id": "hulu"}]}, "Hulu") == "hulu"


def test_match_without_id_is_not_found():
    with pytest.raises(ResolutionError, match="Could not find app"):
        resolve_app_id({"apps": [{"title": "Ghost"}, {"title": "Ghost", "id": "ghost.app"}]}, "ghost")


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"apps": "youtube"},
        {"apps": ["youtube"]},
        {"apps": [{"title": 42, "id": "x"}]},
    ],
)
def test_malformed_app_list(payload):
    with pytest.raises(ResolutionError, match="Could not parse app list"):
        resolve_app_id(payload, "youtube")


def test_resolution_dispatches_deferred_launch():
    dispatcher = Dispatcher("launch", "youtube")
    router = ResponseRouter(dispatcher, dispatcher.initial().pending)

    route = router.route(response("req_resolve_app", APPS))

    assert route.outcome is None
    assert route.send.uri == "ssap://system.launcher/launch"
    assert route.send.id == "req_launch"
    assert route.send.payload == {"id": "youtube.leanback.v4"}
    assert router.pending is None


def test_resolution_dispatches_deferred_close():
    dispatcher = Dispatcher("close", "netflix")
    router = ResponseRouter(dispatcher, PendingAction("close", "netflix"))

    route = router.route(response("req_resolve_app", APPS))

    assert route.send.uri == "ssap://system.launcher/close"
    assert route.send.payload == {"id": "netflix"}


def test_app_list_without_pending_action_is_an_error():
    router = ResponseRouter(Dispatcher("info"))

    with pytest.raises(ResolutionError):
        router.route(response("req_resolve_app", APPS))


def test_failed_resolution_discards_pending_action():
    dispatcher = Dispatcher("launch", "plex")
    router = ResponseRouter(dispatcher, dispatcher.initial().pending)

    with pytest.raises(ResolutionError):
        router.route(response("req_resolve_app", APPS))
    assert router.pending is None


def test_query_response_is_printed_as_indented_json():
    payload = {"modelName": "OLED55C1", "returnValue": True}
    router = ResponseRouter(Dispatcher("info"))

    route = router.route(response("req_info", payload))

    assert route == Route(outcome=Outcome(0, json.dumps(payload, indent=2, sort_keys=True)))


def test_get_suffix_counts_as_query():
    router = ResponseRouter(Dispatcher("vol-get"))

    route = router.route(response("req_vol_get", {"volume": 12}))

    assert json.loads(route.outcome.output) == {"volume": 12}


def test_action_response_is_acknowledged_without_output():
    router = ResponseRouter(Dispatcher("toast", "Hello World"))

    route = router.route(response("req_toast", {"returnValue": True}))

    assert route == Route(outcome=Outcome(0, None))


@pytest.mark.parametrize("msg_id", [None, "", "register_0", "other_1", "REQ_info"])
def test_unrelated_responses_are_ignored(msg_id):
    router = ResponseRouter(Dispatcher("info"))

    assert router.route(response(msg_id, {"x": 1})) == Route()
