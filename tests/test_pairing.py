import pytest

from ssap.message import Message
from ssap.utils import is_app_id, is_hostport, normalize_addr, ws_url
from tvremote.pairing import PERMISSIONS, REGISTER_ID, build_register, is_pairing_prompt, rotated_key


def test_register_message_shape():
    message = build_register("")

    assert message.type == "register"
    assert message.id == REGISTER_ID
    assert message.uri is None
    assert message.payload["client-key"] == ""
    manifest = message.payload["manifest"]
    assert manifest["manifestVersion"] == 1
    assert manifest["appVersion"] == "1.1"
    assert len(manifest["permissions"]) == len(set(PERMISSIONS)) == 28
    assert "WRITE_NOTIFICATION_TOAST" in manifest["permissions"]


def test_rotated_key():
    registered = Message(type="registered", id=REGISTER_ID, payload={"client-key": "abc"})

    assert rotated_key(registered, "") == "abc"
    assert rotated_key(registered, "old") == "abc"
    assert rotated_key(registered, "abc") is None


@pytest.mark.parametrize("payload", [None, [], {}, {"client-key": 12}])
def test_no_usable_key_offered(payload):
    assert rotated_key(Message(type="registered", payload=payload), "old") is None


def test_pairing_prompt_detection():
    prompt = Message(type="response", id=REGISTER_ID, payload={"pairingType": "PROMPT", "returnValue": True})

    assert is_pairing_prompt(prompt) is True
    assert is_pairing_prompt(Message(type="response", id="req_info", payload={"pairingType": "PROMPT"})) is False
    assert is_pairing_prompt(Message(type="registered", id=REGISTER_ID, payload={"client-key": "x"})) is False


@pytest.mark.parametrize(
    "addr, expected",
    [
        ("192.168.1.237:3000", "192.168.1.237:3000"),
        ("lgwebostv", "lgwebostv:3000"),
        (" 10.0.0.2:3001 ", "10.0.0.2:3001"),
    ],
)
def test_normalize_addr(addr, expected):
    assert normalize_addr(addr) == expected


@pytest.mark.parametrize("addr", ["", ":3000", "tv:port", "tv:0", "tv:70000"])
def test_invalid_addr(addr):
    with pytest.raises(ValueError):
        normalize_addr(addr)


def test_ws_url_and_app_ids():
    assert ws_url("tv.local:3000") == "ws://tv.local:3000/"
    assert is_hostport("tv:3000") is True
    assert is_app_id("com.webos.app.hdmi1") is True
    assert is_app_id("youtube") is False
