import json

from boardrelay.protocol import HEARTBEAT_MESSAGE, SetBoardHistory, UserPresence, encode


def test_encode_models_compact():
    assert encode(UserPresence(id="alice", status="online")) == (
        '{"type":"app/userPresence","id":"alice","status":"online"}'
    )


def test_encode_history_keeps_events_verbatim():
    event = {"type": "canvas/drawPixelArea", "pixels": [[1, 2, "#ff0000"]], "extra": {"nested": True}}
    decoded = json.loads(encode(SetBoardHistory(history=[event])))
    assert decoded == {"type": "app/setBoardHistory", "history": [event]}


def test_heartbeat_is_a_bare_json_string():
    assert json.loads(encode(HEARTBEAT_MESSAGE)) == HEARTBEAT_MESSAGE
    assert encode(HEARTBEAT_MESSAGE) == '"\\ud83d\\udc93"'


def test_encode_lone_surrogate_is_valid_utf8():
    event = json.loads('{"type":"canvas/drawLine","label":"\\ud800"}')
    data = encode(event)
    data.encode("utf-8")
    assert json.loads(data) == event
