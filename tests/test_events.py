import base64

from bftkit.abci import Event, EventAttribute, ExecTxResult
from bftkit.events import (
    Attribute,
    BlockResponse,
    ExecTxResponse,
    StringEvent,
    base64_decode_events,
    parse_events,
    stringify_event,
    stringify_events,
)

import pytest


def b64(text):
    return base64.b64encode(text.encode()).decode()


def encoded_event():
    return Event(
        type="transfer",
        attributes=[
            EventAttribute(key=b64("sender"), value=b64("alice")),
            EventAttribute(key=b64("amount"), value=b64("100stake")),
        ],
    )


def plain_event():
    return Event(type="message", attributes=[EventAttribute(key="action", value="send!")])


def test_base64_decode_events_decodes_keys_and_values():
    decoded = base64_decode_events([encoded_event()])
    assert decoded == [
        StringEvent(
            type="transfer",
            attributes=[Attribute("sender", "alice"), Attribute("amount", "100stake")],
        )
    ]


def test_base64_decode_events_raises_on_invalid():
    with pytest.raises(ValueError):
        base64_decode_events([plain_event()])


def test_parse_events_uses_decoding_when_possible():
    assert parse_events([encoded_event()]) == base64_decode_events([encoded_event()])


def test_parse_events_falls_back_for_all_events():
    events = [encoded_event(), plain_event()]
    parsed = parse_events(events)
    assert parsed == stringify_events(events)
    assert parsed[0].attributes[0].key == b64("sender")
    assert parsed[1].attributes == [Attribute("action", "send!")]


def test_parse_events_empty():
    assert parse_events([]) == []


def test_stringify_event_copies_attributes():
    event = plain_event()
    result = stringify_event(event)
    assert result.type == event.type
    assert [(a.key, a.value) for a in result.attributes] == [
        (a.key, a.value) for a in event.attributes
    ]


def test_exec_tx_response_from_result():
    result = ExecTxResult(
        code=0,
        data=b"\x01",
        log="ok",
        info="info",
        gas_wanted=200,
        gas_used=150,
        events=[encoded_event()],
        codespace="",
    )
    response = ExecTxResponse.from_result(result)
    assert response.is_ok() is True
    assert (response.data, response.log, response.info) == (b"\x01", "ok", "info")
    assert (response.gas_wanted, response.gas_used) == (200, 150)
    assert response.events[0].attributes[0] == Attribute("sender", "alice")


def test_exec_tx_response_error_code():
    response = ExecTxResponse.from_result(ExecTxResult(code=6, codespace="sdk"))
    assert response.is_ok() is False
    assert response.codespace == "sdk"


def test_block_response_holds_parsed_results():
    tx = ExecTxResponse.from_result(ExecTxResult(events=[plain_event()]))
    block = BlockResponse(height=10, tx_responses=[tx], events=parse_events([encoded_event()]))
    assert block.height == 10
    assert block.tx_responses[0].events[0].type == "message"
    assert block.events[0].attributes[1] == Attribute("amount", "100stake")
    assert BlockResponse().validator_updates == []