"""Test module for the telephony client."""

import pytest
import json
import aiohttp
from unittest.mock import AsyncMock, patch
from src.core.config import Config
from src.core.exceptions import (
    HttpFailureError,
    InvalidArgumentError,
    ProtocolError,
    RequestCancelledError
)
from src.utils.api import CancellationToken, Encoding, RequestMethod, Transport
from src.telephony import (
    AvailableNpaNxx,
    AvailableNpaNxxQuery,
    Call,
    CallState,
    Client,
    Message,
    PhoneNumber,
    Recording
)

NPA_NXX_RESULT = b"""<?xml version="1.0" encoding="UTF-8"?>
<SearchResultForAvailableNpaNxx>
    <AvailableNpaNxxList>
        <AvailableNpaNxx>
            <City>RALEIGH</City>
            <Npa>919</Npa>
            <Nxx>555</Nxx>
            <Quantity>12</Quantity>
            <State>NC</State>
        </AvailableNpaNxx>
    </AvailableNpaNxxList>
</SearchResultForAvailableNpaNxx>"""

@pytest.fixture
async def client():
    """Fixture for a client against a test host"""
    client = Client("u1", "token", "secret", host="api.example.com")
    yield client
    await client.close()

@pytest.fixture
def mock_send(make_envelope):
    """Patch Transport.send; tests set return_value/side_effect"""
    with patch.object(Transport, 'send', new_callable=AsyncMock) as send:
        send.return_value = make_envelope(200)
        yield send

def sent_path(mock_send) -> str:
    return mock_send.call_args.args[1]

def sent_body(mock_send):
    return json.loads(mock_send.call_args.kwargs["body"])

@pytest.mark.parametrize("field", ["user_id", "api_token", "api_secret"])
def test_client_requires_credentials(field):
    """Test empty credentials are rejected at construction"""
    values = {"user_id": "u1", "api_token": "token", "api_secret": "secret"}
    values[field] = ""
    with pytest.raises(InvalidArgumentError):
        Client(**values)

def test_client_host_from_config():
    config = Config()
    config.set("api.host", "api.internal.example.com")
    client = Client("u1", "token", "secret", config=config)
    assert str(client.transport.base_url) == "https://api.internal.example.com/v1"

def test_client_default_host():
    client = Client("u1", "token", "secret")
    assert client.transport.base_url.host == "api.catapult.inetwork.com"

@pytest.mark.asyncio
async def test_create_call(client, mock_send, make_envelope):
    """Test the new call id is taken from the Location header"""
    mock_send.return_value = make_envelope(201, headers={"Location": "/v1/users/u1/calls/c-123"})

    call_id = await client.create_call(Call(from_number="+19195550100", to="+19195550199"))

    assert call_id == "c-123"
    args = mock_send.call_args.args
    assert args[0] is RequestMethod.POST
    assert args[1] == "/users/u1/calls"
    assert sent_body(mock_send) == {"from": "+19195550100", "to": "+19195550199"}
    assert mock_send.call_args.kwargs["encoding"] is Encoding.JSON

@pytest.mark.asyncio
async def test_create_call_absolute_location(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(
        201, headers={"Location": "https://api.example.com/v1/users/u1/calls/c-abc123"}
    )
    assert await client.create_call(Call(to="+1")) == "c-abc123"

@pytest.mark.asyncio
async def test_create_call_without_location(client, mock_send, make_envelope):
    """Test a creation response without Location is a protocol error"""
    mock_send.return_value = make_envelope(201)
    with pytest.raises(ProtocolError, match="missing id in response"):
        await client.create_call(Call(to="+1"))

@pytest.mark.asyncio
async def test_create_call_requires_payload(client, mock_send):
    with pytest.raises(InvalidArgumentError):
        await client.create_call(None)
    mock_send.assert_not_called()

@pytest.mark.asyncio
async def test_create_call_http_failure(client, mock_send):
    mock_send.side_effect = HttpFailureError(400, b'{"code":"invalid-number"}')
    with pytest.raises(HttpFailureError) as exc_info:
        await client.create_call(Call(to="bad"))
    assert exc_info.value.status_code == 400

@pytest.mark.asyncio
async def test_update_call(client, mock_send, make_envelope):
    """Test update posts to the call and returns the raw Location header"""
    mock_send.return_value = make_envelope(200, headers={"Location": "/v1/users/u1/calls/c-2"})

    location = await client.update_call("c-1", Call(state=CallState.TRANSFERRING, transfer_to="+1"))

    assert location == "/v1/users/u1/calls/c-2"
    assert mock_send.call_args.args[0] is RequestMethod.POST
    assert sent_path(mock_send) == "/users/u1/calls/c-1"
    assert sent_body(mock_send) == {"state": "transferring", "transferTo": "+1"}

@pytest.mark.asyncio
async def test_update_call_without_location(client, mock_send):
    assert await client.update_call("c-1", Call(state=CallState.COMPLETED)) is None

@pytest.mark.asyncio
async def test_get_call(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(
        200, b'{"id":"c-1","state":"active","from":"+1"}', "application/json"
    )

    call = await client.get_call("c-1")

    assert call == Call(id="c-1", state=CallState.ACTIVE, from_number="+1")
    assert mock_send.call_args.args[0] is RequestMethod.GET
    assert sent_path(mock_send) == "/users/u1/calls/c-1"
    assert mock_send.call_args.kwargs["body"] is None

@pytest.mark.asyncio
@pytest.mark.parametrize("call_id", ["", "   ", None])
async def test_get_call_requires_id(client, mock_send, call_id):
    """Test invalid ids fail before any request is sent"""
    with pytest.raises(InvalidArgumentError):
        await client.get_call(call_id)
    mock_send.assert_not_called()

@pytest.mark.asyncio
async def test_get_call_rejects_nested_id(client, mock_send):
    with pytest.raises(InvalidArgumentError):
        await client.get_call("c-1/recordings")
    mock_send.assert_not_called()

@pytest.mark.asyncio
@pytest.mark.parametrize("call_id,segment", [
    ("abc?page=9#x", "abc%3Fpage%3D9%23x"),
    ("abc?x=1", "abc%3Fx%3D1"),
    ("a#b", "a%23b"),
])
async def test_get_call_keeps_id_in_one_segment(client, mock_send, call_id, segment):
    await client.get_call(call_id)
    assert sent_path(mock_send) == f"/users/u1/calls/{segment}"

@pytest.mark.asyncio
@pytest.mark.parametrize("call_id", [".", ".."])
async def test_get_call_rejects_dot_segments(client, mock_send, call_id):
    with pytest.raises(InvalidArgumentError):
        await client.get_call(call_id)
    mock_send.assert_not_called()

@pytest.mark.asyncio
async def test_reserved_id_never_reaches_query(client, make_http_response):
    """Test the URL handed to aiohttp carries no injected query or fragment"""
    with patch.object(aiohttp.ClientSession, 'request', return_value=make_http_response(200, b"", "application/json")) as mock_request:
        await client.get_call("abc?page=9#x")

    url = mock_request.call_args.args[1]
    assert url.raw_path == "/v1/users/u1/calls/abc%3Fpage%3D9%23x"
    assert url.query_string == ""
    assert url.fragment == ""

@pytest.mark.asyncio
async def test_get_call_unexpected_content_type(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b"<html/>", "text/html")
    assert await client.get_call("c-1") is None

@pytest.mark.asyncio
async def test_list_calls(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b'[{"id":"c-1"},{"id":"c-2"}]', "application/json")
    calls = await client.list_calls()
    assert [c.id for c in calls] == ["c-1", "c-2"]
    assert sent_path(mock_send) == "/users/u1/calls"

@pytest.mark.asyncio
async def test_get_recording(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b'{"id":"r-1","media":"https://x/m.wav"}', "application/json")
    recording = await client.get_recording("r-1")
    assert recording == Recording(id="r-1", media="https://x/m.wav")
    assert sent_path(mock_send) == "/users/u1/recordings/r-1"

@pytest.mark.asyncio
async def test_list_recordings_paging(client, mock_send, make_envelope):
    """Test paging parameters are sent as page and size"""
    mock_send.return_value = make_envelope(200, b'[{"id":"r-1"}]', "application/json")

    recordings = await client.list_recordings(page=2, page_size=50)

    assert recordings == [Recording(id="r-1")]
    assert sent_path(mock_send) == "/users/u1/recordings?page=2&size=50"

@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["list_calls", "list_recordings", "list_messages", "list_phone_numbers"])
async def test_list_empty_body(client, mock_send, make_envelope, method):
    """Test list operations yield an empty list when the body is empty"""
    mock_send.return_value = make_envelope(200, b"", "application/json")
    assert await getattr(client, method)() == []

@pytest.mark.asyncio
async def test_send_message(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(201, headers={"Location": "/v1/users/u1/messages/m-9"})

    message_id = await client.send_message(Message(from_number="+1", to="+2", text="hello"))

    assert message_id == "m-9"
    assert sent_path(mock_send) == "/users/u1/messages"
    assert sent_body(mock_send) == {"from": "+1", "to": "+2", "text": "hello"}

@pytest.mark.asyncio
async def test_get_message(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b'{"id":"m-9","text":"hello"}', "application/json")
    assert await client.get_message("m-9") == Message(id="m-9", text="hello")
    assert sent_path(mock_send) == "/users/u1/messages/m-9"

@pytest.mark.asyncio
async def test_list_messages(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b'[{"id":"m-1"}]', "application/json")
    assert await client.list_messages(page_size=10) == [Message(id="m-1")]
    assert sent_path(mock_send) == "/users/u1/messages?size=10"

@pytest.mark.asyncio
async def test_get_phone_number(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(
        200, b'{"id":"n-1","number":"+19195550100","price":0.35}', "application/json"
    )
    number = await client.get_phone_number("n-1")
    assert number == PhoneNumber(id="n-1", number="+19195550100", price=0.35)
    assert sent_path(mock_send) == "/users/u1/phoneNumbers/n-1"

@pytest.mark.asyncio
async def test_list_phone_numbers(client, mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b'[{"id":"n-1"}]', "application/json")
    assert await client.list_phone_numbers(page=1) == [PhoneNumber(id="n-1")]
    assert sent_path(mock_send) == "/users/u1/phoneNumbers?page=1"

@pytest.mark.asyncio
async def test_delete_phone_number(client, mock_send):
    assert await client.delete_phone_number("n-1") is None
    assert mock_send.call_args.args[0] is RequestMethod.DELETE
    assert sent_path(mock_send) == "/users/u1/phoneNumbers/n-1"

@pytest.mark.asyncio
async def test_list_available_npa_nxx(client, mock_send, make_envelope):
    """Test the number search uses XML and the account path"""
    mock_send.return_value = make_envelope(200, NPA_NXX_RESULT, "application/xml")

    result = await client.list_available_npa_nxx(AvailableNpaNxxQuery(area_code="919"))

    assert result == [AvailableNpaNxx(city="RALEIGH", state="NC", npa="919", nxx="555", quantity=12)]
    assert sent_path(mock_send) == "/accounts/u1/availableNpaNxx?areaCode=919"
    assert mock_send.call_args.kwargs["encoding"] is Encoding.XML

@pytest.mark.asyncio
async def test_list_available_npa_nxx_account_id(mock_send, make_envelope):
    mock_send.return_value = make_envelope(200, b"", "application/xml")
    async with Client("u1", "token", "secret", host="api.example.com", account_id="9900001") as client:
        assert await client.list_available_npa_nxx() == []
    assert sent_path(mock_send) == "/accounts/9900001/availableNpaNxx"

@pytest.mark.asyncio
async def test_cancelled_token_skips_request(client, mock_send):
    """Test an already-cancelled token fails before the request is sent"""
    token = CancellationToken()
    token.cancel()
    with pytest.raises(RequestCancelledError):
        await client.get_call("c-1", cancel_token=token)
    mock_send.assert_not_called()

@pytest.mark.asyncio
async def test_cancel_token_is_forwarded(client, mock_send, make_envelope):
    token = CancellationToken()
    mock_send.return_value = make_envelope(200, b"[]", "application/json")
    await client.list_calls(cancel_token=token)
    assert mock_send.call_args.kwargs["cancel_token"] is token

@pytest.mark.asyncio
async def test_close_is_idempotent(client):
    await client.close()
    await client.close()
    assert client.transport.closed
