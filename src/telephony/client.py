# src/telephony/client.py
# Created: 2026-10-19 11:20:16
# Author: Genterr

from typing import Any, List, Optional, Type, TypeVar
from urllib.parse import quote

from src.core.config import Config, DEFAULT_API_HOST
from src.core.exceptions import InvalidArgumentError
from src.core.utils import validate_string
from src.utils.api import (
    CancellationToken,
    Connection,
    Encoding,
    RequestBuilder,
    RequestDescriptor,
    RequestMethod,
    ResponseEnvelope,
    ResponseInterpreter,
    Serializer,
    SerializerSettings,
    Transport,
    TransportConfig
)
from .models import (
    AvailableNpaNxx,
    AvailableNpaNxxQuery,
    AvailableNpaNxxResult,
    Call,
    Message,
    PhoneNumber,
    Recording
)

T = TypeVar('T')

CALLS_PATH = "calls"
RECORDINGS_PATH = "recordings"
MESSAGES_PATH = "messages"
PHONE_NUMBERS_PATH = "phoneNumbers"
AVAILABLE_NPA_NXX_PATH = "availableNpaNxx"

class Client:
    """
    Client for the telephony REST API.

    Every operation is one HTTP round trip through the shared pipeline:
    RequestBuilder -> Transport -> ResponseInterpreter -> Serializer.
    Operations accept an optional CancellationToken.

    Usage:
        async with Client(user_id, api_token, api_secret) as client:
            call_id = await client.create_call(Call(from_number=..., to=...))
    """

    def __init__(
        self,
        user_id: str,
        api_token: str,
        api_secret: str,
        host: Optional[str] = None,
        account_id: Optional[str] = None,
        config: Optional[Config] = None,
        serializer_settings: Optional[SerializerSettings] = None
    ):
        config = config or Config()
        self._connection = Connection(
            user_id=user_id,
            api_token=api_token,
            api_secret=api_secret,
            host=host or config.get("api.host", DEFAULT_API_HOST)
        )
        self._transport = Transport(self._connection, TransportConfig.from_config(config))
        self._serializer = Serializer(serializer_settings or SerializerSettings())
        self._interpreter = ResponseInterpreter(self._serializer)
        self._users = RequestBuilder(f"/users/{quote(user_id, safe='')}")
        self._accounts = RequestBuilder(f"/accounts/{quote(account_id or user_id, safe='')}")

    @property
    def transport(self) -> Transport:
        return self._transport

    async def close(self) -> None:
        """Release pooled connections; safe to call more than once"""
        await self._transport.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(
        self,
        descriptor: RequestDescriptor,
        builder: Optional[RequestBuilder] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> ResponseEnvelope:
        path = (builder or self._users).build_path(descriptor)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        body = None
        if descriptor.body is not None:
            body = self._serializer.encode(descriptor.body, descriptor.encoding)
        return await self._transport.send(
            descriptor.method,
            path,
            body=body,
            encoding=descriptor.encoding,
            cancel_token=cancel_token
        )

    async def _get(
        self,
        descriptor: RequestDescriptor,
        result_type: Type[T],
        builder: Optional[RequestBuilder] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[T]:
        envelope = await self._send(descriptor, builder, cancel_token)
        return self._interpreter.decode(envelope, result_type, descriptor.encoding)

    @staticmethod
    def _page_query(page: Optional[int], page_size: Optional[int]) -> List[tuple]:
        query = []
        if page is not None:
            query.append(("page", str(page)))
        if page_size is not None:
            query.append(("size", str(page_size)))
        return query

    async def _create(
        self,
        collection: str,
        payload: Any,
        cancel_token: Optional[CancellationToken]
    ) -> str:
        if payload is None:
            raise InvalidArgumentError(f"{collection} payload is required")
        envelope = await self._send(
            RequestDescriptor(RequestMethod.POST, collection, body=payload),
            cancel_token=cancel_token
        )
        return self._interpreter.resource_id(envelope, collection)

    # Calls

    async def create_call(self, call: Call, cancel_token: Optional[CancellationToken] = None) -> str:
        """Start an outgoing call and return its id"""
        return await self._create(CALLS_PATH, call, cancel_token)

    async def update_call(
        self,
        call_id: str,
        call: Call,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[str]:
        """Change a call (state, recording, transfer); returns the raw Location header"""
        validate_string(call_id, "call_id")
        envelope = await self._send(
            RequestDescriptor(RequestMethod.POST, CALLS_PATH, resource_id=call_id, body=call),
            cancel_token=cancel_token
        )
        return self._interpreter.location(envelope)

    async def get_call(self, call_id: str, cancel_token: Optional[CancellationToken] = None) -> Optional[Call]:
        validate_string(call_id, "call_id")
        return await self._get(
            RequestDescriptor(RequestMethod.GET, CALLS_PATH, resource_id=call_id),
            Call,
            cancel_token=cancel_token
        )

    async def list_calls(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[Call]:
        calls = await self._get(
            RequestDescriptor(RequestMethod.GET, CALLS_PATH, query=self._page_query(page, page_size)),
            List[Call],
            cancel_token=cancel_token
        )
        return calls or []

    # Recordings

    async def get_recording(
        self,
        recording_id: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[Recording]:
        validate_string(recording_id, "recording_id")
        return await self._get(
            RequestDescriptor(RequestMethod.GET, RECORDINGS_PATH, resource_id=recording_id),
            Recording,
            cancel_token=cancel_token
        )

    async def list_recordings(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[Recording]:
        recordings = await self._get(
            RequestDescriptor(RequestMethod.GET, RECORDINGS_PATH, query=self._page_query(page, page_size)),
            List[Recording],
            cancel_token=cancel_token
        )
        return recordings or []

    # Messages

    async def send_message(self, message: Message, cancel_token: Optional[CancellationToken] = None) -> str:
        """Send a message and return its id"""
        return await self._create(MESSAGES_PATH, message, cancel_token)

    async def get_message(
        self,
        message_id: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[Message]:
        validate_string(message_id, "message_id")
        return await self._get(
            RequestDescriptor(RequestMethod.GET, MESSAGES_PATH, resource_id=message_id),
            Message,
            cancel_token=cancel_token
        )

    async def list_messages(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[Message]:
        messages = await self._get(
            RequestDescriptor(RequestMethod.GET, MESSAGES_PATH, query=self._page_query(page, page_size)),
            List[Message],
            cancel_token=cancel_token
        )
        return messages or []

    # Phone numbers

    async def get_phone_number(
        self,
        number_id: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[PhoneNumber]:
        validate_string(number_id, "number_id")
        return await self._get(
            RequestDescriptor(RequestMethod.GET, PHONE_NUMBERS_PATH, resource_id=number_id),
            PhoneNumber,
            cancel_token=cancel_token
        )

    async def list_phone_numbers(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[PhoneNumber]:
        numbers = await self._get(
            RequestDescriptor(RequestMethod.GET, PHONE_NUMBERS_PATH, query=self._page_query(page, page_size)),
            List[PhoneNumber],
            cancel_token=cancel_token
        )
        return numbers or []

    async def delete_phone_number(self, number_id: str, cancel_token: Optional[CancellationToken] = None) -> None:
        """Release a phone number from the account"""
        validate_string(number_id, "number_id")
        await self._send(
            RequestDescriptor(RequestMethod.DELETE, PHONE_NUMBERS_PATH, resource_id=number_id),
            cancel_token=cancel_token
        )

    # Number search (XML)

    async def list_available_npa_nxx(
        self,
        query: Optional[AvailableNpaNxxQuery] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[AvailableNpaNxx]:
        """Search area code / exchange pairs with available numbers"""
        result = await self._get(
            RequestDescriptor(
                RequestMethod.GET,
                AVAILABLE_NPA_NXX_PATH,
                query=self._serializer.to_query(query),
                encoding=Encoding.XML
            ),
            AvailableNpaNxxResult,
            builder=self._accounts,
            cancel_token=cancel_token
        )
        return result.available_npa_nxx_list if result else []
