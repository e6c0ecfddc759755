# src/telephony/__init__.py
# Created: 2026-10-19 11:02:47
# Author: Genterr

"""
Telephony API resources: calls, recordings, messages, phone numbers and
call-control XML.
"""

from .client import Client

from .models import (
    AvailableNpaNxx,
    AvailableNpaNxxQuery,
    AvailableNpaNxxResult,
    Call,
    CallDirection,
    CallState,
    Message,
    MessageState,
    NumberState,
    PhoneNumber,
    Recording,
    RecordingState
)

from .bxml import (
    Hangup,
    Record,
    Response,
    SpeakSentence,
    parse_bxml,
    render_bxml
)

__all__ = [
    'Client',
    'AvailableNpaNxx',
    'AvailableNpaNxxQuery',
    'AvailableNpaNxxResult',
    'Call',
    'CallDirection',
    'CallState',
    'Message',
    'MessageState',
    'NumberState',
    'PhoneNumber',
    'Recording',
    'RecordingState',
    'Hangup',
    'Record',
    'Response',
    'SpeakSentence',
    'parse_bxml',
    'render_bxml'
]
