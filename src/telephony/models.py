# src/telephony/models.py
# Created: 2026-10-19 10:41:09
# Author: Genterr

from typing import List, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

class CallDirection(Enum):
    """Direction of a call or message"""
    IN = "in"
    OUT = "out"

class CallState(Enum):
    """Lifecycle state of a call"""
    STARTED = "started"
    REJECTED = "rejected"
    ACTIVE = "active"
    COMPLETED = "completed"
    TRANSFERRING = "transferring"

class RecordingState(Enum):
    RECORDING = "recording"
    COMPLETE = "complete"
    SAVING = "saving"
    ERROR = "error"

class MessageState(Enum):
    RECEIVED = "received"
    QUEUED = "queued"
    SENDING = "sending"
    SENT = "sent"
    ERROR = "error"

class NumberState(Enum):
    ENABLED = "enabled"
    RELEASED = "released"

@dataclass
class Call:
    """Call resource; also the payload for creating and updating calls"""
    id: Optional[str] = None
    direction: Optional[CallDirection] = None
    from_number: Optional[str] = field(default=None, metadata={"json": "from"})
    to: Optional[str] = None
    state: Optional[CallState] = None
    start_time: Optional[datetime] = None
    active_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    chargeable_duration: Optional[int] = None
    callback_url: Optional[str] = None
    callback_timeout: Optional[int] = None
    fallback_url: Optional[str] = None
    recording_enabled: Optional[bool] = None
    recording_file_format: Optional[str] = None
    tag: Optional[str] = None
    transfer_to: Optional[str] = None
    transfer_caller_id: Optional[str] = None
    whisper_audio: Optional[dict] = None

@dataclass
class Recording:
    id: Optional[str] = None
    call: Optional[str] = None
    media: Optional[str] = None
    state: Optional[RecordingState] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

@dataclass
class Message:
    id: Optional[str] = None
    direction: Optional[CallDirection] = None
    from_number: Optional[str] = field(default=None, metadata={"json": "from"})
    to: Optional[str] = None
    text: Optional[str] = None
    media: Optional[List[str]] = None
    state: Optional[MessageState] = None
    time: Optional[datetime] = None
    callback_url: Optional[str] = None
    receipt_requested: Optional[str] = None
    tag: Optional[str] = None

@dataclass
class PhoneNumber:
    id: Optional[str] = None
    number: Optional[str] = None
    national_number: Optional[str] = None
    name: Optional[str] = None
    application: Optional[str] = None
    fallback_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    price: Optional[float] = None
    number_state: Optional[NumberState] = None
    created_time: Optional[datetime] = None

@dataclass
class AvailableNpaNxx:
    """Area code / exchange pair with numbers available for ordering"""
    city: Optional[str] = None
    state: Optional[str] = None
    npa: Optional[str] = None
    nxx: Optional[str] = None
    quantity: int = 0

@dataclass
class AvailableNpaNxxResult:
    """XML result envelope of the availableNpaNxx search"""
    __xml_name__ = "SearchResultForAvailableNpaNxx"

    available_npa_nxx_list: List[AvailableNpaNxx] = field(default_factory=list)

@dataclass
class AvailableNpaNxxQuery:
    area_code: Optional[str] = None
