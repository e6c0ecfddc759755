# src/telephony/bxml.py
# Created: 2026-10-19 11:05:33
# Author: Genterr

"""
Call-control XML verbs returned to the API from callback handlers.
"""

from typing import List, Optional, Union
from dataclasses import dataclass, field

from src.utils.api import Encoding, Serializer

def _attr(default=None, name: Optional[str] = None):
    metadata = {"xml": "attribute"}
    if name:
        metadata["name"] = name
    return field(default=default, metadata=metadata)

@dataclass
class Record:
    """Record the call; see http://ap.bandwidth.com/docs/xml/record/"""
    request_url: Optional[str] = _attr()
    # milliseconds to wait for the requestUrl response
    request_url_timeout: Optional[int] = _attr()
    terminating_digits: Optional[str] = _attr()
    # seconds
    max_duration: int = _attr(300)
    transcribe: Optional[bool] = _attr()
    transcribe_callback_url: Optional[str] = _attr()
    recording_file_format: Optional[str] = _attr()

@dataclass
class SpeakSentence:
    sentence: str = field(default="", metadata={"xml": "text"})
    voice: Optional[str] = _attr()
    gender: Optional[str] = _attr()
    locale: Optional[str] = _attr()

@dataclass
class Hangup:
    pass

Verb = Union[Record, SpeakSentence, Hangup]

@dataclass
class Response:
    """Root of a call-control document"""
    verbs: List[Verb] = field(default_factory=list, metadata={"inline": True})

    def add(self, verb: Verb) -> "Response":
        self.verbs.append(verb)
        return self

def render_bxml(response: Response, serializer: Optional[Serializer] = None) -> str:
    """Render a call-control document to an XML string"""
    serializer = serializer or Serializer()
    return serializer.encode(response, Encoding.XML).decode("utf-8")

def parse_bxml(document: str, serializer: Optional[Serializer] = None) -> Response:
    """Parse a call-control document; an empty document yields an empty Response"""
    serializer = serializer or Serializer()
    return serializer.decode(document, Response, Encoding.XML) or Response()
