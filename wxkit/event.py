"""Encrypted event push messages, their signatures and encrypted replies."""

from __future__ import annotations

import hashlib
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "MessageType",
    "EventType",
    "EventMessage",
    "ReplyMessage",
    "sign_with_sha1",
    "build_reply",
]


class MessageType(str, Enum):
    """Message types supported by the platform."""

    TEXT = "text"
    IMAGE = "image"
    VOICE = "voice"
    VIDEO = "video"
    SHORT_VIDEO = "shortvideo"
    LOCATION = "location"
    LINK = "link"
    MUSIC = "music"
    NEWS = "news"
    WXCARD = "wxcard"
    EVENT = "event"


class EventType(str, Enum):
    """Event types supported by the platform."""

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    SCAN = "SCAN"
    LOCATION = "LOCATION"
    CLICK = "CLICK"
    VIEW = "VIEW"
    TEMPLATE_SEND_JOB_FINISH = "TEMPLATESENDJOBFINISH"
    QUALIFICATION_VERIFY_SUCCESS = "qualification_verify_success"
    QUALIFICATION_VERIFY_FAIL = "qualification_verify_fail"
    NAMING_VERIFY_SUCCESS = "naming_verify_success"
    NAMING_VERIFY_FAIL = "naming_verify_fail"
    ANNUAL_RENEW = "annual_renew"
    VERIFY_EXPIRED = "verify_expired"
    CARD_PASS_CHECK = "card_pass_check"
    CARD_NOT_PASS_CHECK = "card_not_pass_check"
    USER_GET_CARD = "user_get_card"
    USER_GIFTING_CARD = "user_gifting_card"
    USER_DEL_CARD = "user_del_card"
    USER_CONSUME_CARD = "user_consume_card"
    USER_PAY_FROM_PAY_CELL = "user_pay_from_pay_cell"
    USER_VIEW_CARD = "user_view_card"
    USER_ENTER_SESSION_FROM_CARD = "user_enter_session_from_card"
    UPDATE_MEMBER_CARD = "update_member_card"
    CARD_SKU_REMIND = "card_sku_remind"
    CARD_PAY_ORDER = "card_pay_order"
    SUBMIT_MEMBER_CARD_USER_INFO = "submit_membercard_user_info"
    WXA_MEDIA_CHECK = "wxa_media_check"


def _cdata(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


@dataclass
class EventMessage:
    """An encrypted event push (compatible or safe mode)."""

    to_user_name: str = ""
    encrypt: str = ""

    @classmethod
    def from_xml(cls, data: bytes | str) -> "EventMessage":
        """Parse an encrypted push body whose root element is <xml>."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise ValueError(f"invalid event message: {exc}") from exc
        if root.tag != "xml":
            raise ValueError(f"expected element type <xml> but have <{root.tag}>")
        return cls(
            to_user_name=root.findtext("ToUserName", default=""),
            encrypt=root.findtext("Encrypt", default=""),
        )


@dataclass
class ReplyMessage:
    """An encrypted reply to an event push."""

    encrypt: str
    msg_signature: str
    timestamp: int
    nonce: str

    def to_xml(self) -> bytes:
        """Serialise the reply as the XML body expected by the platform."""
        body = (
            "<xml>"
            f"<Encrypt>{_cdata(self.encrypt)}</Encrypt>"
            f"<MsgSignature>{_cdata(self.msg_signature)}</MsgSignature>"
            f"<TimeStamp>{self.timestamp}</TimeStamp>"
            f"<Nonce>{_cdata(self.nonce)}</Nonce>"
            "</xml>"
        )
        return body.encode("utf-8")


def sign_with_sha1(token: str, *args: str) -> str:
    """Sign an event: SHA-1 hex of the sorted items and token joined together."""
    items = sorted([*args, token])
    return hashlib.sha1("".join(items).encode("utf-8")).hexdigest()


def build_reply(token: str, nonce: str, encrypt_msg: str) -> ReplyMessage:
    """Build a signed reply around an already encrypted message."""
    now = int(time.time())
    return ReplyMessage(
        encrypt=encrypt_msg,
        msg_signature=sign_with_sha1(token, str(now), nonce, encrypt_msg),
        timestamp=now,
        nonce=nonce,
    )