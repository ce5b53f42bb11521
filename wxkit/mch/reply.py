"""Replies to payment result notifications."""

from __future__ import annotations

from dataclasses import dataclass

from wxkit.mch.consts import RESULT_FAIL, RESULT_SUCCESS

__all__ = ["Reply", "reply_ok", "reply_fail"]


def _cdata(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


@dataclass(frozen=True)
class Reply:
    """The answer sent back for a payment notification."""

    return_code: str
    return_msg: str

    def to_xml(self) -> bytes:
        """Serialise the reply as the XML body expected by the platform."""
        body = (
            "<xml>"
            f"<return_code>{_cdata(self.return_code)}</return_code>"
            f"<return_msg>{_cdata(self.return_msg)}</return_msg>"
            "</xml>"
        )
        return body.encode("utf-8")


def reply_ok() -> Reply:
    """A reply acknowledging the notification."""
    return Reply(return_code=RESULT_SUCCESS, return_msg="OK")


def reply_fail(msg: str) -> Reply:
    """A reply rejecting the notification with a reason."""
    return Reply(return_code=RESULT_FAIL, return_msg=msg)