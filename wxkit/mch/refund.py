"""Refunds: applying for them and querying their progress."""

from __future__ import annotations

from dataclasses import dataclass

from wxkit.mch.action import Action
from wxkit.mch.consts import REFUND_APPLY_URL, REFUND_QUERY_URL, SIGN_MD5

__all__ = [
    "RefundData",
    "refund_by_transaction_id",
    "refund_by_out_trade_no",
    "query_refund_by_refund_id",
    "query_refund_by_out_refund_no",
    "query_refund_by_transaction_id",
    "query_refund_by_out_trade_no",
]


@dataclass
class RefundData:
    """Data of a refund; amounts are in fen."""

    out_refund_no: str
    total_fee: int
    refund_fee: int
    refund_fee_type: str = ""
    refund_desc: str = ""
    refund_account: str = ""
    notify_url: str = ""


_OPTIONAL_FIELDS = ("refund_fee_type", "refund_desc", "refund_account", "notify_url")


def _refund(key: str, value: str, data: RefundData) -> Action:
    def build(appid: str, mchid: str, nonce: str) -> dict[str, str]:
        body = {
            "appid": appid,
            "mch_id": mchid,
            "nonce_str": nonce,
            key: value,
            "out_refund_no": data.out_refund_no,
            "total_fee": str(data.total_fee),
            "refund_fee": str(data.refund_fee),
            "sign_type": SIGN_MD5,
        }
        for field in _OPTIONAL_FIELDS:
            field_value = getattr(data, field)
            if field_value:
                body[field] = field_value
        return body

    return Action(REFUND_APPLY_URL, build, tls=True)


def refund_by_transaction_id(transaction_id: str, data: RefundData) -> Action:
    """Refund an order identified by the platform's transaction id."""
    return _refund("transaction_id", transaction_id, data)


def refund_by_out_trade_no(out_trade_no: str, data: RefundData) -> Action:
    """Refund an order identified by the merchant's trade number."""
    return _refund("out_trade_no", out_trade_no, data)


def _query(key: str, value: str, offset: int | None) -> Action:
    def build(appid: str, mchid: str, nonce: str) -> dict[str, str]:
        body = {
            "appid": appid,
            "mch_id": mchid,
            key: value,
            "nonce_str": nonce,
            "sign_type": SIGN_MD5,
        }
        if offset is not None:
            body["offset"] = str(offset)
        return body

    return Action(REFUND_QUERY_URL, build)


def query_refund_by_refund_id(refund_id: str, offset: int | None = None) -> Action:
    """Query refunds by the platform's refund id."""
    return _query("refund_id", refund_id, offset)


def query_refund_by_out_refund_no(out_refund_no: str, offset: int | None = None) -> Action:
    """Query refunds by the merchant's refund number."""
    return _query("out_refund_no", out_refund_no, offset)


def query_refund_by_transaction_id(transaction_id: str, offset: int | None = None) -> Action:
    """Query refunds by the platform's transaction id."""
    return _query("transaction_id", transaction_id, offset)


def query_refund_by_out_trade_no(out_trade_no: str, offset: int | None = None) -> Action:
    """Query refunds by the merchant's trade number."""
    return _query("out_trade_no", out_trade_no, offset)