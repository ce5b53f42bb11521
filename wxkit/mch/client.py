"""The merchant payment client: signing, verification and request dispatch."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import ssl
import tempfile
import time
from pathlib import Path
from typing import Callable, Mapping
from urllib.parse import quote_plus, urlencode

from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization import pkcs12

from wxkit.mch.action import Action, HTTPClient, UrllibHTTPClient, parse_xml
from wxkit.mch.consts import (
    BATCH_QUERY_COMMENT_URL,
    CONTRACT_H5_ENTRUST,
    CONTRACT_MP_ENTRUST,
    CONTRACT_OA_ENTRUST,
    DOWNLOAD_BILL_URL,
    DOWNLOAD_FUND_FLOW_URL,
    PAPPAY_H5_ENTRUST_URL,
    PAPPAY_OA_ENTRUST_URL,
    RESULT_SUCCESS,
    SIGN_HMAC_SHA256,
    SIGN_MD5,
)

__all__ = ["MchError", "Mch"]


class MchError(Exception):
    """Raised when the payment platform rejects a request or a reply fails checks."""


def _random_nonce(size: int) -> str:
    return secrets.token_hex(size // 2)


def _insecure_tls_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _as_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


class Mch:
    """Client for the merchant payment API (direct merchant mode)."""

    def __init__(
        self,
        appid: str,
        mchid: str,
        apikey: str,
        nonce: Callable[[int], str] | None = None,
        client: HTTPClient | None = None,
        tls_client: HTTPClient | None = None,
    ):
        self.appid = appid
        self.mchid = mchid
        self.apikey = apikey
        self.nonce = nonce or _random_nonce
        self.client = client or UrllibHTTPClient(_insecure_tls_context())
        self.tls_client = tls_client or self.client

    def load_cert_from_p12_file(self, path: str | Path) -> None:
        """Use the client certificate in a PKCS#12 file protected by the merchant id."""
        data = Path(path).read_bytes()
        key, cert, extra = pkcs12.load_key_and_certificates(data, self.mchid.encode("utf-8"))
        if key is None or cert is None:
            raise ValueError("PKCS#12 data holds no certificate and private key")
        cert_pem = b"".join(
            c.public_bytes(serialization.Encoding.PEM) for c in (cert, *extra)
        )
        key_pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        self.load_cert_from_pem_block(cert_pem, key_pem)

    def load_cert_from_pem_file(self, cert_file: str | Path, key_file: str | Path) -> None:
        """Use the client certificate and key held in PEM files."""
        context = _insecure_tls_context()
        context.load_cert_chain(str(cert_file), str(key_file))
        self.tls_client = UrllibHTTPClient(context)

    def load_cert_from_pem_block(self, cert_pem: bytes | str, key_pem: bytes | str) -> None:
        """Use a client certificate and key given as PEM data."""
        with tempfile.TemporaryDirectory() as tmp:
            cert_path = Path(tmp, "cert.pem")
            key_path = Path(tmp, "key.pem")
            cert_path.write_bytes(_as_bytes(cert_pem))
            key_path.write_bytes(_as_bytes(key_pem))
            self.load_cert_from_pem_file(cert_path, key_path)

    def do(self, action: Action) -> dict[str, str]:
        """Sign and run an action, returning the verified response fields."""
        m = action.wxml(self.appid, self.mchid, self.nonce(16))
        m["sign"] = self._sign(m)

        if action.url == CONTRACT_OA_ENTRUST:
            return {"entrust_url": f"{PAPPAY_OA_ENTRUST_URL}?{urlencode(sorted(m.items()))}"}
        if action.url == CONTRACT_MP_ENTRUST:
            return m
        if action.url == CONTRACT_H5_ENTRUST:
            return {"entrust_url": f"{PAPPAY_H5_ENTRUST_URL}?{urlencode(sorted(m.items()))}"}

        transport = self.tls_client if action.tls else self.client
        result = parse_xml(transport.post_xml(action.url, m, False))
        if result.get("return_code") != RESULT_SUCCESS:
            raise MchError(result.get("return_msg", ""))
        self.verify_wxml_result(result)
        return result

    def app_api(self, prepay_id: str) -> dict[str, str]:
        """Parameters for an app to start a payment."""
        m = {
            "appid": self.appid,
            "partnerid": self.mchid,
            "prepayid": prepay_id,
            "package": "Sign=WXPay",
            "noncestr": self.nonce(16),
            "timestamp": str(int(time.time())),
        }
        m["sign"] = self.sign_with_md5(m, True)
        return m

    def jsapi(self, prepay_id: str) -> dict[str, str]:
        """Parameters for JavaScript to start a payment."""
        m = {
            "appId": self.appid,
            "nonceStr": self.nonce(16),
            "package": f"prepay_id={prepay_id}",
            "signType": SIGN_MD5,
            "timeStamp": str(int(time.time())),
        }
        m["paySign"] = self.sign_with_md5(m, True)
        return m

    def minip_redpack_jsapi(self, pkg: str) -> dict[str, str]:
        """Parameters for a mini program to open a redpack."""
        m = {
            "appId": self.appid,
            "nonceStr": self.nonce(16),
            "package": quote_plus(pkg),
            "timeStamp": str(int(time.time())),
        }
        m["paySign"] = self.sign_with_md5(m, False)
        del m["appId"]
        m["signType"] = SIGN_MD5
        return m

    def download_bill(self, bill_date: str, bill_type: str) -> bytes:
        """Download the trade bill of a day (date as ``yyyyMMdd``)."""
        m = {
            "appid": self.appid,
            "mch_id": self.mchid,
            "bill_date": bill_date,
            "bill_type": bill_type,
            "nonce_str": self.nonce(16),
        }
        m["sign"] = self.sign_with_md5(m, True)
        return self._download(self.client, DOWNLOAD_BILL_URL, m)

    def download_fund_flow(self, bill_date: str, account_type: str) -> bytes:
        """Download the fund flow bill of a day (date as ``yyyyMMdd``)."""
        m = {
            "appid": self.appid,
            "mch_id": self.mchid,
            "bill_date": bill_date,
            "account_type": account_type,
            "nonce_str": self.nonce(16),
        }
        m["sign"] = self.sign_with_hmac_sha256(m, True)
        return self._download(self.tls_client, DOWNLOAD_FUND_FLOW_URL, m)

    def batch_query_comment(
        self, begin_time: str, end_time: str, offset: int, limit: int | None = None
    ) -> bytes:
        """Fetch order comments between two ``yyyyMMddHHmmss`` times (200 at most by default)."""
        m = {
            "appid": self.appid,
            "mch_id": self.mchid,
            "begin_time": begin_time,
            "end_time": end_time,
            "offset": str(offset),
            "nonce_str": self.nonce(16),
        }
        if limit is not None:
            m["limit"] = str(limit)
        m["sign"] = self.sign_with_hmac_sha256(m, True)
        return self._download(self.tls_client, BATCH_QUERY_COMMENT_URL, m)

    def sign_with_md5(self, m: Mapping[str, str], to_upper: bool = True) -> str:
        """MD5 signature of the fields, keyed with the API key."""
        sign = hashlib.md5(self._sign_string(m).encode("utf-8")).hexdigest()
        return sign.upper() if to_upper else sign

    def sign_with_hmac_sha256(self, m: Mapping[str, str], to_upper: bool = True) -> str:
        """HMAC-SHA256 signature of the fields, keyed with the API key."""
        sign = hmac.new(
            self.apikey.encode("utf-8"), self._sign_string(m).encode("utf-8"), hashlib.sha256
        ).hexdigest()
        return sign.upper() if to_upper else sign

    def verify_wxml_result(self, m: Mapping[str, str]) -> None:
        """Check the signature, appid and mch_id of a response or notification."""
        if "sign" in m:
            signature = self._sign(m)
            if m["sign"] != signature:
                raise MchError(f"signature verified failed, want: {signature}, got: {m['sign']}")
        if "appid" in m and m["appid"] != self.appid:
            raise MchError(f"appid mismatch, want: {self.appid}, got: {m['appid']}")
        if "mch_id" in m and m["mch_id"] != self.mchid:
            raise MchError(f"mchid mismatch, want: {self.mchid}, got: {m['mch_id']}")

    def decrypt_with_aes256_ecb(self, encrypt: str) -> dict[str, str]:
        """Decrypt an AES-256-ECB payload (as in refund notifications) into fields."""
        cipher_text = base64.b64decode(encrypt, validate=True)
        key = hashlib.md5(self.apikey.encode("utf-8")).hexdigest().encode("ascii")
        decryptor = Cipher(algorithms.AES(key), modes.ECB()).decryptor()
        padded = decryptor.update(cipher_text) + decryptor.finalize()
        unpadder = sym_padding.PKCS7(algorithms.AES.block_size).unpadder()
        plain = unpadder.update(padded) + unpadder.finalize()
        return parse_xml(plain)

    def _sign(self, m: Mapping[str, str]) -> str:
        if m.get("sign_type") == SIGN_HMAC_SHA256:
            return self.sign_with_hmac_sha256(m, True)
        return self.sign_with_md5(m, True)

    def _sign_string(self, m: Mapping[str, str]) -> str:
        pairs = [f"{k}={m[k]}" for k in sorted(m) if k != "sign" and m[k] != ""]
        pairs.append(f"key={self.apikey}")
        return "&".join(pairs)

    @staticmethod
    def _download(transport: HTTPClient, url: str, m: Mapping[str, str]) -> bytes:
        resp = transport.post_xml(url, m, True)
        result = parse_xml(resp)
        if result and result.get("return_code") != RESULT_SUCCESS:
            raise MchError(result.get("return_msg", ""))
        return resp