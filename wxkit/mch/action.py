"""Merchant API actions, the HTTP transport and the XML wire format."""

from __future__ import annotations

import abc
import ssl
import urllib.request
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, Mapping

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

__all__ = [
    "Action",
    "HTTPClient",
    "UrllibHTTPClient",
    "parse_xml",
    "build_xml",
    "rsa_encrypt",
]

BodyBuilder = Callable[[str, str, str], Mapping[str, str]]


@dataclass(frozen=True)
class Action:
    """One merchant API call: where it goes and how its body is built."""

    url: str
    build: BodyBuilder
    tls: bool = False
    method: str = "POST"

    def wxml(self, appid: str, mchid: str, nonce: str) -> dict[str, str]:
        """Build a fresh request body for the given merchant and nonce."""
        return dict(self.build(appid, mchid, nonce))


class HTTPClient(abc.ABC):
    """Transport that posts an XML body and returns the raw response."""

    @abc.abstractmethod
    def post_xml(self, url: str, body: Mapping[str, str], close: bool = False) -> bytes:
        """Post ``body`` as XML to ``url`` and return the response bytes."""


class UrllibHTTPClient(HTTPClient):
    """HTTP transport built on the standard library."""

    def __init__(self, ssl_context: ssl.SSLContext | None = None, timeout: float | None = None):
        self.ssl_context = ssl_context
        self.timeout = timeout

    def post_xml(self, url: str, body: Mapping[str, str], close: bool = False) -> bytes:
        headers = {"Content-Type": "text/xml; charset=utf-8"}
        if close:
            headers["Connection"] = "close"
        request = urllib.request.Request(url, data=build_xml(body), headers=headers, method="POST")
        options: dict = {"context": self.ssl_context}
        if self.timeout is not None:
            options["timeout"] = self.timeout
        with urllib.request.urlopen(request, **options) as response:
            return response.read()


def _cdata(text: str) -> str:
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def build_xml(m: Mapping[str, str]) -> bytes:
    """Serialise a flat mapping as an ``<xml>`` document with CDATA values."""
    parts = [f"<{key}>{_cdata(str(value))}</{key}>" for key, value in m.items()]
    return ("<xml>" + "".join(parts) + "</xml>").encode("utf-8")


def parse_xml(data: bytes | str) -> dict[str, str]:
    """Parse a flat ``<xml>`` document into a mapping of child tag to text.

    Input that is not markup at all (such as a downloaded CSV bill) yields an
    empty mapping; malformed markup raises ValueError.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data.strip().startswith(b"<"):
        return {}
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"invalid XML: {exc}") from exc
    return {child.tag: child.text or "" for child in root}


def rsa_encrypt(data: bytes | str, public_key: bytes | str) -> bytes:
    """Encrypt with an RSA public key in PEM form, using OAEP with SHA-1."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if isinstance(public_key, str):
        public_key = public_key.encode("utf-8")
    key = serialization.load_pem_public_key(public_key)
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("public key is not an RSA key")
    return key.encrypt(
        data,
        padding.OAEP(mgf=padding.MGF1(algorithm=hashes.SHA1()), algorithm=hashes.SHA1(), label=None),
    )