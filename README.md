# wxkit

A client for the WeChat Pay merchant API (direct merchant mode) and helpers
for WeChat event messages.

What it covers:

- signed XML requests (MD5 and HMAC-SHA256) and verification of the replies
- refunds and refund queries (`wxkit.mch.refund`)
- bill and fund-flow downloads, order comments
- signed parameters for starting a payment from an app, a web page, or for
  opening a red packet in a mini program
- verification of payment notifications and the replies to them
- decryption of refund notifications (AES-256-ECB)
- RSA (OAEP, SHA-1) encryption with a PEM public key
- SHA-1 signatures and encrypted replies for event messages

## Installation

```
pip install wxkit
```

Python 3.10 or later is needed. The only dependency is `cryptography`.

## Modules

- `wxkit.mch.client` – `Mch`, the client, and `MchError`
- `wxkit.mch.action` – `Action`, the `HTTPClient` transport interface and its
  standard-library implementation `UrllibHTTPClient`, plus `parse_xml`,
  `build_xml` and `rsa_encrypt`
- `wxkit.mch.refund` – `RefundData` and the refund actions
- `wxkit.mch.reply` – `Reply`, `reply_ok`, `reply_fail`
- `wxkit.mch.consts` – trade types, sign types, result codes, states and API URLs
- `wxkit.event` – `MessageType`, `EventType`, `EventMessage`, `ReplyMessage`,
  `sign_with_sha1`, `build_reply`

## Making a request

Every API call is an `Action`: a URL, a function that builds the request body
from the app id, merchant id and a nonce, and whether it needs the client
certificate. `Mch.do` builds the body, signs it (HMAC-SHA256 when the body's
`sign_type` is `HMAC-SHA256`, MD5 otherwise), posts it and checks the reply.

```python
from wxkit.mch.client import Mch, MchError
from wxkit.mch.refund import RefundData, refund_by_out_trade_no

mch = Mch("wx0000000000000000", "10000100", apikey="placeholder")
mch.load_cert_from_pem_file("apiclient_cert.pem", "apiclient_key.pem")

try:
    result = mch.do(refund_by_out_trade_no("1415757673", RefundData(
        out_refund_no="1415701182",
        total_fee=1,
        refund_fee=1,
    )))
except MchError as exc:
    print("request failed:", exc)
```

`do` returns the reply as a `dict` of strings. A reply whose `return_code` is
not `SUCCESS`, or whose signature, app id or merchant id does not match, raises
`MchError`.

Refund queries take an optional `offset`:

```python
from wxkit.mch.refund import query_refund_by_out_trade_no

mch.do(query_refund_by_out_trade_no("1415757673", offset=10))
```

Other API calls are written as an `Action` directly, with the URLs in
`wxkit.mch.consts`:

```python
from wxkit.mch.action import Action
from wxkit.mch.consts import ORDER_CLOSE_URL, SIGN_MD5

close = Action(ORDER_CLOSE_URL, lambda appid, mchid, nonce: {
    "appid": appid,
    "mch_id": mchid,
    "out_trade_no": "1415983244",
    "nonce_str": nonce,
    "sign_type": SIGN_MD5,
})
mch.do(close)
```

An action whose URL is `CONTRACT_OA_ENTRUST` or `CONTRACT_H5_ENTRUST` is not
posted: `do` returns `{"entrust_url": ...}`, the signed query string appended
to the entrust page URL. For `CONTRACT_MP_ENTRUST` it returns the signed fields
themselves.

`app_api`, `jsapi` and `minip_redpack_jsapi` build the signed parameters that an
app, a web page or a mini program needs to start a payment or open a red packet.

`download_bill`, `download_fund_flow` and `batch_query_comment` return the raw
response bytes, raising `MchError` only when the response is an XML error.

## Client certificates

Actions with `tls=True` (refunds among them) and the fund-flow and comment
downloads go through `tls_client`. Load the merchant certificate once:

```python
mch.load_cert_from_p12_file("apiclient_cert.p12")  # protected by the merchant id
# or
mch.load_cert_from_pem_file("apiclient_cert.pem", "apiclient_key.pem")
# or
mch.load_cert_from_pem_block(cert_pem, key_pem)
```

The connections made by the default transport do not verify the server
certificate. Any object implementing `HTTPClient.post_xml(url, body, close)`
can be passed as `client` or `tls_client` to `Mch`.

## Notifications

Verify a payment notification and answer it:

```python
from wxkit.mch.action import parse_xml
from wxkit.mch.reply import reply_fail, reply_ok

notice = parse_xml(body)
try:
    mch.verify_wxml_result(notice)
except MchError as exc:
    answer = reply_fail(str(exc)).to_xml()
else:
    answer = reply_ok().to_xml()
```

Refund notifications carry an encrypted `req_info` field:

```python
info = mch.decrypt_with_aes256_ecb(notice["req_info"])
```

## Event messages

```python
from wxkit.event import EventMessage, build_reply, sign_with_sha1

message = EventMessage.from_xml(body)
signature = sign_with_sha1("token", timestamp, nonce)
reply_xml = build_reply("token", nonce, encrypted_message).to_xml()
```

`build_reply` takes a message that is already encrypted; the package does not
encrypt or decrypt event messages.

## What the package does not do

Only refunds come with ready-made actions. Orders, entrust (contract) payments,
transfers and red packets have their URLs and codes in `wxkit.mch.consts`, but
their request bodies must be built by hand as an `Action`. There is no command
line tool and no server for receiving notifications.

## Running the tests

```
pip install "wxkit[test]"
pytest
```