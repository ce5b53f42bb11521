import base64
import datetime
import hashlib
import ssl

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from wxkit.mch.action import Action, HTTPClient, UrllibHTTPClient
from wxkit.mch.client import Mch, MchError
from wxkit.mch.consts import (
    BATCH_QUERY_COMMENT_URL,
    CONTRACT_H5_ENTRUST,
    CONTRACT_MP_ENTRUST,
    CONTRACT_OA_ENTRUST,
    DOWNLOAD_BILL_URL,
    DOWNLOAD_FUND_FLOW_URL,
)

APPID = "wx2421b1c4370ec43b"
MCHID = "10000100"
# Sample merchant signing key from the platform's own documentation examples.
DOC_EXAMPLE_KEY = "192006250b4c09247ec02edce69f6a2d"
NONCE = "IITRi8Iabbblz1Jc"


class FakeClient(HTTPClient):
    def __init__(self, response=b""):
        self.response = response
        self.calls = []

    def post_xml(self, url, body, close=False):
        self.calls.append((url, dict(body), close))
        return self.response


def make_mch(client=None, tls_client=None, nonce=NONCE):
    client = client or FakeClient()
    return Mch(APPID, MCHID, DOC_EXAMPLE_KEY, nonce=lambda size: nonce, client=client,
               tls_client=tls_client or client)


def unify_body():
    return {
        "appid": APPID,
        "mch_id": MCHID,
        "nonce_str": "1add1a30ac87aa2db72f57a2375d8fec",
        "trade_type": "APP",
        "body": "APP支付测试",
        "out_trade_no": "1415659990",
        "total_fee": "1",
        "fee_type": "CNY",
        "spbill_create_ip": "14.23.150.211",
        "notify_url": "http://wxpay.wxutil.com/pub_v2/pay/notify.v2.php",
        "attach": "支付测试",
        "sign_type": "MD5",
    }


def test_sign_with_md5_matches_documented_request():
    mch = make_mch()
    assert mch.sign_with_md5(unify_body(), True) == "7C07373FE5EAEDB936F3E454875C9462"
    assert mch.sign_with_md5(unify_body(), False) == "7C07373FE5EAEDB936F3E454875C9462".lower()


def test_sign_ignores_empty_values_and_existing_sign():
    mch = make_mch()
    body = unify_body()
    expected = mch.sign_with_md5(body)
    body["device_info"] = ""
    body["sign"] = "ANYTHING"
    assert mch.sign_with_md5(body) == expected
    assert mch.sign_with_hmac_sha256(body) == mch.sign_with_hmac_sha256(unify_body())


def entrust_action(url, **extra):
    def build(appid, mchid, nonce):
        body = {
            "appid": appid,
            "mch_id": mchid,
            "plan_id": "106",
            "contract_code": "122",
            "request_serial": "123",
            "contract_display_account": "name1",
            "version": "1.0",
            "timestamp": "1414488825",
            "notify_url": "www.qq.com/test/papay",
            "sign_type": "MD5",
        }
        body.update(extra)
        return body

    return Action(url, build)


def test_do_oa_entrust_returns_url():
    client = FakeClient()
    r = make_mch(client).do(entrust_action(CONTRACT_OA_ENTRUST))
    assert r == {"entrust_url": "https://api.mch.weixin.qq.com/papay/entrustweb?appid=wx2421b1c4370ec43b&contract_code=122&contract_display_account=name1&mch_id=10000100&notify_url=www.qq.com%2Ftest%2Fpapay&plan_id=106&request_serial=123&sign=48F3F8F08E560D736E8D0FEFACBB012E&sign_type=MD5&timestamp=1414488825&version=1.0"}
    assert client.calls == []


def test_do_h5_entrust_signs_with_hmac():
    client = FakeClient()
    action = entrust_action(
        CONTRACT_H5_ENTRUST,
        clientip="12.1.1.12",
        return_appid="wxcbda96de0b165542",
        sign_type="HMAC-SHA256",
    )
    r = make_mch(client).do(action)
    assert r == {"entrust_url": "https://api.mch.weixin.qq.com/papay/h5entrustweb?appid=wx2421b1c4370ec43b&clientip=12.1.1.12&contract_code=122&contract_display_account=name1&mch_id=10000100&notify_url=www.qq.com%2Ftest%2Fpapay&plan_id=106&request_serial=123&return_appid=wxcbda96de0b165542&sign=CE76472E3C209CB2B3F6FC6A649B6849D4BCC78F4A4A820EEF4D5A55EF3F2660&sign_type=HMAC-SHA256&timestamp=1414488825&version=1.0"}
    assert client.calls == []


def test_do_mp_entrust_returns_signed_fields():
    def build(appid, mchid, nonce):
        return {
            "appid": appid,
            "mch_id": mchid,
            "plan_id": "106",
            "contract_code": "122",
            "request_serial": "123",
            "contract_display_account": "张三",
            "timestamp": "1414488825",
            "notify_url": "https://www.qq.com/test/papay",
            "sign_type": "MD5",
        }

    r = make_mch().do(Action(CONTRACT_MP_ENTRUST, build))
    assert r == {
        "appid": "wx2421b1c4370ec43b",
        "mch_id": "10000100",
        "plan_id": "106",
        "contract_code": "122",
        "request_serial": "123",
        "contract_display_account": "张三",
        "notify_url": "https://www.qq.com/test/papay",
        "timestamp": "1414488825",
        "sign_type": "MD5",
        "sign": "E0EC5B06A03B55F2B1FC754AB04D8381",
    }


def simple_action(tls):
    return Action(
        "https://api.mch.weixin.qq.com/pay/orderquery",
        lambda appid, mchid, nonce: {"appid": appid, "mch_id": mchid, "nonce_str": nonce},
        tls=tls,
    )


def test_do_uses_tls_client_for_tls_actions():
    plain = FakeClient(b"<xml><return_code>SUCCESS</return_code></xml>")
    secure = FakeClient(b"<xml><return_code>SUCCESS</return_code></xml>")
    mch = make_mch(plain, secure)
    assert mch.do(simple_action(True)) == {"return_code": "SUCCESS"}
    assert len(secure.calls) == 1 and plain.calls == []
    url, body, close = secure.calls[0]
    assert body["sign"] == mch.sign_with_md5(body)
    assert close is False


def test_do_raises_on_failed_return_code():
    client = FakeClient(b"<xml><return_code>FAIL</return_code><return_msg>bad request</return_msg></xml>")
    with pytest.raises(MchError, match="bad request"):
        make_mch(client).do(simple_action(False))


def test_do_raises_on_bad_signature():
    client = FakeClient(b"<xml><return_code>SUCCESS</return_code><sign>ABC</sign></xml>")
    with pytest.raises(MchError, match="signature verified failed"):
        make_mch(client).do(simple_action(False))


def test_verify_rejects_other_appid_and_mchid():
    mch = make_mch()
    with pytest.raises(MchError, match="appid mismatch"):
        mch.verify_wxml_result({"appid": "wx0000000000000000"})
    with pytest.raises(MchError, match="mchid mismatch"):
        mch.verify_wxml_result({"mch_id": "99999999"})


def test_app_api_is_signed():
    mch = make_mch()
    m = mch.app_api("wx201411101639507cbf6ffd8b0779950874")
    assert m["prepayid"] == "wx201411101639507cbf6ffd8b0779950874"
    assert m["package"] == "Sign=WXPay"
    assert m["partnerid"] == MCHID
    assert m["sign"] == mch.sign_with_md5(m)


def test_jsapi_is_signed():
    mch = make_mch()
    m = mch.jsapi("wx201411101639507cbf6ffd8b0779950874")
    assert m["package"] == "prepay_id=wx201411101639507cbf6ffd8b0779950874"
    assert m["signType"] == "MD5"
    unsigned = {k: v for k, v in m.items() if k != "paySign"}
    assert m["paySign"] == mch.sign_with_md5(unsigned)


def test_minip_redpack_jsapi():
    mch = make_mch()
    m = mch.minip_redpack_jsapi("sendid=abc&ver=8")
    assert "appId" not in m
    assert m["signType"] == "MD5"
    assert m["package"] == "sendid%3Dabc%26ver%3D8"
    signed = {"appId": APPID, "nonceStr": m["nonceStr"], "package": m["package"],
              "timeStamp": m["timeStamp"]}
    assert m["paySign"] == mch.sign_with_md5(signed, False)


def test_default_nonce_is_random_hex():
    mch = Mch(APPID, MCHID, apikey="placeholder", client=FakeClient())
    first = mch.jsapi("x")["nonceStr"]
    second = mch.jsapi("x")["nonceStr"]
    assert len(first) == 16
    int(first, 16)
    assert first != second


def test_download_bill_returns_raw_bill():
    bill = "交易时间,公众账号ID\n`2014-06-03,`wx2421b1c4370ec43b".encode()
    client = FakeClient(bill)
    mch = make_mch(client)
    assert mch.download_bill("20140603", "ALL") == bill
    url, body, close = client.calls[0]
    assert url == DOWNLOAD_BILL_URL
    assert close is True
    assert body["bill_date"] == "20140603" and body["bill_type"] == "ALL"
    assert body["sign"] == mch.sign_with_md5(body)


def test_download_bill_raises_on_failure():
    client = FakeClient(b"<xml><return_code>FAIL</return_code><return_msg>No Bill Exist</return_msg></xml>")
    with pytest.raises(MchError, match="No Bill Exist"):
        make_mch(client).download_bill("20140603", "ALL")


def test_download_fund_flow_uses_tls_and_hmac():
    plain = FakeClient()
    secure = FakeClient(b"Basic,data")
    mch = make_mch(plain, secure)
    assert mch.download_fund_flow("20140603", "Basic") == b"Basic,data"
    url, body, close = secure.calls[0]
    assert url == DOWNLOAD_FUND_FLOW_URL
    assert body["sign"] == mch.sign_with_hmac_sha256(body)
    assert plain.calls == []


def test_batch_query_comment_limit():
    secure = FakeClient(b"0\n")
    mch = make_mch(FakeClient(), secure)
    mch.batch_query_comment("20170724000000", "20170725000000", 0, 100)
    mch.batch_query_comment("20170724000000", "20170725000000", 0)
    (url, with_limit, _), (_, without_limit, _) = secure.calls
    assert url == BATCH_QUERY_COMMENT_URL
    assert with_limit["limit"] == "100" and with_limit["offset"] == "0"
    assert "limit" not in without_limit
    assert with_limit["sign"] == mch.sign_with_hmac_sha256(with_limit)


def test_decrypt_with_aes256_ecb_round_trip():
    mch = make_mch()
    plain = b"<root><out_refund_no>1415701182</out_refund_no><refund_status>SUCCESS</refund_status></root>"
    key = hashlib.md5(DOC_EXAMPLE_KEY.encode()).hexdigest().encode()
    padder = sym_padding.PKCS7(128).padder()
    padded = padder.update(plain) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    encrypted = base64.b64encode(encryptor.update(padded) + encryptor.finalize()).decode()
    assert mch.decrypt_with_aes256_ecb(encrypted) == {
        "out_refund_no": "1415701182",
        "refund_status": "SUCCESS",
    }


def test_decrypt_rejects_invalid_base64():
    with pytest.raises(ValueError):
        make_mch().decrypt_with_aes256_ecb("not*base64")


def test_load_cert_from_pem_block_rejects_garbage():
    with pytest.raises(ssl.SSLError):
        make_mch().load_cert_from_pem_block(b"not a cert", b"not a key")


def _self_signed():
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "merchant.example.com")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return key, cert


def test_load_cert_from_p12_file(tmp_path):
    key, cert = _self_signed()
    data = pkcs12.serialize_key_and_certificates(
        b"merchant", key, cert, None, serialization.BestAvailableEncryption(MCHID.encode())
    )
    path = tmp_path / "apiclient_cert.p12"
    path.write_bytes(data)
    client = FakeClient()
    mch = make_mch(client)
    mch.load_cert_from_p12_file(path)
    assert mch.client is client
    assert isinstance(mch.tls_client, UrllibHTTPClient)
    assert mch.tls_client.ssl_context.verify_mode == ssl.CERT_NONE


def test_load_cert_from_p12_file_wrong_password(tmp_path):
    key, cert = _self_signed()
    data = pkcs12.serialize_key_and_certificates(
        b"merchant", key, cert, None, serialization.BestAvailableEncryption(b"other")
    )
    path = tmp_path / "apiclient_cert.p12"
    path.write_bytes(data)
    with pytest.raises(ValueError):
        make_mch().load_cert_from_p12_file(path)