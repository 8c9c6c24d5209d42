import pytest

from apicheck.decoder import decode_check_response, PayloadDecodeError

FULL_PAYLOAD = b"""<?xml version="1.0" encoding="UTF-8"?>
<CheckResponse>
  <minorVersion>3</minorVersion>
  <application>
    <longName>Vehicle Gateway</longName>
    <shortName>vgw</shortName>
    <componentVersion>4.2.0</componentVersion>
    <success>true</success>
    <check>
      <name>database</name>
      <success>true</success>
    </check>
    <check>
      <name>message-queue</name>
      <success>false</success>
      <failureReason>broker unreachable</failureReason>
    </check>
  </application>
  <application>
    <longName>Telematics Router</longName>
    <shortName>tr</shortName>
    <componentVersion>1.0.1</componentVersion>
    <success>false</success>
    <failureReason>degraded</failureReason>
  </application>
</CheckResponse>
"""


def test_decode_full_payload_preserves_order():
    response = decode_check_response(FULL_PAYLOAD)

    assert response.minor_version == 3
    assert [a.short_name for a in response.applications] == ["vgw", "tr"]

    gateway = response.applications[0]
    assert gateway.long_name == "Vehicle Gateway"
    assert gateway.component_version == "4.2.0"
    assert gateway.success is True
    assert [c.name for c in gateway.checks] == ["database", "message-queue"]
    assert gateway.checks[1].success is False
    assert gateway.checks[1].failure_reason == "broker unreachable"

    router = response.applications[1]
    assert router.success is False
    assert router.failure_reason == "degraded"
    assert router.checks == ()


def test_decode_leaves_run_metadata_empty():
    response = decode_check_response(FULL_PAYLOAD)
    assert response.url == ""
    assert response.http_code == 0
    assert response.error is None


def test_unknown_elements_are_ignored():
    body = b"""<CheckResponse>
      <generatedAt>2017-02-16T10:00:00Z</generatedAt>
      <application>
        <shortName>vgw</shortName>
        <owner>team-a</owner>
        <success>true</success>
        <check><name>db</name><success>true</success><latencyMs>3</latencyMs></check>
      </application>
    </CheckResponse>"""
    response = decode_check_response(body)
    assert response.ok() is True
    assert response.applications[0].checks[0].name == "db"


def test_missing_fields_take_zero_values():
    response = decode_check_response(b"<CheckResponse><application><check/></application></CheckResponse>")
    assert response.minor_version == 0
    app = response.applications[0]
    assert app.success is False
    assert app.long_name == ""
    assert app.checks[0].success is False
    assert app.checks[0].failure_reason is None


@pytest.mark.parametrize("text, expected", [
    ("true", True),
    ("false", False),
    (" true\n", True),
    ("1", True),
    ("0", False),
    ("TRUE", True),
    ("", False),
])
def test_boolean_text_forms(text, expected):
    body = f"<CheckResponse><application><success>{text}</success></application></CheckResponse>".encode()
    assert decode_check_response(body).applications[0].success is expected


def test_invalid_boolean_is_a_decode_error():
    body = b"<CheckResponse><application><success>maybe</success></application></CheckResponse>"
    with pytest.raises(PayloadDecodeError, match="invalid boolean"):
        decode_check_response(body)


def test_invalid_integer_is_a_decode_error():
    with pytest.raises(PayloadDecodeError, match="invalid integer"):
        decode_check_response(b"<CheckResponse><minorVersion>one</minorVersion></CheckResponse>")


def test_minor_version_is_trimmed():
    assert decode_check_response(b"<CheckResponse><minorVersion> 7 </minorVersion></CheckResponse>").minor_version == 7


def test_malformed_xml_is_a_decode_error():
    with pytest.raises(PayloadDecodeError, match="malformed XML"):
        decode_check_response(b"<CheckResponse><application>")


def test_empty_body_is_a_decode_error():
    with pytest.raises(PayloadDecodeError):
        decode_check_response(b"")


def test_wrong_root_element_is_a_decode_error():
    with pytest.raises(PayloadDecodeError, match="expected element type <CheckResponse> but have <html>"):
        decode_check_response(b"<html><body>Service Unavailable</body></html>")


def test_namespaced_document_is_accepted():
    body = b"""<ns:CheckResponse xmlns:ns="urn:status">
      <ns:minorVersion>2</ns:minorVersion>
      <ns:application><ns:success>true</ns:success>
        <ns:check><ns:name>db</ns:name><ns:success>true</ns:success></ns:check>
      </ns:application>
    </ns:CheckResponse>"""
    response = decode_check_response(body)
    assert response.minor_version == 2
    assert response.ok() is True
