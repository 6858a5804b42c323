"""Error Hierarchy — categories, severities and serialization.

Tests:
    - Every error carries code/category/severity and an ErrorContext
    - ApiError severity follows the transient flag; retry_after_ms lands in context
    - DecodeError truncates the body preview
    - to_dict() never contains credentials
"""

from orb_billing.core.errors import (
    ApiError,
    DecodeError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    OrbError,
    TransportError,
    UnexpectedResponseError,
    UsageError,
)


def test_usage_error_is_categorized_and_keeps_field():
    err = UsageError("page_size out of range", field="page_size")
    assert isinstance(err, OrbError)
    assert err.code == "USAGE_ERROR"
    assert err.category is ErrorCategory.USAGE
    assert err.severity is ErrorSeverity.ERROR
    assert err.field == "page_size"
    assert str(err) == "page_size out of range"


def test_transient_api_error_is_warning_severity():
    err = ApiError(429, title="Too many requests", transient=True, retry_after_ms=2000)
    assert err.severity is ErrorSeverity.WARNING
    assert err.transient is True
    assert err.context.retry_after_ms == 2000
    assert "429" in err.message
    assert "Too many requests" in err.message


def test_terminal_api_error_message_includes_detail():
    err = ApiError(400, title="Bad request", detail="email is invalid")
    assert err.severity is ErrorSeverity.ERROR
    assert err.message == "Orb API error (400): Bad request: email is invalid"
    assert err.validation_errors == []


def test_api_error_without_title_falls_back_to_status():
    err = ApiError(503)
    assert err.message == "Orb API error (503): HTTP 503"


def test_api_error_to_dict_includes_http_fields():
    ctx = ErrorContext(method="POST", path="customers", attempt=2, idempotency_key="k1")
    err = ApiError(
        422, title="Validation", error_type="https://docs.withorb.com/x",
        validation_errors=[{"field": "email"}], context=ctx,
    )
    data = err.to_dict()
    assert data["status_code"] == 422
    assert data["category"] == "api"
    assert data["error_type"] == "https://docs.withorb.com/x"
    assert data["validation_errors"] == [{"field": "email"}]
    assert data["context"]["attempt"] == 2
    assert data["context"]["idempotency_key"] == "k1"
    assert data["transient"] is False


def test_decode_error_truncates_body():
    body = "x" * 2000
    err = DecodeError("bad", "Invoice", body)
    assert err.category is ErrorCategory.DECODE
    assert err.type_name == "Invoice"
    assert len(err.body) == DecodeError.BODY_PREVIEW_CHARS
    assert err.message == "Failed to decode Invoice: bad"


def test_unexpected_response_and_transport_categories():
    unexpected = UnexpectedResponseError("customer c1 deleted=false")
    assert unexpected.category is ErrorCategory.UNEXPECTED_RESPONSE
    assert unexpected.detail == "customer c1 deleted=false"

    cause = ConnectionResetError("reset")
    transport = TransportError("reset", cause=cause)
    assert transport.category is ErrorCategory.TRANSPORT
    assert transport.cause is cause


def test_to_dict_has_no_credential_field():
    data = UsageError("x").to_dict()
    flat = repr(data).lower()
    assert "authorization" not in flat
    assert "api_key" not in flat
