from __future__ import annotations

from fastapi.testclient import TestClient

from hookgate.receivers import (
    CodeValidator,
    DispatchResult,
    MailChimpProfile,
    RejectionKind,
    TransportGuard,
    WebHookReceiver,
)
from hookgate.receivers.http import HttpGatewayConfig, create_receiver_app
from hookgate.receivers.http.app import unknown_receiver_error
from tests.doubles import ROUTE_ID, SECRET, RecordingDispatcher, RecordingSecretStore

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}
URL = f"/api/webhooks/incoming/mailchimp/{ROUTE_ID}"


def _client(
    store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
    *,
    base_url: str = "https://testserver",
    config: HttpGatewayConfig | None = None,
) -> TestClient:
    receiver = WebHookReceiver(
        MailChimpProfile(),
        transport_guard=TransportGuard(),
        code_validator=CodeValidator(store),
        dispatcher=dispatcher,
    )
    app = create_receiver_app(receivers={"mailchimp": receiver}, config=config)
    return TestClient(app, base_url=base_url)


def test_post_dispatches_and_returns_empty_200(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    client = _client(secret_store, dispatcher)
    resp = client.post(URL, params={"code": SECRET}, content=b"type=subscribe&email=x%40y.com", headers=FORM_HEADERS)
    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers.get("x-request-id")
    assert len(dispatcher.calls) == 1
    assert dispatcher.calls[0].actions == ["subscribe"]
    assert dispatcher.calls[0].event["email"] == "x@y.com"


def test_handler_result_is_rendered(secret_store: RecordingSecretStore) -> None:
    dispatcher = RecordingDispatcher(result=DispatchResult(status_code=202, body={"queued": True}))
    client = _client(secret_store, dispatcher)
    resp = client.post(URL, params={"code": SECRET}, content=b"type=profile", headers=FORM_HEADERS)
    assert resp.status_code == 202
    assert resp.json() == {"queued": True}


def test_text_handler_result_is_plain_text(secret_store: RecordingSecretStore) -> None:
    dispatcher = RecordingDispatcher(result=DispatchResult(status_code=200, body="thanks"))
    client = _client(secret_store, dispatcher)
    resp = client.post(URL, params={"code": SECRET}, content=b"type=profile", headers=FORM_HEADERS)
    assert resp.text == "thanks"
    assert resp.headers["content-type"].startswith("text/plain")


def test_get_handshake_returns_empty_200(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).get(URL, params={"code": SECRET})
    assert resp.status_code == 200
    assert resp.content == b""
    assert dispatcher.calls == []


def test_default_route_uses_empty_route_id(dispatcher: RecordingDispatcher) -> None:
    store = RecordingSecretStore(secrets={"mailchimp": {"": SECRET}})
    resp = _client(store, dispatcher).get("/api/webhooks/incoming/mailchimp", params={"code": SECRET})
    assert resp.status_code == 200
    assert store.lookups == [("mailchimp", "")]


def test_wrong_code_error_body_leaks_nothing(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).post(
        URL,
        params={"code": "wrong"},
        content=b"type=subscribe",
        headers={**FORM_HEADERS, "x-request-id": "req-1"},
    )
    assert resp.status_code == 401
    error = resp.json()["error"]
    assert error["code"] == "INVALID_CODE"
    assert error["request_id"] == "req-1"
    assert error["timestamp"]
    assert "wrong" not in resp.text
    assert SECRET not in resp.text
    assert resp.headers["x-request-id"] == "req-1"


def test_missing_and_wrong_code_responses_match(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    client = _client(secret_store, dispatcher)
    missing = client.post(URL, content=b"type=subscribe", headers=FORM_HEADERS).json()["error"]
    wrong = client.post(URL, params={"code": "nope"}, content=b"type=subscribe", headers=FORM_HEADERS).json()["error"]
    assert (missing["code"], missing["message"]) == (wrong["code"], wrong["message"])


def test_put_is_405_without_secret_lookup(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).put(URL, params={"code": SECRET}, content=b"type=subscribe")
    assert resp.status_code == 405
    assert resp.headers["allow"] == "GET, POST"
    assert secret_store.lookups == []


def test_plain_http_from_remote_client_is_400(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    client = _client(secret_store, dispatcher, base_url="http://testserver")
    resp = client.post(URL, params={"code": SECRET}, content=b"type=subscribe", headers=FORM_HEADERS)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "HTTPS_REQUIRED"
    assert dispatcher.calls == []


def test_forwarded_proto_is_ignored_by_default(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    client = _client(secret_store, dispatcher, base_url="http://testserver")
    resp = client.get(URL, params={"code": SECRET}, headers={"X-Forwarded-Proto": "https"})
    assert resp.status_code == 400


def test_forwarded_proto_is_honored_when_trusted(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    client = _client(
        secret_store,
        dispatcher,
        base_url="http://testserver",
        config=HttpGatewayConfig(trust_forwarded_proto=True),
    )
    resp = client.get(URL, params={"code": SECRET}, headers={"X-Forwarded-Proto": "http, https"})
    assert resp.status_code == 200


def test_client_supplied_forwarded_proto_cannot_claim_https(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    client = _client(
        secret_store,
        dispatcher,
        base_url="http://testserver",
        config=HttpGatewayConfig(trust_forwarded_proto=True),
    )
    resp = client.post(
        URL,
        params={"code": SECRET},
        content=b"type=subscribe",
        headers={**FORM_HEADERS, "X-Forwarded-Proto": "https, http"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "HTTPS_REQUIRED"
    assert dispatcher.calls == []


def test_unconfigured_route_is_500(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).get("/api/webhooks/incoming/mailchimp/unknown", params={"code": SECRET})
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "RECEIVER_NOT_CONFIGURED"


def test_missing_type_is_400(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).post(
        URL, params={"code": SECRET}, content=b"email=x%40y.com", headers=FORM_HEADERS
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MISSING_DISCRIMINATOR"


def test_json_body_is_415(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).post(URL, params={"code": SECRET}, json={"type": "subscribe"})
    assert resp.status_code == 415


def test_unknown_receiver_is_404(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).post(
        "/api/webhooks/incoming/github/abc", params={"code": SECRET}, content=b"type=push", headers=FORM_HEADERS
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "RECEIVER_NOT_FOUND"
    assert secret_store.lookups == []


def test_receiver_name_is_case_insensitive(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).get(f"/api/webhooks/incoming/MailChimp/{ROUTE_ID}", params={"code": SECRET})
    assert resp.status_code == 200


def test_health_lists_receivers(
    secret_store: RecordingSecretStore,
    dispatcher: RecordingDispatcher,
) -> None:
    resp = _client(secret_store, dispatcher).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "receivers": ["mailchimp"]}


def test_unknown_receiver_error_has_its_own_kind() -> None:
    error = unknown_receiver_error()
    assert error.kind is RejectionKind.UNKNOWN_RECEIVER
    assert error.status_code == 404
