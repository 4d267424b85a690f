# tests/test_api_client.py
import httpx
import pytest

from notesync.client.api import ApiClient, NotAuthenticatedError, RemoteServiceError, RemoteUnavailableError


def _client(handler, **kwargs):
    return ApiClient("http://api.test/api/", transport=httpx.MockTransport(handler), **kwargs)


def test_base_url_and_bearer_header():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"status": "success", "data": [], "count": 0})

    api = _client(handler)
    assert api.base_url == "http://api.test/api"
    api.set_token("tok")
    assert api.list_notes(search="milk", category=None, sort_by="title") == []
    assert seen["url"] == "http://api.test/api/notes?search=milk&sortBy=title"
    assert seen["auth"] == "Bearer tok"


def test_bearer_endpoint_without_token_never_hits_the_network():
    def handler(request):
        pytest.fail("network must not be used without a token")

    api = _client(handler)
    with pytest.raises(NotAuthenticatedError) as exc:
        api.create_note({"title": "x", "content": "y"})
    assert exc.value.tier == "cloud"


def test_error_envelope_is_mapped():
    def handler(request):
        return httpx.Response(404, json={"error": {"code": "not_found", "message": "Note not found.", "details": {}}})

    api = _client(handler)
    api.set_token("tok")
    with pytest.raises(RemoteServiceError) as exc:
        api.get_note("abc")
    assert exc.value.status_code == 404
    assert exc.value.code == "not_found"
    assert exc.value.message == "Note not found."


def test_non_json_error_body():
    api = _client(lambda request: httpx.Response(502, text="Bad gateway"))
    with pytest.raises(RemoteServiceError) as exc:
        api.login("a@example.com", "secret1")
    assert exc.value.status_code == 502
    assert "502" in exc.value.message


def test_html_page_on_success_is_a_bad_response():
    def handler(request):
        return httpx.Response(200, text="<html>captive portal</html>", headers={"Content-Type": "text/html"})

    api = _client(handler)
    api.set_token("tok")
    with pytest.raises(RemoteServiceError) as exc:
        api.create_note({"title": "A", "content": "b"})
    assert exc.value.code == "bad_response"
    assert exc.value.status_code == 200
    assert not isinstance(exc.value, RemoteUnavailableError)

    with pytest.raises(RemoteServiceError) as exc:
        api.list_notes()
    assert exc.value.code == "bad_response"


def test_list_without_data_is_a_bad_response():
    api = _client(lambda request: httpx.Response(200, json={"status": "success"}))
    api.set_token("tok")
    with pytest.raises(RemoteServiceError) as exc:
        api.list_trash()
    assert exc.value.code == "bad_response"


@pytest.mark.parametrize("error",[httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout])
def test_transport_failures_become_unavailable(error):
    def handler(request):
        raise error("boom", request=request)

    api = _client(handler, timeout=0.5)
    api.set_token("tok")
    with pytest.raises(RemoteUnavailableError):
        api.list_trash()


def test_close_is_reentrant():
    api = _client(lambda request: httpx.Response(200, json={}))
    api._get_client()
    api.close()
    api.close()
    assert api._client is None
