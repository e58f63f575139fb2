import httpx
import pytest

from spmanager.core.errors import ValidationError
from spmanager.main import app
from spmanager.services.cms_client import CMSClient, get_cms_client


pytestmark = pytest.mark.asyncio


def use_cms(handler, base_url: str = "https://cms.example.com/api/v1", api_key: str | None = "secret-key"):
    cms = CMSClient(base_url, api_key=api_key, transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_cms_client] = lambda: cms
    return cms


async def test_cms_request_is_forwarded_with_key(client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("X-API-KEY")
        return httpx.Response(200, json={"contents": [{"id": "lecture-1"}]})

    use_cms(handler)
    resp = await client.get("/api/cms/lectures", params={"limit": "5"})
    assert resp.status_code == 200
    assert resp.json() == {"contents": [{"id": "lecture-1"}]}
    assert seen["url"] == "https://cms.example.com/api/v1/lectures?limit=5"
    assert seen["key"] == "secret-key"


async def test_cms_upstream_error_is_bad_gateway(client):
    use_cms(lambda request: httpx.Response(500, text="boom"))
    resp = await client.get("/api/cms/lectures")
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "UPSTREAM_ERROR"
    assert "boom" not in resp.text


async def test_cms_transport_failure_is_bad_gateway(client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    use_cms(handler)
    resp = await client.get("/api/cms/lectures/abc")
    assert resp.status_code == 502


async def test_cms_non_json_body_is_bad_gateway(client):
    use_cms(lambda request: httpx.Response(200, text="<html></html>"))
    resp = await client.get("/api/cms/lectures")
    assert resp.status_code == 502


async def test_cms_disabled_without_url(client):
    use_cms(lambda request: httpx.Response(200, json={}), base_url="")
    resp = await client.get("/api/cms/lectures")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "CMS_DISABLED"


async def test_cms_rejects_parent_paths():
    cms = CMSClient("https://cms.example.com", transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
    with pytest.raises(ValidationError):
        await cms.get_json("lectures/../admin")
