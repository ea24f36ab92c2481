import pytest

import httpx

from wwah_search.client.courses import CoursesClient
from wwah_search.client.identity import IdentityClient
from wwah_search.core.errors import IdentityLookupError

IDENTITY_URL = "https://identity.test/api/getUserData"


def _identity(handler):
    return IdentityClient(base_url=IDENTITY_URL, transport=httpx.MockTransport(handler))


class TestIdentityClient:

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"personalInfo": {"_id": "1"}})

        data = await _identity(handler).get_user_data("tok")

        assert seen["auth"] == "Bearer tok"
        assert data == {"personalInfo": {"_id": "1"}}

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        client = _identity(lambda request: httpx.Response(401, json={"message": "expired"}))

        with pytest.raises(IdentityLookupError):
            await client.get_user_data("tok")

    @pytest.mark.asyncio
    async def test_missing_personal_info(self):
        client = _identity(lambda request: httpx.Response(200, json={"user": {}}))

        with pytest.raises(IdentityLookupError, match="personalInfo"):
            await client.get_user_data("tok")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = _identity(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(IdentityLookupError):
            await client.get_user_data("tok")

    @pytest.mark.asyncio
    async def test_unreachable_service(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(IdentityLookupError):
            await _identity(handler).get_user_data("tok")


class TestCoursesClient:

    @pytest.mark.asyncio
    async def test_query_parameters(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"courses": []})

        client = CoursesClient(
            base_url="https://app.test", transport=httpx.MockTransport(handler)
        )
        data = await client.get_courses("Data Science")

        assert data == {"courses": []}
        assert seen["path"] == "/api/getCourses"
        assert seen["params"] == {"search": "Data Science", "limit": "4"}

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = CoursesClient(
            base_url="https://app.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await client.get_courses("x")
