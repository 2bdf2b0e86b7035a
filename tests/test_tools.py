"""Unit tests for the tool registry and run_tool."""

from __future__ import annotations

import httpx
import pytest
from respx import MockRouter

from courtlistener_mcp.core.fetcher import CourtListenerClient
from courtlistener_mcp.mcp.tools import (
    TOOLS,
    ToolArgumentError,
    UnknownToolError,
    get_tool,
    run_tool,
)
from tests.conftest import BASE_URL, VALID_TOKEN

SITE_URL = "https://cl.test"


def test_registry_has_all_tools():
    assert set(TOOLS) == {
        "search-dockets",
        "get-docket",
        "search-clusters",
        "get-cluster",
        "search-opinions",
        "get-opinion",
        "list-courts",
        "get-court",
        "search-docket-entries",
        "get-docket-entry",
        "search-parties",
        "get-party",
        "search-attorneys",
        "get-attorney",
        "search-recap-documents",
        "get-recap-document",
        "recap-query",
    }


def test_input_schema_describes_arguments():
    schema = get_tool("search-dockets").input_schema()

    assert schema["type"] == "object"
    assert "q" in schema["properties"]
    assert "auth_token" in schema["properties"]
    assert schema["properties"]["limit"]["maximum"] == 100

    detail = get_tool("get-docket").input_schema()
    assert detail["required"] == ["docket_id"]


def test_unknown_tool():
    with pytest.raises(UnknownToolError):
        get_tool("delete-everything")


class TestArgumentValidation:
    @pytest.mark.parametrize(
        "name, arguments, field",
        [
            ("search-dockets", {"limit": 0}, "limit"),
            ("search-dockets", {"limit": 101}, "limit"),
            ("search-dockets", {"court": "CA9"}, "court"),
            ("search-dockets", {"court": "ca-9"}, "court"),
            ("search-dockets", {"date_filed_after": "01/02/2020"}, "date_filed_after"),
            ("get-docket", {}, "docket_id"),
            ("get-docket", {"docket_id": 0}, "docket_id"),
            ("get-court", {"court_id": "<script>"}, "court_id"),
        ],
    )
    def test_invalid_arguments_name_the_field(self, name, arguments, field):
        with pytest.raises(ToolArgumentError) as exc_info:
            get_tool(name).parse(arguments)

        assert exc_info.value.fields == [field]
        assert field in str(exc_info.value)

    def test_rejected_value_not_echoed(self):
        with pytest.raises(ToolArgumentError) as exc_info:
            get_tool("get-court").parse({"court_id": "SECRET-VALUE"})

        assert "SECRET-VALUE" not in str(exc_info.value)

    def test_recap_query_needs_a_case_reference(self):
        with pytest.raises(ToolArgumentError):
            get_tool("recap-query").parse({"court": "nysd", "document_number": 1})

        args = get_tool("recap-query").parse(
            {"court": "nysd", "docket_number": "1:20-cv-01234", "document_number": 1}
        )
        assert args.docket_number == "1:20-cv-01234"

    def test_defaults(self):
        assert get_tool("search-dockets").parse({}).limit == 10
        assert get_tool("list-courts").parse(None).limit == 20


class TestRequestBuilders:
    def test_search_dockets_maps_date_filters(self):
        spec = get_tool("search-dockets")
        path, params = spec.build_request(
            spec.parse({"q": "privacy", "court": "ca9", "date_filed_after": "2020-01-01", "limit": 5})
        )

        assert path == "/dockets/"
        assert params["q"] == "privacy"
        assert params["court"] == "ca9"
        assert params["date_filed__gte"] == "2020-01-01"
        assert params["page_size"] == 5

    def test_search_opinions_maps_author_and_court(self):
        spec = get_tool("search-opinions")
        _, params = spec.build_request(spec.parse({"author": "Scalia", "court": "scotus"}))

        assert params["author_str"] == "Scalia"
        assert params["cluster__docket__court"] == "scotus"

    def test_detail_path(self):
        spec = get_tool("get-docket-entry")
        assert spec.build_request(spec.parse({"entry_id": 42})) == ("/docket-entries/42/", {})

    def test_recap_query_prefers_pacer_case_id(self):
        spec = get_tool("recap-query")
        path, params = spec.build_request(
            spec.parse(
                {
                    "court": "nysd",
                    "pacer_case_id": "12345",
                    "docket_number": "1:20-cv-1",
                    "document_number": 3,
                    "attachment_number": 2,
                }
            )
        )

        assert path == "/recap-query/"
        assert params == {
            "court": "nysd",
            "document_number": 3,
            "pacer_case_id": "12345",
            "attachment_number": 2,
        }


@pytest.mark.asyncio
async def test_search_dockets_renders_list(client: CourtListenerClient, respx_mock: MockRouter):
    route = respx_mock.get(f"{BASE_URL}/dockets/").mock(
        return_value=httpx.Response(
            200,
            json={
                "count": 42,
                "next": None,
                "previous": None,
                "results": [
                    {
                        "case_name": "Roe v. Wade",
                        "docket_number": "70-18",
                        "court_id": "scotus",
                        "absolute_url": "/docket/1/roe-v-wade/",
                    },
                    {"case_name": "Doe v. Bolton"},
                ],
            },
        )
    )

    text = await run_tool(
        "search-dockets", {"q": "abortion", "limit": 2}, client, site_url=SITE_URL
    )

    assert text.startswith("Found 42 dockets (showing 2):\n\n")
    assert "**Roe v. Wade**" in text
    assert "Court: SCOTUS" in text
    assert f"URL: {SITE_URL}/docket/1/roe-v-wade/" in text
    assert "**Doe v. Bolton**" in text
    params = route.calls.last.request.url.params
    assert params["q"] == "abortion"
    assert params["page_size"] == "2"


@pytest.mark.asyncio
async def test_scoped_list_message(client: CourtListenerClient, respx_mock: MockRouter):
    respx_mock.get(f"{BASE_URL}/parties/").mock(
        return_value=httpx.Response(200, json={"count": 1, "results": [{"name": "Acme Corp"}]})
    )

    text = await run_tool("search-parties", {"docket_id": 7}, client)

    assert text.startswith("Found 1 parties for docket 7 (showing 1):")


@pytest.mark.asyncio
async def test_empty_results(client: CourtListenerClient, respx_mock: MockRouter):
    respx_mock.get(f"{BASE_URL}/dockets/").mock(
        return_value=httpx.Response(200, json={"count": 0, "results": []})
    )
    respx_mock.get(f"{BASE_URL}/attorneys/").mock(
        return_value=httpx.Response(200, json={"count": 0, "results": []})
    )
    respx_mock.get(f"{BASE_URL}/courts/").mock(
        return_value=httpx.Response(200, json={"count": 0, "results": []})
    )

    assert (
        await run_tool("search-dockets", {"q": "nothing"}, client)
        == "No dockets found matching the search criteria"
    )
    assert await run_tool("search-attorneys", {"docket_id": 3}, client) == "No attorneys found for docket 3"
    assert await run_tool("list-courts", {}, client) == "No courts found matching the criteria"


@pytest.mark.asyncio
async def test_detail_renders_title(client: CourtListenerClient, respx_mock: MockRouter):
    respx_mock.get(f"{BASE_URL}/courts/scotus/").mock(
        return_value=httpx.Response(
            200,
            json={"id": "scotus", "full_name": "Supreme Court of the United States", "has_opinion_scraper": True},
        )
    )

    text = await run_tool("get-court", {"court_id": "scotus"}, client)

    assert text.startswith("Court Details:\n\n**Supreme Court of the United States**")
    assert "Has Opinion Scraper: Yes" in text


@pytest.mark.asyncio
async def test_opinion_preview_length_applied(client: CourtListenerClient, respx_mock: MockRouter):
    respx_mock.get(f"{BASE_URL}/opinions/9/").mock(
        return_value=httpx.Response(200, json={"id": 9, "plain_text": "x" * 100})
    )

    text = await run_tool("get-opinion", {"opinion_id": 9}, client, preview_length=10)

    assert f"Preview: {'x' * 10}..." in text


@pytest.mark.asyncio
async def test_failure_messages(client: CourtListenerClient, respx_mock: MockRouter):
    respx_mock.get(f"{BASE_URL}/dockets/5/").mock(return_value=httpx.Response(404))
    respx_mock.get(f"{BASE_URL}/clusters/").mock(return_value=httpx.Response(500))
    respx_mock.get(f"{BASE_URL}/recap-query/").mock(side_effect=httpx.ConnectError)

    assert (
        await run_tool("get-docket", {"docket_id": 5}, client)
        == "Failed to retrieve docket 5 from CourtListener API"
    )
    assert (
        await run_tool("search-clusters", {"q": "x"}, client)
        == "Failed to retrieve opinion clusters from CourtListener API"
    )
    assert (
        await run_tool(
            "recap-query", {"court": "nysd", "pacer_case_id": "1", "document_number": 1}, client
        )
        == "Failed to retrieve document via recap-query"
    )


@pytest.mark.asyncio
async def test_auth_token_forwarded(client: CourtListenerClient, respx_mock: MockRouter):
    route = respx_mock.get(f"{BASE_URL}/parties/11/").mock(
        return_value=httpx.Response(200, json={"name": "Acme"})
    )

    await run_tool("get-party", {"party_id": 11, "auth_token": VALID_TOKEN}, client)

    assert route.calls.last.request.headers["Authorization"] == f"Token {VALID_TOKEN}"


@pytest.mark.asyncio
async def test_malformed_token_gives_failure_message(client: CourtListenerClient, respx_mock: MockRouter):
    text = await run_tool("get-party", {"party_id": 11, "auth_token": "bad"}, client)

    assert text == "Failed to retrieve party 11 from CourtListener API"
    assert len(respx_mock.calls) == 0


@pytest.mark.asyncio
async def test_invalid_arguments_never_reach_upstream(client: CourtListenerClient, respx_mock: MockRouter):
    with pytest.raises(ToolArgumentError):
        await run_tool("search-dockets", {"limit": 1000}, client)

    assert len(respx_mock.calls) == 0
