"""End-to-end integration tests for FactorialHR SDK."""

import re

import httpx
import pytest
import pytest_asyncio

from factorial_hr_sdk import FactorialClient, ServerError
from factorial_hr_sdk.tools import format_list_result, text_response, wrap_high_risk_tool_handler, wrap_tool_handler
from tests.helpers.mock_api import error_response, json_response

EMPLOYEES = "/employees/employees"
TEAMS = "/teams/teams"


@pytest_asyncio.fixture
async def client(config, mock_api, no_sleep):
    client = FactorialClient(config, transport=mock_api.transport)
    yield client
    await client.aclose()


@pytest.mark.integration
class TestEndToEnd:
    """End-to-end integration tests."""

    @pytest.mark.asyncio
    async def test_reads_are_cached_and_writes_are_not(self, client, mock_api):
        """Two reads hit the API once; a create always hits the API."""
        mock_api.add("GET", EMPLOYEES, json_response({"data": [{"id": 1, "full_name": "Ada Lovelace"}]}))
        mock_api.add("POST", EMPLOYEES, json_response({"data": {"id": 2, "full_name": "Alan Turing"}}, status_code=201))

        await client.list_employees()
        await client.list_employees()
        assert mock_api.calls("GET", EMPLOYEES) == 1

        await client.create_employee({"first_name": "Alan"}, idempotency_key="alan-1")
        await client.create_employee({"first_name": "Alan"}, idempotency_key="alan-1")
        assert mock_api.calls("POST", EMPLOYEES) == 2

        await client.list_employees()
        assert mock_api.calls("GET", EMPLOYEES) == 2

    @pytest.mark.asyncio
    async def test_transient_failures_on_reads_recover(self, client, mock_api, no_sleep):
        mock_api.add(
            "GET", TEAMS,
            error_response(502),
            httpx.ConnectError("reset"),
            json_response({"data": [{"id": 1, "name": "Ops"}]}),
        )

        teams = await client.list_teams()

        assert teams.data[0].name == "Ops"
        assert mock_api.calls("GET", TEAMS) == 3
        assert no_sleep.call_count == 2

    @pytest.mark.asyncio
    async def test_unsafe_mutation_fails_fast(self, client, mock_api, no_sleep):
        mock_api.add("POST", TEAMS, error_response(503))

        with pytest.raises(ServerError):
            await client.create_team({"name": "Ops"})

        assert mock_api.calls("POST", TEAMS) == 1
        no_sleep.assert_not_called()
        assert client.audit.get_recent_logs()[-1].success is False

    @pytest.mark.asyncio
    async def test_confirmed_delete_flow(self, client, mock_api):
        """A high-risk delete runs only after its token is presented."""
        mock_api.add("GET", TEAMS, json_response({"data": [{"id": 5, "name": "Platform"}]}))
        mock_api.add("DELETE", f"{TEAMS}/5", httpx.Response(204))

        async def delete_team(args):
            await client.delete_team(args["team_id"])
            return text_response(f"Team {args['team_id']} deleted")

        handler = wrap_high_risk_tool_handler(
            "delete_team",
            delete_team,
            client.confirmations,
            lambda args: {"operation": "delete", "entity_type": "team", "entity_id": args["team_id"]},
        )

        await client.list_teams()
        preview = await handler({"team_id": 5})
        assert mock_api.calls("DELETE", f"{TEAMS}/5") == 0

        token = re.search(r'confirmation_token: "(\w+)"', preview["content"][0]["text"]).group(1)
        result = await handler({"confirmation_token": token})

        assert "Preview:" in preview["content"][0]["text"]
        assert result == text_response("Team 5 deleted")
        assert mock_api.calls("DELETE", f"{TEAMS}/5") == 1

        await client.list_teams()
        assert mock_api.calls("GET", TEAMS) == 2

    @pytest.mark.asyncio
    async def test_paged_list_tool(self, client, mock_api):
        """Paging through a list tool fetches the list once."""
        mock_api.add("GET", TEAMS, json_response({"data": [{"id": i, "name": f"Team {i}"} for i in range(1, 4)]}))

        async def list_teams(args):
            result = await client.list_teams(page=args.get("page"), limit=args.get("limit"))
            return text_response(format_list_result(result, "team"))

        handler = wrap_tool_handler(list_teams)
        first = await handler({"page": 1, "limit": 2})
        second = await handler({"page": 2, "limit": 2})

        assert first["content"][0]["text"].startswith("Found 2 teams (Page 1 of 2 (3 total items) - More pages available)")
        assert second["content"][0]["text"].startswith("Found 1 team (Page 2 of 2 (3 total items))")
        assert mock_api.calls("GET", TEAMS) == 1
