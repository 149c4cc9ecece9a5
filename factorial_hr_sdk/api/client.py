"""Main client interface for the FactorialHR SDK."""

from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import httpx

from ..cache.manager import CacheManager, get_ttl
from ..config.settings import FactorialConfig, get_config, load_env
from ..http.client import FactorialHTTPClient
from ..http.endpoints import ENDPOINTS, endpoint_with_action, endpoint_with_id
from ..models.pagination import PaginatedResponse, build_pagination_params, slice_for_pagination
from ..models.resources import Contract, Employee, Leave, Location, Shift, Team, parse_data, parse_list
from ..observability.logging import configure_logging
from ..safety.audit import AuditAction, AuditLogger
from ..safety.confirmation import ConfirmationManager

T = TypeVar('T')

DEFAULT_CONTRACTS_LIMIT = 20


def _check_id(value: int, entity: str) -> None:
    if not value or value <= 0:
        raise ValueError(f"Invalid {entity} ID. Please provide a positive number.")


def _as_changes(data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {field: {"to": value} for field, value in data.items()}


def _page(items: List[T], page: Optional[int], limit: Optional[int]) -> PaginatedResponse[T]:
    return slice_for_pagination(items, build_pagination_params(page, limit))


class FactorialClient:
    """
    High-level client for the FactorialHR API.

    Owns the HTTP pipeline, the read cache, the confirmation manager and the
    audit log. Reads are cached per resource type; writes bypass the cache,
    are recorded in the audit log and invalidate the cached resource on
    success.
    """

    def __init__(
        self,
        config: FactorialConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http: Optional[FactorialHTTPClient] = None,
        cache: Optional[CacheManager] = None,
        confirmations: Optional[ConfirmationManager] = None,
        audit: Optional[AuditLogger] = None
    ):
        """
        Initialize the client.

        Args:
            config: Configuration snapshot
            transport: Optional httpx transport, ignored when ``http`` is given
            http: Optional pre-built HTTP client
            cache: Optional cache manager
            confirmations: Optional confirmation manager
            audit: Optional audit logger
        """
        self.config = config
        self.http = http or FactorialHTTPClient(config, transport=transport)
        self.cache = cache or CacheManager()
        self.confirmations = confirmations or ConfirmationManager()
        self.audit = audit or AuditLogger()

    @classmethod
    def from_env(cls, **kwargs) -> "FactorialClient":
        """Build a client from the environment (and any .env file)."""
        load_env()
        config = get_config()
        configure_logging(config.debug)
        return cls(config, **kwargs)

    async def __aenter__(self) -> "FactorialClient":
        self.cache.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop the cache sweep and close the HTTP connection pool."""
        self.cache.destroy()
        await self.http.aclose()

    async def _write(
        self,
        resource: str,
        action: AuditAction,
        entity_id: Optional[int],
        operation: Callable[[], Awaitable[T]],
        changes: Optional[Dict[str, Dict[str, Any]]] = None,
        idempotency_key: Optional[str] = None
    ) -> T:
        result = await self.audit.audited_operation(
            action,
            resource,
            entity_id,
            operation,
            changes=changes,
            idempotency_key=idempotency_key,
        )
        self.cache.invalidate_prefix(resource)
        return result

    async def _list_all(
        self,
        resource: str,
        schema_name: str,
        model: Any,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Any]:
        """Fetch and cache the full list of a resource for the given filters."""
        async def fetch() -> List[Any]:
            data = await self.http.fetch_list(ENDPOINTS[resource], params=params)
            return parse_list(schema_name, model, data)

        return await self.cache.cached(CacheManager.key(resource, params), fetch, get_ttl(resource))

    async def _get_one(self, resource: str, schema_name: str, model: Any, resource_id: int) -> Any:
        async def fetch() -> Any:
            data = await self.http.fetch_one(endpoint_with_id(ENDPOINTS[resource], resource_id))
            return parse_data(schema_name, model, data)

        return await self.cache.cached(
            CacheManager.key(resource, {"id": resource_id}), fetch, get_ttl(resource)
        )

    async def _create(
        self,
        resource: str,
        schema_name: str,
        model: Any,
        data: Dict[str, Any],
        idempotency_key: Optional[str]
    ) -> Any:
        async def operation() -> Any:
            created = await self.http.post_one(ENDPOINTS[resource], data, idempotency_key=idempotency_key)
            return parse_data(schema_name, model, created)

        return await self._write(
            resource, AuditAction.CREATE, None, operation, _as_changes(data), idempotency_key
        )

    async def _update(
        self,
        resource: str,
        schema_name: str,
        model: Any,
        resource_id: int,
        data: Dict[str, Any],
        idempotency_key: Optional[str],
        method: str = "PUT"
    ) -> Any:
        send = self.http.patch_one if method == "PATCH" else self.http.put_one

        async def operation() -> Any:
            updated = await send(
                endpoint_with_id(ENDPOINTS[resource], resource_id), data, idempotency_key=idempotency_key
            )
            return parse_data(schema_name, model, updated)

        return await self._write(
            resource, AuditAction.UPDATE, resource_id, operation, _as_changes(data), idempotency_key
        )

    async def _delete(
        self,
        resource: str,
        resource_id: int,
        idempotency_key: Optional[str],
        action: AuditAction = AuditAction.DELETE
    ) -> None:
        async def operation() -> None:
            await self.http.delete_one(
                endpoint_with_id(ENDPOINTS[resource], resource_id), idempotency_key=idempotency_key
            )

        await self._write(resource, action, resource_id, operation, idempotency_key=idempotency_key)

    # Employees

    async def list_employees(
        self,
        team_id: Optional[int] = None,
        location_id: Optional[int] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> PaginatedResponse[Employee]:
        """
        List employees, optionally filtered by team or location.

        The filtered list is cached as a whole and paged client-side, so
        moving between pages does not hit the API again.
        """
        employees = await self._list_all(
            "employees", "Employee", Employee, {"team_id": team_id, "location_id": location_id}
        )
        return _page(employees, page, limit)

    async def get_employee(self, employee_id: int) -> Employee:
        _check_id(employee_id, "employee")
        return await self._get_one("employees", "Employee", Employee, employee_id)

    async def search_employees(self, query: str) -> List[Employee]:
        """Case-insensitive match on name and email over the cached employee list."""
        if not query or len(query.strip()) < 2:
            raise ValueError("Search query must be at least 2 characters long.")

        needle = query.strip().lower()
        employees = await self._list_all("employees", "Employee", Employee, {})
        return [
            emp for emp in employees
            if any(
                needle in (value or "").lower()
                for value in (emp.full_name, emp.email, emp.first_name, emp.last_name)
            )
        ]

    async def create_employee(self, data: Dict[str, Any], idempotency_key: Optional[str] = None) -> Employee:
        return await self._create("employees", "Employee", Employee, data, idempotency_key)

    async def update_employee(
        self,
        employee_id: int,
        data: Dict[str, Any],
        idempotency_key: Optional[str] = None
    ) -> Employee:
        _check_id(employee_id, "employee")
        return await self._update("employees", "Employee", Employee, employee_id, data, idempotency_key)

    async def terminate_employee(
        self,
        employee_id: int,
        terminated_on: str,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None
    ) -> Optional[Employee]:
        _check_id(employee_id, "employee")
        body = {"terminated_on": terminated_on, "termination_reason": reason}
        body = {k: v for k, v in body.items() if v is not None}

        async def operation() -> Optional[Employee]:
            result = await self.http.post_action(
                endpoint_with_action(ENDPOINTS["employees"], employee_id, "terminate"),
                body,
                idempotency_key=idempotency_key,
            )
            return parse_data("Employee", Employee, result) if result is not None else None

        return await self._write(
            "employees", AuditAction.TERMINATE, employee_id, operation, _as_changes(body), idempotency_key
        )

    async def get_employee_contracts(
        self,
        employee_id: int,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> PaginatedResponse[Contract]:
        """
        List contract versions for one employee.

        The upstream filter on employee_id is unreliable, so all contract
        versions are fetched (and cached) and filtered here.
        """
        _check_id(employee_id, "employee")
        contracts = await self._list_all("contracts", "Contract", Contract)
        mine = [c for c in contracts if c.employee_id == employee_id]
        return _page(mine, page, limit if limit is not None else DEFAULT_CONTRACTS_LIMIT)

    # Teams

    async def list_teams(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> PaginatedResponse[Team]:
        return _page(await self._list_all("teams", "Team", Team), page, limit)

    async def get_team(self, team_id: int) -> Team:
        _check_id(team_id, "team")
        return await self._get_one("teams", "Team", Team, team_id)

    async def create_team(self, data: Dict[str, Any], idempotency_key: Optional[str] = None) -> Team:
        return await self._create("teams", "Team", Team, data, idempotency_key)

    async def update_team(self, team_id: int, data: Dict[str, Any], idempotency_key: Optional[str] = None) -> Team:
        _check_id(team_id, "team")
        return await self._update("teams", "Team", Team, team_id, data, idempotency_key)

    async def delete_team(self, team_id: int, idempotency_key: Optional[str] = None) -> None:
        _check_id(team_id, "team")
        await self._delete("teams", team_id, idempotency_key)

    # Locations

    async def list_locations(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> PaginatedResponse[Location]:
        return _page(await self._list_all("locations", "Location", Location), page, limit)

    async def get_location(self, location_id: int) -> Location:
        _check_id(location_id, "location")
        return await self._get_one("locations", "Location", Location, location_id)

    async def create_location(self, data: Dict[str, Any], idempotency_key: Optional[str] = None) -> Location:
        return await self._create("locations", "Location", Location, data, idempotency_key)

    async def update_location(
        self,
        location_id: int,
        data: Dict[str, Any],
        idempotency_key: Optional[str] = None
    ) -> Location:
        _check_id(location_id, "location")
        return await self._update("locations", "Location", Location, location_id, data, idempotency_key)

    async def delete_location(self, location_id: int, idempotency_key: Optional[str] = None) -> None:
        _check_id(location_id, "location")
        await self._delete("locations", location_id, idempotency_key)

    # Leaves

    async def list_leaves(
        self,
        employee_id: Optional[int] = None,
        start_on: Optional[str] = None,
        finish_on: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> PaginatedResponse[Leave]:
        params = {"employee_id": employee_id, "start_on": start_on, "finish_on": finish_on}
        return _page(await self._list_all("leaves", "Leave", Leave, params), page, limit)

    async def get_leave(self, leave_id: int) -> Leave:
        _check_id(leave_id, "leave")
        return await self._get_one("leaves", "Leave", Leave, leave_id)

    async def create_leave(self, data: Dict[str, Any], idempotency_key: Optional[str] = None) -> Leave:
        return await self._create("leaves", "Leave", Leave, data, idempotency_key)

    async def update_leave(
        self,
        leave_id: int,
        data: Dict[str, Any],
        idempotency_key: Optional[str] = None
    ) -> Leave:
        _check_id(leave_id, "leave")
        return await self._update("leaves", "Leave", Leave, leave_id, data, idempotency_key)

    async def _leave_action(
        self,
        leave_id: int,
        action: str,
        audit_action: AuditAction,
        body: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None
    ) -> Optional[Leave]:
        _check_id(leave_id, "leave")

        async def operation() -> Optional[Leave]:
            result = await self.http.post_action(
                endpoint_with_action(ENDPOINTS["leaves"], leave_id, action),
                body,
                idempotency_key=idempotency_key,
            )
            return parse_data("Leave", Leave, result) if result is not None else None

        return await self._write(
            "leaves",
            audit_action,
            leave_id,
            operation,
            _as_changes(body) if body else None,
            idempotency_key,
        )

    async def approve_leave(self, leave_id: int, idempotency_key: Optional[str] = None) -> Optional[Leave]:
        return await self._leave_action(leave_id, "approve", AuditAction.APPROVE, idempotency_key=idempotency_key)

    async def reject_leave(
        self,
        leave_id: int,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None
    ) -> Optional[Leave]:
        body = {"reason": reason} if reason else None
        return await self._leave_action(leave_id, "reject", AuditAction.REJECT, body, idempotency_key)

    async def cancel_leave(self, leave_id: int, idempotency_key: Optional[str] = None) -> None:
        """Cancel a leave request by deleting it."""
        _check_id(leave_id, "leave")
        await self._delete("leaves", leave_id, idempotency_key, AuditAction.CANCEL)

    # Shifts

    async def list_shifts(
        self,
        employee_id: Optional[int] = None,
        clock_in_gte: Optional[str] = None,
        clock_in_lte: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> PaginatedResponse[Shift]:
        params = {"employee_id": employee_id, "clock_in_gte": clock_in_gte, "clock_in_lte": clock_in_lte}
        return _page(await self._list_all("shifts", "Shift", Shift, params), page, limit)

    async def get_shift(self, shift_id: int) -> Shift:
        _check_id(shift_id, "shift")
        return await self._get_one("shifts", "Shift", Shift, shift_id)

    async def create_shift(self, data: Dict[str, Any], idempotency_key: Optional[str] = None) -> Shift:
        return await self._create("shifts", "Shift", Shift, data, idempotency_key)

    async def update_shift(
        self,
        shift_id: int,
        data: Dict[str, Any],
        idempotency_key: Optional[str] = None
    ) -> Shift:
        """Partially update a shift, e.g. to set ``clock_out``."""
        _check_id(shift_id, "shift")
        return await self._update("shifts", "Shift", Shift, shift_id, data, idempotency_key, method="PATCH")

    async def delete_shift(self, shift_id: int, idempotency_key: Optional[str] = None) -> None:
        _check_id(shift_id, "shift")
        await self._delete("shifts", shift_id, idempotency_key)
