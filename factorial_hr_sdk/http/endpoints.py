"""
API endpoint paths for FactorialHR.

All paths are relative to the versioned ``/resources`` base URL.
"""

ENDPOINTS = {
    "employees": "/employees/employees",
    "teams": "/teams/teams",
    "locations": "/locations/locations",
    "contracts": "/contracts/contract-versions",
    "leaves": "/timeoff/leaves",
    "shifts": "/attendance/shifts",
}


def endpoint_with_id(endpoint: str, resource_id: int) -> str:
    """Build an item path, e.g. ``/teams/teams/5``."""
    return f"{endpoint}/{resource_id}"


def endpoint_with_action(endpoint: str, resource_id: int, action: str) -> str:
    """Build an action path, e.g. ``/timeoff/leaves/5/approve``."""
    return f"{endpoint}/{resource_id}/{action}"
