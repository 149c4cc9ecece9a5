from .pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
    build_pagination_params,
    calculate_offset,
    calculate_total_pages,
    create_pagination_meta,
    fetch_all_pages,
    format_pagination_info,
    paginate_response,
    slice_for_pagination,
)
from .resources import (
    Contract,
    Employee,
    FactorialResource,
    Leave,
    Location,
    Shift,
    Team,
    parse_data,
    parse_list,
)

__all__ = [
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "build_pagination_params",
    "calculate_offset",
    "calculate_total_pages",
    "create_pagination_meta",
    "fetch_all_pages",
    "format_pagination_info",
    "paginate_response",
    "slice_for_pagination",
    "Contract",
    "Employee",
    "FactorialResource",
    "Leave",
    "Location",
    "Shift",
    "Team",
    "parse_data",
    "parse_list",
]
