"""
Write operation risk classification.

Static policy table consulted before any mutating call to decide whether
the operation must go through the confirmation flow first.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class OperationRisk(str, Enum):
    """Risk levels for write operations."""
    LOW = "low"            # Minor updates, safe without confirmation
    MEDIUM = "medium"      # Creates or significant updates, preview recommended
    HIGH = "high"          # Deletes, terminations
    CRITICAL = "critical"  # Irreversible bulk operations


@dataclass(frozen=True)
class OperationPolicy:
    risk: OperationRisk
    requires_confirmation: bool
    requires_preview: bool
    max_batch_size: Optional[int] = None
    cooldown_ms: Optional[int] = None
    impact_description: Optional[str] = None


def _policy(risk: OperationRisk, confirm: bool, preview: bool, impact: str) -> OperationPolicy:
    return OperationPolicy(
        risk=risk,
        requires_confirmation=confirm,
        requires_preview=preview,
        impact_description=impact,
    )


LOW, MEDIUM, HIGH = OperationRisk.LOW, OperationRisk.MEDIUM, OperationRisk.HIGH

# Keys follow the verb_entity convention
OPERATION_POLICIES: Dict[str, OperationPolicy] = {
    # Employees
    "create_employee": _policy(MEDIUM, False, True, "Creates a new employee record in the system"),
    "update_employee": _policy(LOW, False, True, "Updates employee information"),
    "terminate_employee": _policy(
        HIGH, True, True, "Terminates employee, revoking access and removing from active lists"
    ),

    # Teams
    "create_team": _policy(MEDIUM, False, True, "Creates a new team"),
    "update_team": _policy(LOW, False, True, "Updates team information"),
    "delete_team": _policy(HIGH, True, True, "Deletes the team and removes all member associations"),
    "add_team_member": _policy(LOW, False, False, "Adds an employee to the team"),
    "remove_team_member": _policy(LOW, False, False, "Removes an employee from the team"),

    # Locations
    "create_location": _policy(MEDIUM, False, True, "Creates a new office location"),
    "update_location": _policy(LOW, False, True, "Updates location information"),
    "delete_location": _policy(HIGH, True, True, "Deletes the location and removes employee associations"),

    # Leaves
    "create_leave": _policy(MEDIUM, False, True, "Creates a new leave request"),
    "update_leave": _policy(LOW, False, True, "Updates leave request details"),
    "cancel_leave": _policy(MEDIUM, True, True, "Cancels the leave request"),
    "approve_leave": _policy(MEDIUM, False, True, "Approves the leave request, deducting from allowance"),
    "reject_leave": _policy(MEDIUM, True, True, "Rejects the leave request"),

    # Shifts
    "create_shift": _policy(LOW, False, False, "Creates an attendance shift record"),
    "update_shift": _policy(LOW, False, False, "Updates shift clock in/out times"),
    "delete_shift": _policy(MEDIUM, True, True, "Deletes the shift record"),

    # Documents
    "upload_document": _policy(MEDIUM, False, True, "Uploads a new document"),
    "update_document": _policy(LOW, False, False, "Updates document metadata"),
    "delete_document": _policy(HIGH, True, True, "Permanently deletes the document"),

    # Projects
    "create_project": _policy(MEDIUM, False, True, "Creates a new project"),
    "update_project": _policy(LOW, False, True, "Updates project details"),
    "delete_project": _policy(
        HIGH, True, True, "Deletes the project and all associated tasks/time records"
    ),

    # ATS
    "create_job_posting": _policy(MEDIUM, False, True, "Creates a new job posting"),
    "delete_job_posting": _policy(HIGH, True, True, "Deletes the job posting and all applications"),
    "delete_candidate": _policy(HIGH, True, True, "Permanently deletes the candidate record"),
    "advance_application": _policy(MEDIUM, False, True, "Moves the application to the next hiring stage"),

    # Trainings
    "enroll_training": _policy(LOW, False, False, "Enrolls an employee in a training"),
    "delete_training": _policy(HIGH, True, True, "Deletes the training program and all enrollments"),
}

DEFAULT_POLICY = OperationPolicy(
    risk=OperationRisk.MEDIUM,
    requires_confirmation=False,
    requires_preview=True,
    impact_description="Modifies data in FactorialHR",
)


def validate_policies(policies: Dict[str, OperationPolicy]) -> List[str]:
    """
    Return the names of policies that break the table invariants.

    High and critical operations must require confirmation, and any
    operation requiring confirmation must also require a preview.
    """
    broken = []
    for name, policy in policies.items():
        if policy.risk in (OperationRisk.HIGH, OperationRisk.CRITICAL) and not policy.requires_confirmation:
            broken.append(name)
        elif policy.requires_confirmation and not policy.requires_preview:
            broken.append(name)
    return broken


_broken = validate_policies(OPERATION_POLICIES)
if _broken:
    raise ValueError(f"Invalid operation policies: {', '.join(_broken)}")


def get_operation_policy(operation_name: str) -> OperationPolicy:
    return OPERATION_POLICIES.get(operation_name, DEFAULT_POLICY)


def requires_confirmation(operation_name: str) -> bool:
    return get_operation_policy(operation_name).requires_confirmation


def get_warning_message(operation_name: str) -> Optional[str]:
    """Get a warning message for high and critical risk operations, None otherwise."""
    policy = get_operation_policy(operation_name)

    if policy.risk in (OperationRisk.HIGH, OperationRisk.CRITICAL):
        follow_up = (
            "Please confirm using the confirmation token."
            if policy.requires_confirmation
            else "Please review carefully before proceeding."
        )
        return (
            f"**Warning:** This is a {policy.risk.value}-risk operation. "
            f"{policy.impact_description}. {follow_up}"
        )

    return None
