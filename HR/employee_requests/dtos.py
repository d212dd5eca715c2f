"""
Data Transfer Objects for the request workflow
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class RequestSubmitDTO:
    """
    DTO for submitting a position or department change request.

    ``target_employee_id`` defaults to the requester's own employee record.
    ``career_path_id`` optionally names the career path a position change follows.
    """
    request_type: str
    justification: str
    target_employee_id: Optional[int] = None
    new_position_id: Optional[int] = None
    new_department_id: Optional[int] = None
    new_manager_id: Optional[int] = None
    career_path_id: Optional[int] = None
    proposed_salary: Optional[Decimal] = None
    notes: Optional[str] = ''
