from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class DepartmentCreateDTO:
    """DTO for creating a new department"""
    code: str
    name: str
    description: Optional[str] = ''


@dataclass
class DepartmentUpdateDTO:
    """DTO for updating an existing department"""
    department_id: int
    name: Optional[str] = None
    description: Optional[str] = None


@dataclass
class PositionCreateDTO:
    """DTO for creating a new position"""
    code: str
    title: str
    department_id: int
    level: str
    description: Optional[str] = ''
    min_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None
    is_key_position: bool = False


@dataclass
class PositionUpdateDTO:
    """DTO for updating an existing position"""
    position_id: int
    title: Optional[str] = None
    department_id: Optional[int] = None
    level: Optional[str] = None
    description: Optional[str] = None
    min_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None
    is_key_position: Optional[bool] = None
