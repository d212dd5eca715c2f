"""
Data Transfer Objects for Person Domain

DTOs for service layer operations on employees and the skill ledger.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class EmployeeCreateDTO:
    """DTO for creating a new employee"""
    employee_number: str
    first_name: str
    last_name: str
    hire_date: date
    email: Optional[str] = ''
    user_id: Optional[int] = None
    manager_id: Optional[int] = None
    department_id: Optional[int] = None
    current_position_id: Optional[int] = None
    salary: Optional[Decimal] = None


@dataclass
class EmployeeUpdateDTO:
    """DTO for updating an existing employee"""
    employee_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    manager_id: Optional[int] = None
    department_id: Optional[int] = None
    current_position_id: Optional[int] = None
    salary: Optional[Decimal] = None


@dataclass
class SkillCreateDTO:
    """DTO for creating a new skill"""
    name: str
    category: str
    description: Optional[str] = ''


@dataclass
class SkillUpdateDTO:
    """DTO for updating a skill; name/category are frozen once referenced"""
    skill_id: int
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None


@dataclass
class EmployeeSkillDTO:
    """DTO for adding or updating an employee's proficiency in a skill"""
    employee_id: int
    skill_id: int
    proficiency_level: int
    acquired_date: Optional[date] = None
    last_assessed_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass
class PositionSkillDTO:
    """DTO for adding or updating a position's skill requirement"""
    position_id: int
    skill_id: int
    required_level: int
    is_mandatory: bool = True
    weight: int = 1
