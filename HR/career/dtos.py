from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class SuccessionPlanCreateDTO:
    """DTO for opening a succession plan; discovery runs right after when requested"""
    position_id: int
    notes: Optional[str] = ''
    review_date: Optional[date] = None
    auto_discover: bool = False


@dataclass
class SuccessionPlanUpdateDTO:
    plan_id: int
    status: Optional[str] = None
    notes: Optional[str] = None
    review_date: Optional[date] = None


@dataclass
class SuccessionCandidateCreateDTO:
    plan_id: int
    employee_id: int
    priority: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = ''


@dataclass
class SuccessionCandidateUpdateDTO:
    candidate_id: int
    priority: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class CareerPathSkillDTO:
    """DTO for one skill bar of a career path; career_path_id is unset while nested in a create"""
    skill_id: int
    min_proficiency_level: int
    is_mandatory: bool = True
    weight: int = 1
    career_path_id: Optional[int] = None


@dataclass
class CareerPathCreateDTO:
    from_position_id: int
    to_position_id: int
    min_years_in_current_role: int = 1
    description: Optional[str] = ''
    required_skills: List[CareerPathSkillDTO] = field(default_factory=list)


@dataclass
class CareerPathUpdateDTO:
    career_path_id: int
    min_years_in_current_role: Optional[int] = None
    description: Optional[str] = None
