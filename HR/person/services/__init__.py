"""
Person Domain Services

Business logic for employees and the skill ledger.

Services:
- EmployeeService: Employee records and reporting lines
- SkillService: Skill catalog lifecycle (soft delete, identity freeze)
- EmployeeSkillService: Proficiency records (upsert per employee/skill)
- PositionSkillService: Requirement records (upsert per position/skill)
"""
