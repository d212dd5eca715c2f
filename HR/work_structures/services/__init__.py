"""
Work Structures Services

- DepartmentService: Department lifecycle
- PositionService: Position lifecycle and salary bands
"""
