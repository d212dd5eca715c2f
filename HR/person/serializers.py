"""
Serializers for employees and the skill ledger
"""
from rest_framework import serializers
from HR.person.models import (
    Employee,
    Skill,
    SkillCategory,
    EmployeeSkill,
    PositionSkill,
    MIN_PROFICIENCY_LEVEL,
    MAX_PROFICIENCY_LEVEL,
)
from HR.person.dtos import (
    EmployeeCreateDTO,
    EmployeeUpdateDTO,
    SkillCreateDTO,
    SkillUpdateDTO,
    EmployeeSkillDTO,
    PositionSkillDTO,
)


# ============================================================================
# Employee
# ============================================================================

class EmployeeSerializer(serializers.ModelSerializer):
    """Read serializer for Employee model"""
    full_name = serializers.CharField(read_only=True)
    manager_name = serializers.CharField(source='manager.full_name', read_only=True, default=None)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    position_title = serializers.CharField(source='current_position.title', read_only=True, default=None)

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_number', 'first_name', 'last_name', 'full_name', 'email',
            'user', 'manager', 'manager_name',
            'department', 'department_name',
            'current_position', 'position_title',
            'salary', 'hire_date', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class EmployeeCreateSerializer(serializers.Serializer):
    employee_number = serializers.CharField(max_length=30)
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    hire_date = serializers.DateField()
    email = serializers.EmailField(required=False, allow_blank=True)
    user_id = serializers.IntegerField(required=False, allow_null=True)
    manager_id = serializers.IntegerField(required=False, allow_null=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)
    current_position_id = serializers.IntegerField(required=False, allow_null=True)
    salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0)

    def to_dto(self) -> EmployeeCreateDTO:
        return EmployeeCreateDTO(**self.validated_data)


class EmployeeUpdateSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    first_name = serializers.CharField(max_length=100, required=False)
    last_name = serializers.CharField(max_length=100, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    manager_id = serializers.IntegerField(required=False)
    department_id = serializers.IntegerField(required=False)
    current_position_id = serializers.IntegerField(required=False)
    salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)

    def to_dto(self) -> EmployeeUpdateDTO:
        return EmployeeUpdateDTO(**self.validated_data)


# ============================================================================
# Skill
# ============================================================================

class SkillSerializer(serializers.ModelSerializer):
    """Read serializer for Skill model"""
    category_display = serializers.CharField(source='get_category_display', read_only=True)

    class Meta:
        model = Skill
        fields = ['id', 'name', 'category', 'category_display', 'description', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class SkillCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    category = serializers.ChoiceField(choices=SkillCategory.choices)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> SkillCreateDTO:
        return SkillCreateDTO(**self.validated_data)


class SkillUpdateSerializer(serializers.Serializer):
    skill_id = serializers.IntegerField()
    name = serializers.CharField(max_length=100, required=False)
    category = serializers.ChoiceField(choices=SkillCategory.choices, required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> SkillUpdateDTO:
        return SkillUpdateDTO(**self.validated_data)


# ============================================================================
# Proficiency & Requirement records
# ============================================================================

class EmployeeSkillSerializer(serializers.ModelSerializer):
    """Read serializer for EmployeeSkill model"""
    skill_name = serializers.CharField(source='skill.name', read_only=True)
    skill_category = serializers.CharField(source='skill.category', read_only=True)

    class Meta:
        model = EmployeeSkill
        fields = [
            'id', 'employee', 'skill', 'skill_name', 'skill_category',
            'proficiency_level', 'acquired_date', 'last_assessed_date', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class EmployeeSkillWriteSerializer(serializers.Serializer):
    """Write serializer; employee_id comes from the URL"""
    employee_id = serializers.IntegerField(min_value=1)
    skill_id = serializers.IntegerField(min_value=1)
    proficiency_level = serializers.IntegerField(min_value=MIN_PROFICIENCY_LEVEL, max_value=MAX_PROFICIENCY_LEVEL)
    acquired_date = serializers.DateField(required=False, allow_null=True)
    last_assessed_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_dto(self) -> EmployeeSkillDTO:
        return EmployeeSkillDTO(**self.validated_data)


class PositionSkillSerializer(serializers.ModelSerializer):
    """Read serializer for PositionSkill model"""
    skill_name = serializers.CharField(source='skill.name', read_only=True)

    class Meta:
        model = PositionSkill
        fields = ['id', 'position', 'skill', 'skill_name', 'required_level', 'is_mandatory', 'weight']
        read_only_fields = fields


class PositionSkillWriteSerializer(serializers.Serializer):
    """Write serializer; position_id comes from the URL"""
    position_id = serializers.IntegerField(min_value=1)
    skill_id = serializers.IntegerField(min_value=1)
    required_level = serializers.IntegerField(min_value=MIN_PROFICIENCY_LEVEL, max_value=MAX_PROFICIENCY_LEVEL)
    is_mandatory = serializers.BooleanField(required=False, default=True)
    weight = serializers.IntegerField(required=False, default=1, min_value=1)

    def to_dto(self) -> PositionSkillDTO:
        return PositionSkillDTO(**self.validated_data)
