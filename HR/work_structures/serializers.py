"""
Serializers for Department and Position models
"""
from rest_framework import serializers
from HR.work_structures.models import Department, Position, PositionLevel
from HR.work_structures.dtos import (
    DepartmentCreateDTO,
    DepartmentUpdateDTO,
    PositionCreateDTO,
    PositionUpdateDTO,
)


class DepartmentSerializer(serializers.ModelSerializer):
    """Read serializer for Department model"""

    class Meta:
        model = Department
        fields = ['id', 'code', 'name', 'description', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class DepartmentCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> DepartmentCreateDTO:
        return DepartmentCreateDTO(**self.validated_data)


class DepartmentUpdateSerializer(serializers.Serializer):
    department_id = serializers.IntegerField()
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> DepartmentUpdateDTO:
        return DepartmentUpdateDTO(**self.validated_data)


class PositionReadSerializer(serializers.ModelSerializer):
    """Read serializer for Position model"""
    department_name = serializers.CharField(source='department.name', read_only=True)
    level_display = serializers.CharField(source='get_level_display', read_only=True)

    class Meta:
        model = Position
        fields = [
            'id', 'code', 'title', 'description',
            'department', 'department_name',
            'level', 'level_display',
            'min_salary', 'max_salary', 'is_key_position',
            'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PositionCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    title = serializers.CharField(max_length=255)
    department_id = serializers.IntegerField()
    level = serializers.ChoiceField(choices=PositionLevel.choices)
    description = serializers.CharField(required=False, allow_blank=True)
    min_salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    max_salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    is_key_position = serializers.BooleanField(required=False, default=False)

    def to_dto(self) -> PositionCreateDTO:
        return PositionCreateDTO(**self.validated_data)


class PositionUpdateSerializer(serializers.Serializer):
    position_id = serializers.IntegerField()
    title = serializers.CharField(max_length=255, required=False)
    department_id = serializers.IntegerField(required=False)
    level = serializers.ChoiceField(choices=PositionLevel.choices, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    min_salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    max_salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    is_key_position = serializers.BooleanField(required=False)

    def to_dto(self) -> PositionUpdateDTO:
        return PositionUpdateDTO(**self.validated_data)
