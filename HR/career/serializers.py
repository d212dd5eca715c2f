"""
Serializers for scoring, ranking, succession planning and career paths
"""
from rest_framework import serializers
from HR.person.models import MAX_PROFICIENCY_LEVEL, MIN_PROFICIENCY_LEVEL
from HR.career.models import (
    MAX_CAREER_PATH_YEARS,
    CandidateStatus,
    CareerPath,
    CareerPathSkill,
    SuccessionCandidate,
    SuccessionPlan,
    SuccessionPlanStatus,
)
from HR.career.dtos import (
    CareerPathCreateDTO,
    CareerPathSkillDTO,
    CareerPathUpdateDTO,
    SuccessionPlanCreateDTO,
    SuccessionPlanUpdateDTO,
    SuccessionCandidateCreateDTO,
    SuccessionCandidateUpdateDTO,
)


# ============================================================================
# Scoring & ranking (read-only over dataclass results)
# ============================================================================

class SkillGapSerializer(serializers.Serializer):
    skill_id = serializers.IntegerField()
    skill_name = serializers.CharField()
    required_level = serializers.IntegerField()
    candidate_level = serializers.IntegerField()
    gap = serializers.IntegerField()
    mandatory = serializers.BooleanField()
    weight = serializers.IntegerField()


class MatchResultSerializer(serializers.Serializer):
    score = serializers.DecimalField(max_digits=5, decimal_places=2)
    is_fully_qualified = serializers.BooleanField()
    gaps = SkillGapSerializer(many=True)


class RankedCandidateSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    employee_name = serializers.CharField()
    score = serializers.DecimalField(max_digits=5, decimal_places=2)
    gaps = SkillGapSerializer(many=True)


class RankedPositionSerializer(serializers.Serializer):
    position_id = serializers.IntegerField()
    position_title = serializers.CharField()
    department_id = serializers.IntegerField(allow_null=True)
    score = serializers.DecimalField(max_digits=5, decimal_places=2)
    gaps = SkillGapSerializer(many=True)


# ============================================================================
# Succession planning
# ============================================================================

class SuccessionCandidateSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = SuccessionCandidate
        fields = [
            'id', 'plan', 'employee', 'employee_name', 'priority',
            'match_score', 'score_calculated_at', 'status', 'status_display', 'notes',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SuccessionPlanSerializer(serializers.ModelSerializer):
    position_title = serializers.CharField(source='position.title', read_only=True)
    is_key_position = serializers.BooleanField(source='position.is_key_position', read_only=True)
    candidates = SuccessionCandidateSerializer(many=True, read_only=True)

    class Meta:
        model = SuccessionPlan
        fields = [
            'id', 'position', 'position_title', 'is_key_position',
            'status', 'notes', 'review_date', 'candidates',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SuccessionPlanCreateSerializer(serializers.Serializer):
    position_id = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True)
    review_date = serializers.DateField(required=False, allow_null=True)
    auto_discover = serializers.BooleanField(required=False, default=False)

    def to_dto(self) -> SuccessionPlanCreateDTO:
        return SuccessionPlanCreateDTO(**self.validated_data)


class SuccessionPlanUpdateSerializer(serializers.Serializer):
    plan_id = serializers.IntegerField()
    status = serializers.ChoiceField(choices=SuccessionPlanStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    review_date = serializers.DateField(required=False, allow_null=True)

    def to_dto(self) -> SuccessionPlanUpdateDTO:
        return SuccessionPlanUpdateDTO(**self.validated_data)


class SuccessionCandidateCreateSerializer(serializers.Serializer):
    plan_id = serializers.IntegerField()
    employee_id = serializers.IntegerField(min_value=1)
    priority = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    status = serializers.ChoiceField(choices=CandidateStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> SuccessionCandidateCreateDTO:
        return SuccessionCandidateCreateDTO(**self.validated_data)


class SuccessionCandidateUpdateSerializer(serializers.Serializer):
    candidate_id = serializers.IntegerField()
    priority = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=CandidateStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> SuccessionCandidateUpdateDTO:
        return SuccessionCandidateUpdateDTO(**self.validated_data)


class DiscoverCandidatesSerializer(serializers.Serializer):
    min_score = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, min_value=0, max_value=100)
    limit = serializers.IntegerField(required=False, min_value=1)


# ============================================================================
# Career paths
# ============================================================================

class CareerPathSkillSerializer(serializers.ModelSerializer):
    skill_name = serializers.CharField(source='skill.name', read_only=True)

    class Meta:
        model = CareerPathSkill
        fields = ['id', 'career_path', 'skill', 'skill_name', 'min_proficiency_level', 'is_mandatory', 'weight']
        read_only_fields = fields


class CareerPathSerializer(serializers.ModelSerializer):
    from_position_title = serializers.CharField(source='from_position.title', read_only=True)
    to_position_title = serializers.CharField(source='to_position.title', read_only=True)
    required_skills = CareerPathSkillSerializer(many=True, read_only=True)

    class Meta:
        model = CareerPath
        fields = [
            'id', 'from_position', 'from_position_title', 'to_position', 'to_position_title',
            'min_years_in_current_role', 'description', 'status', 'required_skills',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CareerPathSkillWriteSerializer(serializers.Serializer):
    """Write serializer; career_path_id comes from the URL when posted on its own"""
    career_path_id = serializers.IntegerField(required=False, min_value=1)
    skill_id = serializers.IntegerField(min_value=1)
    min_proficiency_level = serializers.IntegerField(min_value=MIN_PROFICIENCY_LEVEL, max_value=MAX_PROFICIENCY_LEVEL)
    is_mandatory = serializers.BooleanField(required=False, default=True)
    weight = serializers.IntegerField(required=False, default=1, min_value=1)

    def to_dto(self) -> CareerPathSkillDTO:
        return CareerPathSkillDTO(**self.validated_data)


class CareerPathCreateSerializer(serializers.Serializer):
    from_position_id = serializers.IntegerField(min_value=1)
    to_position_id = serializers.IntegerField(min_value=1)
    min_years_in_current_role = serializers.IntegerField(
        required=False, default=1, min_value=0, max_value=MAX_CAREER_PATH_YEARS
    )
    description = serializers.CharField(required=False, allow_blank=True)
    required_skills = CareerPathSkillWriteSerializer(many=True, required=False)

    def validate(self, data):
        if data['from_position_id'] == data['to_position_id']:
            raise serializers.ValidationError({'to_position_id': 'A career path must lead to a different position'})
        return data

    def to_dto(self) -> CareerPathCreateDTO:
        data = dict(self.validated_data)
        skills = [CareerPathSkillDTO(**skill) for skill in data.pop('required_skills', [])]
        return CareerPathCreateDTO(required_skills=skills, **data)


class CareerPathUpdateSerializer(serializers.Serializer):
    career_path_id = serializers.IntegerField()
    min_years_in_current_role = serializers.IntegerField(required=False, min_value=0, max_value=MAX_CAREER_PATH_YEARS)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> CareerPathUpdateDTO:
        return CareerPathUpdateDTO(**self.validated_data)


class PathReadinessSerializer(serializers.Serializer):
    career_path_id = serializers.IntegerField()
    employee_id = serializers.IntegerField()
    to_position_id = serializers.IntegerField()
    to_position_title = serializers.CharField()
    score = serializers.DecimalField(max_digits=5, decimal_places=2)
    years_in_current_role = serializers.DecimalField(max_digits=4, decimal_places=1)
    min_years_in_current_role = serializers.IntegerField()
    meets_experience_requirement = serializers.BooleanField()
    is_ready = serializers.BooleanField()
    gaps = SkillGapSerializer(many=True)
    recommendations = serializers.ListField(child=serializers.CharField())


class RoadmapStepSerializer(serializers.Serializer):
    order = serializers.IntegerField()
    career_path_id = serializers.IntegerField()
    from_position_id = serializers.IntegerField()
    to_position_id = serializers.IntegerField()
    estimated_months = serializers.IntegerField()


class CareerRoadmapSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    current_position_id = serializers.IntegerField()
    target_position_id = serializers.IntegerField()
    is_reachable = serializers.BooleanField()
    estimated_total_months = serializers.IntegerField()
    steps = RoadmapStepSerializer(many=True)
