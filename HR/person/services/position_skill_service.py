from typing import List

from django.core.exceptions import ValidationError
from django.db import transaction

from core.base.exceptions import NotFound, get_or_not_found
from HR.person.dtos import PositionSkillDTO
from HR.person.models import PositionSkill, Skill
from HR.work_structures.models import Position


class PositionSkillService:
    """Service for requirement records (position -> skill -> required level)"""

    @staticmethod
    @transaction.atomic
    def upsert(user, dto: PositionSkillDTO) -> PositionSkill:
        """
        Add a skill requirement to a position, or update it in place.

        Validates:
        - Position exists
        - Skill exists and is active (for new requirements)
        - Required level within 1-5, weight >= 1 (model clean)
        """
        position = get_or_not_found(Position, 'Position', dto.position_id)
        skill = get_or_not_found(Skill, 'Skill', dto.skill_id)

        requirement = (
            PositionSkill.objects
            .select_for_update()
            .filter(position=position, skill=skill)
            .first()
        )
        if requirement is None:
            if not skill.is_active:
                raise ValidationError({'skill_id': f'Skill "{skill.name}" is inactive'})
            requirement = PositionSkill(position=position, skill=skill, created_by=user)

        requirement.required_level = dto.required_level
        requirement.is_mandatory = dto.is_mandatory
        requirement.weight = dto.weight
        requirement.updated_by = user
        requirement.full_clean()
        requirement.save()
        return requirement

    @staticmethod
    @transaction.atomic
    def remove(user, position_id: int, skill_id: int):
        deleted, _ = PositionSkill.objects.filter(position_id=position_id, skill_id=skill_id).delete()
        if not deleted:
            raise NotFound('Position skill', f'{position_id}/{skill_id}')

    @staticmethod
    def get_position_requirements(position_id: int) -> List[PositionSkill]:
        return list(
            PositionSkill.objects
            .filter(position_id=position_id)
            .select_related('skill')
            .order_by('-is_mandatory', '-weight', 'skill__name')
        )
