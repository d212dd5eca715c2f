import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from core.base.exceptions import get_or_not_found
from HR.person.dtos import SkillCreateDTO, SkillUpdateDTO
from HR.person.models import Skill

logger = logging.getLogger(__name__)


class SkillService:
    """Service for Skill catalog business logic"""

    @staticmethod
    @transaction.atomic
    def create(user, dto: SkillCreateDTO) -> Skill:
        """
        Create new skill.

        Validates:
        - Name is unique (case-insensitive)
        - Category is one of SkillCategory (model choices)
        """
        if Skill.objects.filter(name__iexact=dto.name).exists():
            raise ValidationError({'name': f'Skill "{dto.name}" already exists'})

        skill = Skill(
            name=dto.name,
            category=dto.category,
            description=dto.description or '',
            created_by=user,
            updated_by=user
        )
        skill.full_clean()
        skill.save()
        return skill

    @staticmethod
    @transaction.atomic
    def update(user, dto: SkillUpdateDTO) -> Skill:
        """
        Update a skill.

        Name and category are frozen once the skill is referenced by any
        proficiency or requirement record; only the description may change.
        """
        skill = get_or_not_found(Skill, 'Skill', dto.skill_id)

        renamed = dto.name is not None and dto.name != skill.name
        recategorized = dto.category is not None and dto.category != skill.category
        if (renamed or recategorized) and skill.is_referenced():
            raise ValidationError(
                {'skill_id': 'Skill is referenced by proficiency or requirement records; name and category are immutable'}
            )
        if renamed and Skill.objects.filter(name__iexact=dto.name).exclude(pk=skill.pk).exists():
            raise ValidationError({'name': f'Skill "{dto.name}" already exists'})

        field_updates = {'updated_by': user}
        if renamed:
            field_updates['name'] = dto.name
        if recategorized:
            field_updates['category'] = dto.category
        if dto.description is not None:
            field_updates['description'] = dto.description
        return skill.update_fields(field_updates)

    @staticmethod
    @transaction.atomic
    def deactivate(user, skill_id: int) -> Skill:
        skill = get_or_not_found(Skill, 'Skill', skill_id)
        if not skill.is_active:
            raise ValidationError({'skill_id': 'Skill is already inactive'})
        skill.deactivate(user)
        logger.info("Skill %s deactivated by user %s", skill.pk, getattr(user, 'pk', None))
        return skill

    @staticmethod
    @transaction.atomic
    def reactivate(user, skill_id: int) -> Skill:
        skill = get_or_not_found(Skill, 'Skill', skill_id)
        if skill.is_active:
            raise ValidationError({'skill_id': 'Skill is already active'})
        skill.reactivate(user)
        return skill

    @staticmethod
    @transaction.atomic
    def delete(user, skill_id: int):
        """
        Remove a skill.

        Unreferenced skills are removed outright; referenced skills are
        soft-deactivated instead. Returns True when the row was removed.
        """
        skill = get_or_not_found(Skill, 'Skill', skill_id)

        if skill.is_referenced():
            if skill.is_active:
                skill.deactivate(user)
            return False
        skill.hard_delete()
        return True

    @staticmethod
    def list_skills(filters: dict):
        """
        Filters: category, status, name, search
        """
        queryset = Skill.objects.with_status(filters.get('status'))
        if filters.get('category'):
            queryset = queryset.filter(category=filters['category'])
        return queryset.filter_by_search_params(filters).order_by('name')
