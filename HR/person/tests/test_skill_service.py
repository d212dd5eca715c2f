"""
Unit tests for Skill Service
Tests skill lifecycle and the identity freeze once a skill is referenced
"""

from django.test import TestCase
from django.core.exceptions import ValidationError

from core.base.exceptions import NotFound
from core.base.models import StatusChoices
from core.base.test_utils import give_skill, make_employee, make_skill, make_user
from HR.person.dtos import SkillCreateDTO, SkillUpdateDTO
from HR.person.models import Skill, SkillCategory
from HR.person.services.skill_service import SkillService


class SkillServiceTest(TestCase):
    """Test SkillService business logic"""

    @classmethod
    def setUpTestData(cls):
        """Set up test data once for all tests"""
        cls.user = make_user()

    def test_create_skill_success(self):
        """Test successful skill creation"""
        skill = SkillService.create(
            self.user, SkillCreateDTO(name='Kubernetes', category=SkillCategory.TECHNICAL, description='Containers')
        )
        self.assertIsNotNone(skill.id)
        self.assertEqual(skill.category, SkillCategory.TECHNICAL)
        self.assertEqual(skill.created_by, self.user)

    def test_create_duplicate_name_case_insensitive(self):
        """Test creation fails when the name exists in another case"""
        make_skill(name='Python')
        with self.assertRaises(ValidationError) as context:
            SkillService.create(self.user, SkillCreateDTO(name='python', category=SkillCategory.TECHNICAL))
        self.assertIn('name', context.exception.message_dict)

    def test_update_unreferenced_skill(self):
        """Test name and category may change while nothing references the skill"""
        skill = make_skill(name='Excel')
        updated = SkillService.update(
            self.user, SkillUpdateDTO(skill_id=skill.pk, name='Spreadsheets', category=SkillCategory.BUSINESS)
        )
        self.assertEqual(updated.name, 'Spreadsheets')
        self.assertEqual(updated.category, SkillCategory.BUSINESS)

    def test_referenced_skill_identity_is_frozen(self):
        """Test name and category are immutable once referenced"""
        skill = make_skill(name='Go')
        give_skill(make_employee(), skill, 3)

        with self.assertRaises(ValidationError):
            SkillService.update(self.user, SkillUpdateDTO(skill_id=skill.pk, name='Golang'))
        with self.assertRaises(ValidationError):
            SkillService.update(self.user, SkillUpdateDTO(skill_id=skill.pk, category=SkillCategory.CREATIVE))

        updated = SkillService.update(self.user, SkillUpdateDTO(skill_id=skill.pk, description='Systems language'))
        self.assertEqual(updated.description, 'Systems language')
        self.assertEqual(updated.name, 'Go')

    def test_deactivate_and_reactivate(self):
        skill = make_skill()
        SkillService.deactivate(self.user, skill.pk)
        skill.refresh_from_db()
        self.assertEqual(skill.status, StatusChoices.INACTIVE)
        self.assertEqual(skill.updated_by, self.user)

        with self.assertRaises(ValidationError):
            SkillService.deactivate(self.user, skill.pk)

        SkillService.reactivate(self.user, skill.pk)
        skill.refresh_from_db()
        self.assertTrue(skill.is_active)
        with self.assertRaises(ValidationError):
            SkillService.reactivate(self.user, skill.pk)

    def test_missing_skill_is_not_found(self):
        """Unknown ids raise NotFound, not a validation error"""
        for operation in (SkillService.deactivate, SkillService.reactivate, SkillService.delete):
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(NotFound) as context:
                    operation(self.user, 99999)
                self.assertEqual(context.exception.entity, 'Skill')
        with self.assertRaises(NotFound):
            SkillService.update(self.user, SkillUpdateDTO(skill_id=99999, description='x'))

    def test_delete_unreferenced_skill(self):
        """Test an unreferenced skill is removed outright"""
        skill = make_skill()
        self.assertTrue(SkillService.delete(self.user, skill.pk))
        self.assertFalse(Skill.objects.filter(pk=skill.pk).exists())

    def test_delete_referenced_skill_deactivates(self):
        """Test a referenced skill is deactivated instead of deleted"""
        skill = make_skill()
        give_skill(make_employee(), skill, 2)
        self.assertFalse(SkillService.delete(self.user, skill.pk))
        skill.refresh_from_db()
        self.assertEqual(skill.status, StatusChoices.INACTIVE)

    def test_hard_delete_refused_when_referenced(self):
        skill = make_skill()
        give_skill(make_employee(), skill, 2)
        with self.assertRaises(ValidationError):
            skill.hard_delete()

    def test_list_skills_filters(self):
        make_skill(name='Negotiation', category=SkillCategory.BUSINESS)
        make_skill(name='Python', category=SkillCategory.TECHNICAL)
        names = [s.name for s in SkillService.list_skills({'category': SkillCategory.BUSINESS})]
        self.assertEqual(names, ['Negotiation'])
