"""
Unit tests for the skill ledger services
Tests proficiency and requirement upserts
"""

from datetime import date

from django.test import TestCase
from django.core.exceptions import ValidationError

from core.base.exceptions import NotFound
from core.base.test_utils import give_skill, make_employee, make_position, make_skill, make_user
from HR.person.dtos import EmployeeSkillDTO, PositionSkillDTO
from HR.person.models import EmployeeSkill, PositionSkill
from HR.person.services.employee_skill_service import EmployeeSkillService
from HR.person.services.position_skill_service import PositionSkillService


class EmployeeSkillServiceTest(TestCase):
    """Test EmployeeSkillService business logic"""

    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()
        cls.employee = make_employee()
        cls.python = make_skill(name='Python')

    def test_add_new_proficiency(self):
        record = EmployeeSkillService.upsert(
            self.user,
            EmployeeSkillDTO(employee_id=self.employee.pk, skill_id=self.python.pk,
                             proficiency_level=3, acquired_date=date(2022, 5, 1))
        )
        self.assertEqual(record.proficiency_level, 3)
        self.assertEqual(record.acquired_date, date(2022, 5, 1))
        self.assertEqual(record.created_by, self.user)

    def test_re_adding_updates_in_place(self):
        """Test a second upsert for the same skill updates the existing row"""
        first = give_skill(self.employee, self.python, 2)
        record = EmployeeSkillService.upsert(
            self.user,
            EmployeeSkillDTO(employee_id=self.employee.pk, skill_id=self.python.pk, proficiency_level=4)
        )
        self.assertEqual(record.pk, first.pk)
        self.assertEqual(record.proficiency_level, 4)
        self.assertEqual(record.acquired_date, date(2021, 1, 1))
        self.assertEqual(EmployeeSkill.objects.filter(employee=self.employee).count(), 1)

    def test_level_out_of_range(self):
        for level in (0, 6):
            with self.subTest(level=level):
                with self.assertRaises(ValidationError) as context:
                    EmployeeSkillService.upsert(
                        self.user,
                        EmployeeSkillDTO(employee_id=self.employee.pk, skill_id=self.python.pk,
                                         proficiency_level=level)
                    )
                self.assertIn('proficiency_level', context.exception.message_dict)

    def test_inactive_skill_refused_for_new_record(self):
        retired = make_skill()
        retired.deactivate()
        with self.assertRaises(ValidationError) as context:
            EmployeeSkillService.upsert(
                self.user,
                EmployeeSkillDTO(employee_id=self.employee.pk, skill_id=retired.pk, proficiency_level=2)
            )
        self.assertIn('skill_id', context.exception.message_dict)

    def test_inactive_skill_existing_record_can_be_reassessed(self):
        retired = make_skill()
        give_skill(self.employee, retired, 2)
        retired.deactivate()
        record = EmployeeSkillService.upsert(
            self.user,
            EmployeeSkillDTO(employee_id=self.employee.pk, skill_id=retired.pk, proficiency_level=3)
        )
        self.assertEqual(record.proficiency_level, 3)

    def test_unknown_employee(self):
        with self.assertRaises(NotFound) as context:
            EmployeeSkillService.upsert(
                self.user, EmployeeSkillDTO(employee_id=99999, skill_id=self.python.pk, proficiency_level=2)
            )
        self.assertEqual(context.exception.entity, 'Employee')

    def test_unknown_skill(self):
        with self.assertRaises(NotFound) as context:
            EmployeeSkillService.upsert(
                self.user, EmployeeSkillDTO(employee_id=self.employee.pk, skill_id=99999, proficiency_level=2)
            )
        self.assertEqual(context.exception.entity, 'Skill')
        self.assertEqual(context.exception.pk, 99999)

    def test_remove(self):
        give_skill(self.employee, self.python, 2)
        EmployeeSkillService.remove(self.user, self.employee.pk, self.python.pk)
        self.assertFalse(EmployeeSkill.objects.filter(employee=self.employee).exists())
        with self.assertRaises(NotFound):
            EmployeeSkillService.remove(self.user, self.employee.pk, self.python.pk)

    def test_skill_holders_excludes_inactive_employees(self):
        give_skill(self.employee, self.python, 4)
        leaver = make_employee()
        give_skill(leaver, self.python, 5)
        leaver.deactivate()

        holders = list(EmployeeSkillService.get_skill_holders(self.python.pk))
        self.assertEqual([h.employee_id for h in holders], [self.employee.pk])
        self.assertEqual(list(EmployeeSkillService.get_skill_holders(self.python.pk, min_level=5)), [])


class PositionSkillServiceTest(TestCase):
    """Test PositionSkillService business logic"""

    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()
        cls.position = make_position(title='Data Engineer')
        cls.sql = make_skill(name='SQL')
        cls.python = make_skill(name='Python')

    def test_upsert_creates_then_updates(self):
        created = PositionSkillService.upsert(
            self.user, PositionSkillDTO(position_id=self.position.pk, skill_id=self.sql.pk, required_level=3)
        )
        updated = PositionSkillService.upsert(
            self.user,
            PositionSkillDTO(position_id=self.position.pk, skill_id=self.sql.pk,
                             required_level=4, is_mandatory=False, weight=2)
        )
        self.assertEqual(created.pk, updated.pk)
        self.assertEqual(updated.required_level, 4)
        self.assertFalse(updated.is_mandatory)
        self.assertEqual(PositionSkill.objects.filter(position=self.position).count(), 1)

    def test_invalid_weight(self):
        with self.assertRaises(ValidationError):
            PositionSkillService.upsert(
                self.user,
                PositionSkillDTO(position_id=self.position.pk, skill_id=self.sql.pk, required_level=3, weight=0)
            )

    def test_requirements_ordering(self):
        """Test mandatory requirements come first, heavier weights first"""
        PositionSkillService.upsert(
            self.user,
            PositionSkillDTO(position_id=self.position.pk, skill_id=self.sql.pk,
                             required_level=2, is_mandatory=False, weight=5)
        )
        PositionSkillService.upsert(
            self.user, PositionSkillDTO(position_id=self.position.pk, skill_id=self.python.pk, required_level=3)
        )
        names = [r.skill.name for r in PositionSkillService.get_position_requirements(self.position.pk)]
        self.assertEqual(names, ['Python', 'SQL'])

    def test_unknown_position(self):
        with self.assertRaises(NotFound) as context:
            PositionSkillService.upsert(
                self.user, PositionSkillDTO(position_id=99999, skill_id=self.sql.pk, required_level=3)
            )
        self.assertEqual(context.exception.entity, 'Position')

    def test_unknown_skill(self):
        with self.assertRaises(NotFound):
            PositionSkillService.upsert(
                self.user, PositionSkillDTO(position_id=self.position.pk, skill_id=99999, required_level=3)
            )

    def test_remove_missing_requirement(self):
        with self.assertRaises(NotFound):
            PositionSkillService.remove(self.user, self.position.pk, self.python.pk)
