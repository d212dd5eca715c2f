"""
Unit tests for Department and Position services
"""

from decimal import Decimal

from django.test import TestCase
from django.core.exceptions import ValidationError

from core.base.exceptions import NotFound
from core.base.models import StatusChoices
from core.base.test_utils import make_department, make_position, make_user
from HR.work_structures.dtos import (
    DepartmentCreateDTO,
    DepartmentUpdateDTO,
    PositionCreateDTO,
    PositionUpdateDTO,
)
from HR.work_structures.models import PositionLevel
from HR.work_structures.services.department_service import DepartmentService
from HR.work_structures.services.position_service import PositionService


class DepartmentServiceTest(TestCase):
    """Test DepartmentService business logic"""

    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()

    def test_create_department(self):
        department = DepartmentService.create(self.user, DepartmentCreateDTO(code='ENG', name='Engineering'))
        self.assertEqual(department.code, 'ENG')
        self.assertEqual(department.created_by, self.user)

    def test_duplicate_code(self):
        make_department(code='ENG')
        with self.assertRaises(ValidationError) as context:
            DepartmentService.create(self.user, DepartmentCreateDTO(code='ENG', name='Other'))
        self.assertIn('code', context.exception.message_dict)

    def test_update_department(self):
        department = make_department(name='Ops')
        updated = DepartmentService.update(
            self.user, DepartmentUpdateDTO(department_id=department.pk, name='Operations')
        )
        self.assertEqual(updated.name, 'Operations')

    def test_deactivate_refused_with_active_positions(self):
        department = make_department()
        position = make_position(department=department)
        with self.assertRaises(ValidationError):
            DepartmentService.deactivate(self.user, department.pk)

        position.deactivate()
        DepartmentService.deactivate(self.user, department.pk)
        department.refresh_from_db()
        self.assertEqual(department.status, StatusChoices.INACTIVE)

        with self.assertRaises(ValidationError):
            DepartmentService.deactivate(self.user, department.pk)

    def test_missing_department_is_not_found(self):
        with self.assertRaises(NotFound):
            DepartmentService.deactivate(self.user, 99999)
        with self.assertRaises(NotFound):
            DepartmentService.update(self.user, DepartmentUpdateDTO(department_id=99999, name='Ghost'))


class PositionServiceTest(TestCase):
    """Test PositionService business logic"""

    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()
        cls.department = make_department(name='Engineering')

    def test_create_position(self):
        position = PositionService.create(self.user, PositionCreateDTO(
            code='BE-2', title='Backend Engineer', department_id=self.department.pk,
            level=PositionLevel.SENIOR, min_salary=Decimal('4000'), max_salary=Decimal('6000'),
            is_key_position=True,
        ))
        self.assertTrue(position.is_key_position)
        self.assertTrue(position.salary_in_band(Decimal('5000')))
        self.assertFalse(position.salary_in_band(Decimal('6000.01')))

    def test_inverted_salary_band(self):
        with self.assertRaises(ValidationError) as context:
            PositionService.create(self.user, PositionCreateDTO(
                code='BE-3', title='Backend Engineer', department_id=self.department.pk,
                level=PositionLevel.MID, min_salary=Decimal('6000'), max_salary=Decimal('4000'),
            ))
        self.assertIn('max_salary', context.exception.message_dict)

    def test_inactive_department_refused(self):
        closed = make_department()
        closed.deactivate()
        with self.assertRaises(ValidationError) as context:
            PositionService.create(self.user, PositionCreateDTO(
                code='X-1', title='Nowhere', department_id=closed.pk, level=PositionLevel.MID
            ))
        self.assertIn('department_id', context.exception.message_dict)

    def test_open_band_always_passes(self):
        position = make_position(department=self.department)
        self.assertTrue(position.salary_in_band(Decimal('1000000')))

    def test_update_and_list(self):
        position = make_position(department=self.department, title='Analyst')
        PositionService.update(self.user, PositionUpdateDTO(position_id=position.pk, is_key_position=True))

        keys = PositionService.list_positions({'is_key_position': True})
        self.assertEqual(list(keys), [position])

        position.deactivate()
        with self.assertRaises(ValidationError):
            PositionService.update(self.user, PositionUpdateDTO(position_id=position.pk, title='Senior Analyst'))

    def test_missing_records_are_not_found(self):
        with self.assertRaises(NotFound) as context:
            PositionService.create(self.user, PositionCreateDTO(
                code='X-2', title='Nowhere', department_id=99999, level=PositionLevel.MID
            ))
        self.assertEqual(context.exception.entity, 'Department')
        with self.assertRaises(NotFound):
            PositionService.update(self.user, PositionUpdateDTO(position_id=99999, title='Ghost'))
        with self.assertRaises(NotFound):
            PositionService.deactivate(self.user, 99999)
