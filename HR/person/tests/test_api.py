"""
API tests for employee and skill ledger endpoints.
"""
from rest_framework import status
from rest_framework.test import APIClient
from django.test import TestCase

from core.base.models import StatusChoices
from core.base.test_utils import give_skill, make_employee, make_position, make_skill, make_user
from core.user_accounts.models import UserRole
from HR.person.models import EmployeeSkill, Skill


class SkillAPITest(TestCase):
    """Test skill catalog endpoints"""

    @classmethod
    def setUpTestData(cls):
        cls.hr = make_user(role=UserRole.HR)
        cls.employee_user = make_user(role=UserRole.EMPLOYEE)

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.hr)

    def test_create_and_list_skills(self):
        response = self.client.post('/hr/person/skills/', {'name': 'Rust', 'category': 'technical'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Rust')

        response = self.client.get('/hr/person/skills/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['count'], 1)

    def test_duplicate_skill_name(self):
        make_skill(name='Rust')
        response = self.client.post('/hr/person/skills/', {'name': 'rust', 'category': 'technical'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_cannot_create_skill(self):
        self.client.force_authenticate(user=self.employee_user)
        response = self.client.post('/hr/person/skills/', {'name': 'Rust', 'category': 'technical'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_employee_can_browse_skills(self):
        make_skill(name='Rust')
        self.client.force_authenticate(user=self.employee_user)
        response = self.client.get('/hr/person/skills/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_rename_referenced_skill_refused(self):
        skill = make_skill(name='Go')
        give_skill(make_employee(), skill, 3)
        response = self.client.patch(f'/hr/person/skills/{skill.pk}/', {'name': 'Golang'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_unreferenced_skill(self):
        skill = make_skill()
        response = self.client.delete(f'/hr/person/skills/{skill.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Skill.objects.filter(pk=skill.pk).exists())

    def test_delete_referenced_skill_deactivates(self):
        skill = make_skill()
        give_skill(make_employee(), skill, 3)
        response = self.client.delete(f'/hr/person/skills/{skill.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('deactivated', response.data['message'])

        response = self.client.post(f'/hr/person/skills/{skill.pk}/reactivate/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], StatusChoices.ACTIVE)

    def test_reactivate_unknown_skill(self):
        response = self.client.post('/hr/person/skills/999999/reactivate/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['status'], 'error')

    def test_reactivate_active_skill(self):
        skill = make_skill()
        response = self.client.post(f'/hr/person/skills/{skill.pk}/reactivate/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class SkillLedgerAPITest(TestCase):
    """Test proficiency and requirement endpoints"""

    @classmethod
    def setUpTestData(cls):
        cls.hr = make_user(role=UserRole.HR)
        cls.employee = make_employee(role=UserRole.EMPLOYEE)
        cls.position = make_position()
        cls.skill = make_skill(name='SQL')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.hr)

    def test_post_employee_skill_upserts(self):
        url = f'/hr/person/employees/{self.employee.pk}/skills/'
        response = self.client.post(url, {'skill_id': self.skill.pk, 'proficiency_level': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(url, {'skill_id': self.skill.pk, 'proficiency_level': 4}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['proficiency_level'], 4)
        self.assertEqual(EmployeeSkill.objects.filter(employee=self.employee).count(), 1)

        response = self.client.get(url)
        self.assertEqual(response.data['data']['results'][0]['skill_name'], 'SQL')

    def test_employee_skill_level_validated(self):
        response = self.client.post(
            f'/hr/person/employees/{self.employee.pk}/skills/',
            {'skill_id': self.skill.pk, 'proficiency_level': 9},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_cannot_record_skills(self):
        self.client.force_authenticate(user=self.employee.user)
        response = self.client.post(
            f'/hr/person/employees/{self.employee.pk}/skills/',
            {'skill_id': self.skill.pk, 'proficiency_level': 5},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_remove_employee_skill(self):
        give_skill(self.employee, self.skill, 3)
        url = f'/hr/person/employees/{self.employee.pk}/skills/{self.skill.pk}/'
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_position_requirements(self):
        url = f'/hr/person/positions/{self.position.pk}/skills/'
        response = self.client.post(
            url, {'skill_id': self.skill.pk, 'required_level': 3, 'is_mandatory': False, 'weight': 2}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['weight'], 2)

        response = self.client.get(url)
        self.assertEqual(response.data['data']['count'], 1)

    def test_unknown_position(self):
        response = self.client.get('/hr/person/positions/999999/skills/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_skill_in_body(self):
        response = self.client.post(
            f'/hr/person/employees/{self.employee.pk}/skills/',
            {'skill_id': 999999, 'proficiency_level': 3},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['status'], 'error')
        self.assertFalse(EmployeeSkill.objects.filter(employee=self.employee).exists())


class EmployeeAPITest(TestCase):
    """Test employee endpoints"""

    @classmethod
    def setUpTestData(cls):
        cls.hr = make_user(role=UserRole.HR)

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.hr)

    def test_create_employee(self):
        response = self.client.post('/hr/person/employees/', {
            'employee_number': 'EMP-900',
            'first_name': 'Grace',
            'last_name': 'Hopper',
            'hire_date': '2022-02-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['full_name'], 'Grace Hopper')

    def test_update_and_deactivate(self):
        employee = make_employee()
        response = self.client.patch(f'/hr/person/employees/{employee.pk}/', {'last_name': 'Updated'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['last_name'], 'Updated')

        response = self.client.delete(f'/hr/person/employees/{employee.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        employee.refresh_from_db()
        self.assertFalse(employee.is_active)

    def test_anonymous_rejected(self):
        self.client.force_authenticate(user=None)
        response = self.client.get('/hr/person/employees/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
