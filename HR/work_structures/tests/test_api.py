"""
API tests for department and position endpoints.
"""
from rest_framework import status
from rest_framework.test import APIClient
from django.test import TestCase

from core.base.test_utils import make_department, make_position, make_user
from core.user_accounts.models import UserRole


class WorkStructuresAPITest(TestCase):
    """Test work structure endpoints"""

    @classmethod
    def setUpTestData(cls):
        cls.hr = make_user(role=UserRole.HR)
        cls.employee_user = make_user(role=UserRole.EMPLOYEE)
        cls.department = make_department(name='Engineering')

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.hr)

    def test_list_departments(self):
        response = self.client.get('/hr/work_structures/departments/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['count'], 1)
        self.assertEqual(response.data['data']['results'][0]['name'], 'Engineering')

    def test_create_department(self):
        response = self.client.post(
            '/hr/work_structures/departments/', {'code': 'FIN', 'name': 'Finance'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'FIN')

    def test_employee_cannot_create_department(self):
        self.client.force_authenticate(user=self.employee_user)
        response = self.client.post(
            '/hr/work_structures/departments/', {'code': 'FIN', 'name': 'Finance'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_deactivate_department_with_positions(self):
        make_position(department=self.department)
        response = self.client.delete(f'/hr/work_structures/departments/{self.department.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_position(self):
        response = self.client.post('/hr/work_structures/positions/', {
            'code': 'DE-1',
            'title': 'Data Engineer',
            'department_id': self.department.pk,
            'level': 'senior',
            'min_salary': '4000.00',
            'max_salary': '6000.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['department_name'], 'Engineering')

    def test_filter_key_positions(self):
        make_position(department=self.department, title='Head of Data', is_key_position=True)
        make_position(department=self.department, title='Analyst')
        response = self.client.get('/hr/work_structures/positions/?is_key_position=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = [p['title'] for p in response.data['data']['results']]
        self.assertEqual(titles, ['Head of Data'])

    def test_position_not_found(self):
        response = self.client.get('/hr/work_structures/positions/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_position_in_unknown_department(self):
        response = self.client.post('/hr/work_structures/positions/', {
            'code': 'DE-2', 'title': 'Data Engineer', 'department_id': 999999, 'level': 'mid',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_position_in_inactive_department(self):
        closed = make_department()
        closed.deactivate()
        response = self.client.post('/hr/work_structures/positions/', {
            'code': 'DE-3', 'title': 'Data Engineer', 'department_id': closed.pk, 'level': 'mid',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
