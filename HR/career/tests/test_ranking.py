"""
Tests for candidate ranking and the inverse (positions for an employee) query.
"""
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from core.base.exceptions import NotFound
from core.base.test_utils import (
    give_skill,
    make_department,
    make_employee,
    make_position,
    make_skill,
    require_skill,
)
from HR.career.ranking import rank_candidates_for_position, rank_positions_for_employee


class RankCandidatesTest(TestCase):
    """Test ranking employees for a position"""

    @classmethod
    def setUpTestData(cls):
        """Set up test data once for all tests"""
        cls.python = make_skill(name='Python')
        cls.sql = make_skill(name='SQL')
        cls.department = make_department(name='Data')
        cls.position = make_position(department=cls.department, title='Data Engineer')
        require_skill(cls.position, cls.python, 4, mandatory=True, weight=2)
        require_skill(cls.position, cls.sql, 2, mandatory=False, weight=1)

        cls.expert = make_employee(first_name='Expert')
        give_skill(cls.expert, cls.python, 5)
        give_skill(cls.expert, cls.sql, 3)

        cls.partial = make_employee(first_name='Partial')
        give_skill(cls.partial, cls.python, 2)
        give_skill(cls.partial, cls.sql, 3)

        cls.twin = make_employee(first_name='Twin')
        give_skill(cls.twin, cls.python, 2)
        give_skill(cls.twin, cls.sql, 3)

        cls.novice = make_employee(first_name='Novice')

        cls.holder = make_employee(first_name='Holder', current_position=cls.position)
        give_skill(cls.holder, cls.python, 5)
        give_skill(cls.holder, cls.sql, 5)

        cls.retired = make_employee(first_name='Retired')
        give_skill(cls.retired, cls.python, 5)
        cls.retired.deactivate()

    def test_order_and_tie_break(self):
        """Strictly by score, ties broken by ascending employee id"""
        ranked = rank_candidates_for_position(self.position.pk)
        ids = [r.employee_id for r in ranked]
        self.assertEqual(ids, [self.expert.pk, self.partial.pk, self.twin.pk, self.novice.pk])
        self.assertEqual(ranked[0].score, Decimal('100.00'))
        self.assertEqual(ranked[1].score, Decimal('53.33'))
        self.assertEqual(ranked[1].score, ranked[2].score)
        self.assertEqual(ranked[0].employee_name, 'Expert Tester')

    def test_deterministic(self):
        first = rank_candidates_for_position(self.position.pk)
        second = rank_candidates_for_position(self.position.pk)
        self.assertEqual(first, second)

    def test_current_holders_excluded(self):
        ids = [r.employee_id for r in rank_candidates_for_position(self.position.pk)]
        self.assertNotIn(self.holder.pk, ids)
        self.assertNotIn(self.retired.pk, ids)

    def test_explicit_candidate_pool(self):
        ranked = rank_candidates_for_position(self.position.pk, candidate_ids=[self.novice.pk, self.partial.pk])
        self.assertEqual([r.employee_id for r in ranked], [self.partial.pk, self.novice.pk])

    def test_unknown_candidate(self):
        with self.assertRaises(NotFound):
            rank_candidates_for_position(self.position.pk, candidate_ids=[self.expert.pk, 999999])

    def test_ids_must_be_integers(self):
        """String ids are refused up front, numeric or not"""
        for bad in ('abc', str(self.expert.pk), 0, None):
            with self.subTest(candidate_id=bad):
                with self.assertRaises(ValidationError):
                    rank_candidates_for_position(self.position.pk, candidate_ids=[self.expert.pk, bad])
        with self.assertRaises(ValidationError):
            rank_candidates_for_position(str(self.position.pk))
        with self.assertRaises(ValidationError):
            rank_candidates_for_position(self.position.pk, limit='2')

    def test_limit_and_min_score(self):
        ranked = rank_candidates_for_position(self.position.pk, min_score=Decimal('50'))
        self.assertEqual(len(ranked), 3)
        ranked = rank_candidates_for_position(self.position.pk, limit=1)
        self.assertEqual([r.employee_id for r in ranked], [self.expert.pk])
        with self.assertRaises(ValidationError):
            rank_candidates_for_position(self.position.pk, limit=0)

    def test_inactive_position(self):
        closed = make_position(department=self.department)
        closed.deactivate()
        with self.assertRaises(ValidationError):
            rank_candidates_for_position(closed.pk)

    def test_unknown_position(self):
        with self.assertRaises(NotFound):
            rank_candidates_for_position(999999)

    @override_settings(CAREER_RANKING_PARALLEL_THRESHOLD=0, CAREER_RANKING_MAX_WORKERS=3)
    def test_parallel_path_matches_inline(self):
        """The thread pool path yields the same ranking"""
        parallel = rank_candidates_for_position(self.position.pk)
        with self.settings(CAREER_RANKING_PARALLEL_THRESHOLD=1000):
            inline = rank_candidates_for_position(self.position.pk)
        self.assertEqual(parallel, inline)


class RankPositionsTest(TestCase):
    """Test the inverse query: positions ranked for one employee"""

    @classmethod
    def setUpTestData(cls):
        cls.python = make_skill(name='Python')
        cls.excel = make_skill(name='Excel')
        cls.tech = make_department(name='Tech')
        cls.finance = make_department(name='Finance')

        cls.backend = make_position(department=cls.tech, title='Backend')
        require_skill(cls.backend, cls.python, 3)
        cls.analyst = make_position(department=cls.finance, title='Analyst')
        require_skill(cls.analyst, cls.excel, 4)
        cls.open_role = make_position(department=cls.finance, title='Generalist')
        cls.current = make_position(department=cls.tech, title='Junior')

        cls.employee = make_employee(current_position=cls.current)
        give_skill(cls.employee, cls.python, 3)
        give_skill(cls.employee, cls.excel, 2)

    def test_order(self):
        ranked = rank_positions_for_employee(self.employee.pk)
        self.assertEqual([r.position_id for r in ranked], [self.backend.pk, self.open_role.pk, self.analyst.pk])
        self.assertEqual(ranked[-1].score, Decimal('30.00'))
        self.assertNotIn(self.current.pk, [r.position_id for r in ranked])

    def test_department_filter(self):
        ranked = rank_positions_for_employee(self.employee.pk, department_id=self.finance.pk)
        self.assertEqual([r.position_id for r in ranked], [self.open_role.pk, self.analyst.pk])

    def test_unknown_employee(self):
        with self.assertRaises(NotFound):
            rank_positions_for_employee(999999)
