"""
Unit tests for SuccessionService: discovery, candidate ordering,
score recompute and risk.
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
    make_user,
    require_skill,
)
from core.user_accounts.models import UserRole
from HR.career.dtos import (
    SuccessionCandidateCreateDTO,
    SuccessionCandidateUpdateDTO,
    SuccessionPlanCreateDTO,
    SuccessionPlanUpdateDTO,
)
from HR.career.models import CandidateStatus, SuccessionPlanStatus
from HR.career.services.succession_service import SuccessionService
from HR.person.models import EmployeeSkill


class SuccessionServiceTest(TestCase):
    """Test SuccessionService business logic"""

    @classmethod
    def setUpTestData(cls):
        """Set up test data once for all tests"""
        cls.user = make_user(role=UserRole.HR)
        cls.python = make_skill(name='Python')
        cls.department = make_department()
        cls.position = make_position(department=cls.department, title='Head of Engineering', is_key_position=True)
        require_skill(cls.position, cls.python, 3)

        cls.strong = make_employee(first_name='Strong')
        give_skill(cls.strong, cls.python, 5)
        cls.good = make_employee(first_name='Good')
        give_skill(cls.good, cls.python, 3)
        cls.mid = make_employee(first_name='Mid')
        give_skill(cls.mid, cls.python, 2)
        cls.holder = make_employee(first_name='Holder', current_position=cls.position)
        give_skill(cls.holder, cls.python, 5)

    def open_plan(self, **kwargs):
        return SuccessionService.create_plan(self.user, SuccessionPlanCreateDTO(position_id=self.position.pk, **kwargs))

    # ----------------------
    # Plans & discovery
    # ----------------------

    def test_create_plan_with_discovery(self):
        """Auto discovery adds everyone scoring at least 60, in rank order"""
        plan = self.open_plan(auto_discover=True)
        candidates = SuccessionService.get_candidates(plan.pk)

        self.assertEqual([c.employee_id for c in candidates], [self.strong.pk, self.good.pk])
        self.assertEqual([c.priority for c in candidates], [1, 2])
        self.assertEqual(candidates[0].match_score, Decimal('100.00'))
        self.assertEqual(candidates[0].notes, 'Auto-discovered candidate. Match score: 100.0%')
        self.assertTrue(all(c.status == CandidateStatus.UNDER_REVIEW for c in candidates))

    def test_one_active_plan_per_position(self):
        self.open_plan()
        with self.assertRaises(ValidationError):
            self.open_plan()

    def test_plan_on_hold_frees_the_position(self):
        plan = self.open_plan()
        SuccessionService.update_plan(self.user, SuccessionPlanUpdateDTO(plan_id=plan.pk, status=SuccessionPlanStatus.ON_HOLD))
        self.assertIsNotNone(self.open_plan().pk)

    def test_discovery_skips_existing_candidates(self):
        plan = self.open_plan(auto_discover=True)
        self.assertEqual(SuccessionService.discover_candidates(self.user, plan.pk), [])

    def test_discovery_with_lower_threshold_appends(self):
        plan = self.open_plan(auto_discover=True)
        added = SuccessionService.discover_candidates(self.user, plan.pk, min_score=Decimal('50'))
        self.assertEqual([(c.employee_id, c.priority) for c in added], [(self.mid.pk, 3)])
        self.assertEqual(added[0].notes, 'Auto-discovered candidate. Match score: 56.7%')

    @override_settings(CAREER_SUCCESSION_MIN_SCORE=Decimal('101'))
    def test_discovery_threshold_from_settings(self):
        plan = self.open_plan(auto_discover=True)
        self.assertEqual(SuccessionService.get_candidates(plan.pk), [])

    def test_discovery_requires_active_plan(self):
        plan = self.open_plan()
        SuccessionService.update_plan(self.user, SuccessionPlanUpdateDTO(plan_id=plan.pk, status=SuccessionPlanStatus.COMPLETED))
        with self.assertRaises(ValidationError):
            SuccessionService.discover_candidates(self.user, plan.pk)

    def test_plan_for_unknown_position(self):
        with self.assertRaises(NotFound) as context:
            SuccessionService.create_plan(self.user, SuccessionPlanCreateDTO(position_id=999999))
        self.assertEqual(context.exception.entity, 'Position')

    def test_unknown_plan(self):
        with self.assertRaises(NotFound):
            SuccessionService.get_plan(999999)

    # ----------------------
    # Candidates
    # ----------------------

    def test_add_candidate_at_priority_shifts_others(self):
        plan = self.open_plan(auto_discover=True)
        candidate = SuccessionService.add_candidate(
            self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=self.mid.pk, priority=1)
        )
        self.assertEqual(candidate.match_score, Decimal('56.67'))
        order = [(c.employee_id, c.priority) for c in SuccessionService.get_candidates(plan.pk)]
        self.assertEqual(order, [(self.mid.pk, 1), (self.strong.pk, 2), (self.good.pk, 3)])

    def test_add_duplicate_candidate(self):
        plan = self.open_plan(auto_discover=True)
        with self.assertRaises(ValidationError):
            SuccessionService.add_candidate(
                self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=self.strong.pk)
            )

    def test_unknown_employee_is_not_found(self):
        plan = self.open_plan()
        with self.assertRaises(NotFound) as context:
            SuccessionService.add_candidate(
                self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=999999)
            )
        self.assertEqual(context.exception.entity, 'Employee')

    def test_inactive_employee_refused(self):
        plan = self.open_plan()
        leaver = make_employee(first_name='Leaver')
        leaver.deactivate()
        with self.assertRaises(ValidationError):
            SuccessionService.add_candidate(
                self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=leaver.pk)
            )

    def test_holder_cannot_succeed_own_position(self):
        plan = self.open_plan()
        with self.assertRaises(ValidationError):
            SuccessionService.add_candidate(
                self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=self.holder.pk)
            )

    def test_reorder_and_remove(self):
        plan = self.open_plan(auto_discover=True)
        SuccessionService.add_candidate(self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=self.mid.pk))
        last = SuccessionService.get_candidates(plan.pk)[-1]

        SuccessionService.update_candidate(self.user, SuccessionCandidateUpdateDTO(candidate_id=last.pk, priority=1))
        order = [c.employee_id for c in SuccessionService.get_candidates(plan.pk)]
        self.assertEqual(order, [self.mid.pk, self.strong.pk, self.good.pk])

        first = SuccessionService.get_candidates(plan.pk)[0]
        SuccessionService.remove_candidate(self.user, first.pk)
        remaining = [(c.employee_id, c.priority) for c in SuccessionService.get_candidates(plan.pk)]
        self.assertEqual(remaining, [(self.strong.pk, 1), (self.good.pk, 2)])

    def test_recompute_scores(self):
        """Recompute picks up ledger changes"""
        plan = self.open_plan()
        candidate = SuccessionService.add_candidate(
            self.user, SuccessionCandidateCreateDTO(plan_id=plan.pk, employee_id=self.mid.pk)
        )
        EmployeeSkill.objects.filter(employee=self.mid, skill=self.python).update(proficiency_level=3)

        candidates = SuccessionService.recompute_scores(self.user, plan.pk)
        self.assertEqual(candidates[0].pk, candidate.pk)
        self.assertEqual(candidates[0].match_score, Decimal('100.00'))

    # ----------------------
    # Risk
    # ----------------------

    def test_risk_without_plan(self):
        self.assertEqual(SuccessionService.calculate_risk(self.position.pk)['risk_level'], 'high')
        other = make_position(department=self.department)
        self.assertEqual(SuccessionService.calculate_risk(other.pk)['risk_level'], 'medium')

    def test_risk_by_ready_candidates(self):
        plan = self.open_plan(auto_discover=True)
        candidates = SuccessionService.get_candidates(plan.pk)
        self.assertEqual(SuccessionService.calculate_risk(self.position.pk)['risk_level'], 'high')

        SuccessionService.update_candidate(
            self.user, SuccessionCandidateUpdateDTO(candidate_id=candidates[0].pk, status=CandidateStatus.READY)
        )
        self.assertEqual(SuccessionService.calculate_risk(self.position.pk)['risk_level'], 'medium')

        SuccessionService.update_candidate(
            self.user, SuccessionCandidateUpdateDTO(candidate_id=candidates[1].pk, status=CandidateStatus.READY)
        )
        risk = SuccessionService.calculate_risk(self.position.pk)
        self.assertEqual(risk['risk_level'], 'low')
        self.assertEqual(risk['ready_candidates'], 2)
        self.assertTrue(risk['has_active_plan'])

    def test_risk_unknown_position(self):
        with self.assertRaises(NotFound):
            SuccessionService.calculate_risk(999999)
