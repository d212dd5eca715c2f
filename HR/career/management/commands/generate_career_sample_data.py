from datetime import date
from decimal import Decimal

from django.contrib.auth.hashers import make_password
from django.core.management import call_command
from django.core.management.base import BaseCommand

from core.base.models import StatusChoices
from core.user_accounts.models import CustomUser, UserRole
from HR.career.models import CareerPath, CareerPathSkill
from HR.person.models import Employee, EmployeeSkill, PositionSkill, Skill, SkillCategory
from HR.work_structures.models import Department, Position, PositionLevel


class Command(BaseCommand):
    help = 'Generate a small career management dataset (departments, skills, employees, requirements, career paths)'

    def add_arguments(self, parser):
        parser.add_argument('--flush', action='store_true', help='Remove all existing data first')

    def populate_users(self):
        self.stdout.write('\n* Creating Users...')
        # Password: "password123"
        hashed_password = make_password('password123')

        users_data = [
            ('admin@career.local', 'Amr Elsayed', UserRole.ADMIN),
            ('hr@career.local', 'Layla Mansour', UserRole.HR),
            ('manager@career.local', 'Fatima Ahmed', UserRole.MANAGER),
            ('dev1@career.local', 'Omar Hassan', UserRole.EMPLOYEE),
            ('dev2@career.local', 'Karim Khouri', UserRole.EMPLOYEE),
            ('analyst@career.local', 'Nour Saleh', UserRole.EMPLOYEE),
        ]

        self.users = {}
        for email, name, role in users_data:
            user, _ = CustomUser.objects.update_or_create(
                email=email,
                defaults={
                    'name': name,
                    'phone_number': '+20 100 000 0000',
                    'password': hashed_password,
                    'role': role,
                }
            )
            self.users[email] = user

        self.stdout.write(f'  ✓ Created {len(users_data)} users')

    def populate_skills(self):
        self.stdout.write('\n* Creating Skills...')

        skills = [
            ('Python', SkillCategory.TECHNICAL),
            ('Django', SkillCategory.TECHNICAL),
            ('SQL', SkillCategory.TECHNICAL),
            ('Team Leadership', SkillCategory.LEADERSHIP),
            ('Stakeholder Communication', SkillCategory.COMMUNICATION),
            ('Data Analysis', SkillCategory.ANALYTICAL),
        ]

        self.skills = {}
        for name, category in skills:
            self.skills[name], _ = Skill.objects.update_or_create(
                name=name,
                defaults={'category': category, 'description': f'{name} skill'}
            )

        self.stdout.write(f'  ✓ Created {len(skills)} skills')

    def populate_work_structure(self):
        self.stdout.write('\n* Creating Departments & Positions...')

        departments = [('ENG', 'Engineering'), ('DATA', 'Data & Analytics')]
        self.departments = {}
        for code, name in departments:
            self.departments[code], _ = Department.objects.update_or_create(code=code, defaults={'name': name})

        positions = [
            ('BE-MID', 'Backend Engineer', 'ENG', PositionLevel.MID, '3000', '5000', False),
            ('BE-SNR', 'Senior Backend Engineer', 'ENG', PositionLevel.SENIOR, '5000', '8000', False),
            ('ENG-LEAD', 'Engineering Lead', 'ENG', PositionLevel.LEAD, '8000', '12000', True),
            ('DA-MID', 'Data Analyst', 'DATA', PositionLevel.MID, '3000', '5500', False),
        ]
        self.positions = {}
        for code, title, dept, level, low, high, key in positions:
            self.positions[code], _ = Position.objects.update_or_create(
                code=code,
                defaults={
                    'title': title,
                    'department': self.departments[dept],
                    'level': level,
                    'min_salary': Decimal(low),
                    'max_salary': Decimal(high),
                    'is_key_position': key,
                }
            )

        self.stdout.write(f'  ✓ Created {len(departments)} departments and {len(positions)} positions')

    def populate_requirements(self):
        self.stdout.write('\n* Creating Position Skill Requirements...')

        requirements = [
            ('BE-MID', 'Python', 3, True, 2),
            ('BE-MID', 'SQL', 2, False, 1),
            ('BE-SNR', 'Python', 4, True, 3),
            ('BE-SNR', 'Django', 4, True, 2),
            ('BE-SNR', 'SQL', 3, False, 1),
            ('ENG-LEAD', 'Team Leadership', 4, True, 3),
            ('ENG-LEAD', 'Python', 4, False, 2),
            ('ENG-LEAD', 'Stakeholder Communication', 3, True, 2),
            ('DA-MID', 'SQL', 4, True, 2),
            ('DA-MID', 'Data Analysis', 3, True, 2),
        ]

        for position, skill, level, mandatory, weight in requirements:
            PositionSkill.objects.update_or_create(
                position=self.positions[position],
                skill=self.skills[skill],
                defaults={'required_level': level, 'is_mandatory': mandatory, 'weight': weight}
            )

        self.stdout.write(f'  ✓ Created {len(requirements)} requirements')

    def populate_employees(self):
        self.stdout.write('\n* Creating Employees...')

        employees = [
            # number, user, first, last, position, manager number, salary
            ('E-001', 'admin@career.local', 'Amr', 'Elsayed', None, None, '15000'),
            ('E-002', 'hr@career.local', 'Layla', 'Mansour', None, 'E-001', '9000'),
            ('E-003', 'manager@career.local', 'Fatima', 'Ahmed', 'ENG-LEAD', 'E-001', '10000'),
            ('E-004', 'dev1@career.local', 'Omar', 'Hassan', 'BE-MID', 'E-003', '4200'),
            ('E-005', 'dev2@career.local', 'Karim', 'Khouri', 'BE-SNR', 'E-003', '6500'),
            ('E-006', 'analyst@career.local', 'Nour', 'Saleh', 'DA-MID', 'E-003', '4000'),
        ]

        self.employees = {}
        for number, email, first, last, position, manager, salary in employees:
            placement = self.positions.get(position)
            self.employees[number], _ = Employee.objects.update_or_create(
                employee_number=number,
                defaults={
                    'user': self.users[email],
                    'first_name': first,
                    'last_name': last,
                    'email': email,
                    'current_position': placement,
                    'department': placement.department if placement else None,
                    'manager': self.employees.get(manager),
                    'salary': Decimal(salary),
                    'hire_date': date(2020, 1, 1),
                }
            )

        self.stdout.write(f'  ✓ Created {len(employees)} employees')

    def populate_proficiencies(self):
        self.stdout.write('\n* Creating Employee Skills...')

        proficiencies = [
            ('E-003', 'Team Leadership', 4),
            ('E-003', 'Python', 4),
            ('E-003', 'Stakeholder Communication', 3),
            ('E-004', 'Python', 4),
            ('E-004', 'Django', 3),
            ('E-004', 'SQL', 3),
            ('E-005', 'Python', 5),
            ('E-005', 'Django', 4),
            ('E-005', 'Team Leadership', 2),
            ('E-006', 'SQL', 4),
            ('E-006', 'Data Analysis', 4),
            ('E-006', 'Python', 2),
        ]

        for number, skill, level in proficiencies:
            EmployeeSkill.objects.update_or_create(
                employee=self.employees[number],
                skill=self.skills[skill],
                defaults={'proficiency_level': level, 'acquired_date': date(2021, 1, 1)}
            )

        self.stdout.write(f'  ✓ Created {len(proficiencies)} employee skills')

    def populate_career_paths(self):
        self.stdout.write('\n* Creating Career Paths...')

        paths = [
            ('BE-MID', 'BE-SNR', 2, 'Backend promotion track', [('Python', 4, True, 2), ('Django', 4, True, 2)]),
            ('BE-SNR', 'ENG-LEAD', 3, 'Engineering leadership track', [('Team Leadership', 3, True, 3), ('Stakeholder Communication', 3, False, 1)]),
            ('DA-MID', 'BE-MID', 1, 'Lateral move into backend', [('Python', 3, True, 1)]),
        ]

        for source, target, years, description, skills in paths:
            path, _ = CareerPath.objects.update_or_create(
                from_position=self.positions[source],
                to_position=self.positions[target],
                defaults={'min_years_in_current_role': years, 'description': description, 'status': StatusChoices.ACTIVE}
            )
            for skill, level, mandatory, weight in skills:
                CareerPathSkill.objects.update_or_create(
                    career_path=path,
                    skill=self.skills[skill],
                    defaults={'min_proficiency_level': level, 'is_mandatory': mandatory, 'weight': weight}
                )

        self.stdout.write(f'  ✓ Created {len(paths)} career paths')

    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write(self.style.WARNING('⚠️  Removing all existing data...'))
            call_command('flush', '--noinput')
            self.stdout.write(self.style.SUCCESS('✓ Database flushed successfully'))

        self.stdout.write('Generating career data...')

        self.populate_users()
        self.populate_skills()
        self.populate_work_structure()
        self.populate_requirements()
        self.populate_employees()
        self.populate_proficiencies()
        self.populate_career_paths()

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(self.style.SUCCESS('✅ Career sample data generated successfully!'))
