from .employee_views import (
    employee_list,
    employee_detail,
)
from .skill_views import (
    skill_list,
    skill_detail,
    skill_reactivate,
    employee_skill_list,
    employee_skill_detail,
    position_skill_list,
    position_skill_detail,
)
