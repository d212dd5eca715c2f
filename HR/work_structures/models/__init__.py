from .department import Department
from .position import Position, PositionLevel

__all__ = ['Department', 'Position', 'PositionLevel']
