from .groups import Group
from .subjects import Subject
from .materials import Material
from .grades import Grade, GradeType
from .schedules import Schedule
