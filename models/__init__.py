from .subtask import Subtask, OwnedSubtask
from .task import Task, TASK_STATUSES, PRIORITIES, PROJECT_TASK_TYPES
from .member import Member
from .team import Team
