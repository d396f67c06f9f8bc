from .task import DEFAULT_CATEGORY, Task, TaskPriority, TaskStatus
from .user import User

# Export all models for easy importing
__all__ = ["Task", "TaskPriority", "TaskStatus", "DEFAULT_CATEGORY", "User"]
