"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, TaskCategory)
- task_repository.py: in-memory index + queries, write-through to the Storage Port
"""
