"""
User subsystem.

Components:
- user_models.py: User entity
- user_repository.py: in-memory index with username/email uniqueness
"""
