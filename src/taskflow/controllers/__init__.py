"""
Controllers: the recovery boundary between callers and repositories.

Every public method returns a response envelope (see envelope.py) and never
raises, except TaskController.set_current_user for an unknown user.
"""
