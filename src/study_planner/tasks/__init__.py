"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskCollection)
- task_codec.py: Task <-> plain record / JSON mapping
- task_store.py: write-through store over an injected BlobStore
- task_queries.py: day / month bucketing for the "today" and calendar views
- reminders.py: reminder window detection
- task_api.py: small high-level helpers used by the UI layer
"""
