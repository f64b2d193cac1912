# src/study_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..tasks.task_store import TaskStore
from .ports import BlobStore


@dataclass
class PlannerState:
    # Settings kept on the state so the embedding UI can read e.g. reminder_window_minutes.
    settings: Settings

    blob_store: BlobStore
    task_store: TaskStore
