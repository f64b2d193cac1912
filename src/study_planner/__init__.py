"""Study planner core: tasks, persistence, calendar queries and reminder detection."""

__version__ = "0.1.0"
