"""Study tracker backend: sessions, todos, feedback, statistics and reports."""

__version__ = "1.0.0"
