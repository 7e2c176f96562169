"""
High-level use cases for the study tracker API.

Each service module orchestrates the entity store to implement one area
(sessions, todos, feedback, reports). Routers call these services instead of
touching the store or the files directly.
"""
