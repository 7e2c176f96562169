"""
FastAPI routers grouped by collection (study, todo, feedback, stats, report).

Each module exposes an APIRouter included by studylog.app.create_app. Routers
translate HTTP to service calls and service errors to status codes.
"""
