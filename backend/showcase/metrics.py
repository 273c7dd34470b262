from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

REQUESTS_TOTAL = Counter(
    "requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
BOOTSTRAP_RUNS_TOTAL = Counter(
    "bootstrap_runs_total",
    "Database bootstrap runs by outcome",
    ["outcome"],
)
PROJECTS_CREATED_TOTAL = Counter("projects_created_total", "Projects created through the API")


__all__ = [
    "CONTENT_TYPE_LATEST",
    "REQUESTS_TOTAL",
    "BOOTSTRAP_RUNS_TOTAL",
    "PROJECTS_CREATED_TOTAL",
    "generate_latest",
]
