"""Prometheus metrics for project saves and region resolution"""

from prometheus_client import Counter


# Project save pipeline metrics
project_saves_total = Counter(
    'project_saves_total',
    'Total number of project save attempts',
    ['outcome']  # saved, invalid, aborted
)

# Region resolution metrics
region_resolutions_total = Counter(
    'region_resolutions_total',
    'Total number of region resolutions',
    ['outcome']  # matched, unmatched, failed
)


def record_project_save(outcome: str) -> None:
    """Count a project save attempt by outcome"""
    project_saves_total.labels(outcome=outcome).inc()


def record_region_resolution(outcome: str) -> None:
    """Count a region resolution by outcome"""
    region_resolutions_total.labels(outcome=outcome).inc()
