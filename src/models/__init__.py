"""Request, response and domain models for orchestration-service.

Modules:
- requests: JobRequest, Strategy
- responses: StructuredModelResult, MergedResult, JobTimings, JobResponse
"""

__all__: list[str] = []
