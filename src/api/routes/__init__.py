"""API route handlers for orchestration-service.

Routes:
- jobs: POST /run
- health: /health, /health/ready
"""

__all__: list[str] = []
