"""Services for orchestration-service.

Services:
- queue_manager: Bounded pool for concurrent model calls
"""

__all__: list[str] = []
