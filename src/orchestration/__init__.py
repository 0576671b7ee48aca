"""Multi-model orchestration for orchestration-service.

Modules:
- orchestrator: Main Orchestrator class
- classifier: Raw response → StructuredModelResult
- merge: Structured results → MergedResult
- invocation: Single timed model call
- schema: Optional typed parse of the merged text
- modes/: Consensus and cooperative fanout
"""

__all__: list[str] = []
