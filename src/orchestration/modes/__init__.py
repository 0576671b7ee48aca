"""Orchestration mode implementations.

Modes:
- consensus: All models in parallel → results in request order
- cooperative: Models in sequence, each seeing prior outputs
"""

from src.orchestration.modes.consensus import ConsensusMode
from src.orchestration.modes.cooperative import CooperativeMode, build_cooperative_prompt


__all__: list[str] = [
    "ConsensusMode",
    "CooperativeMode",
    "build_cooperative_prompt",
]
