"""orchestration-service: Multi-model inference orchestration and merge.

This package fans one prompt out to several models, classifies each
response and merges them into a single answer (consensus or cooperative).
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
