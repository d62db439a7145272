"""Model specifications package for claudesub"""

from .specifications import ModelSpec, CLAUDESUB_MODELS, DEFAULT_CLAUDESUB_MODEL

__all__ = [
    "ModelSpec",
    "CLAUDESUB_MODELS",
    "DEFAULT_CLAUDESUB_MODEL",
]
