"""Model specifications for the Claude subscription provider"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List


@dataclass(frozen=True)
class ModelSpec:
    id: str
    name: str
    context_window: int
    default_max_tokens: int
    can_reason: bool = False
    has_reasoning_effort: bool = False
    default_reasoning_effort: str = ""
    supports_images: bool = True
    cost_per_1m_in: float = 0.0
    cost_per_1m_out: float = 0.0
    cost_per_1m_in_cached: float = 0.0
    cost_per_1m_out_cached: float = 0.0

    def as_subscription_model(self) -> ModelSpec:
        """Copy with zero per-token cost, usage is covered by the subscription"""
        return replace(
            self,
            cost_per_1m_in=0.0,
            cost_per_1m_out=0.0,
            cost_per_1m_in_cached=0.0,
            cost_per_1m_out_cached=0.0,
        )


CLAUDESUB_MODELS: List[ModelSpec] = [
    ModelSpec(
        id="claude-opus-4-1-20250805",
        name="Claude Opus 4.1",
        context_window=200_000,
        default_max_tokens=32_000,
        can_reason=True,
        has_reasoning_effort=True,
    ),
    ModelSpec(
        id="claude-opus-4-20250514",
        name="Claude Opus 4",
        context_window=200_000,
        default_max_tokens=32_000,
        can_reason=True,
        has_reasoning_effort=True,
    ),
    ModelSpec(
        id="claude-sonnet-4-20250514",
        name="Claude Sonnet 4",
        context_window=200_000,
        default_max_tokens=8_192,
        can_reason=True,
        has_reasoning_effort=True,
        default_reasoning_effort="medium",
    ),
    ModelSpec(
        id="claude-3-7-sonnet-20250219",
        name="Claude 3.7 Sonnet",
        context_window=200_000,
        default_max_tokens=8_192,
        can_reason=True,
        has_reasoning_effort=True,
        default_reasoning_effort="medium",
    ),
    ModelSpec(
        id="claude-3-5-sonnet-20241022",
        name="Claude 3.5 Sonnet (New)",
        context_window=200_000,
        default_max_tokens=8_192,
        can_reason=True,
        has_reasoning_effort=True,
        default_reasoning_effort="medium",
    ),
    ModelSpec(
        id="claude-3-5-haiku-20241022",
        name="Claude 3.5 Haiku",
        context_window=200_000,
        default_max_tokens=5_000,
    ),
]

DEFAULT_CLAUDESUB_MODEL = "claude-sonnet-4-20250514"
