"""
Keyword-tier relevance scoring.

Every keyword found in ``title + " " + content`` adds its tier weight; the
sum is clamped to 100. Matching is plain case-insensitive substring
containment, so a text hitting keywords from several tiers accumulates all
of them.
"""

from __future__ import annotations

from dataclasses import dataclass


MAX_SCORE = 100


@dataclass(frozen=True)
class Tier:
    name: str
    weight: int
    keywords: tuple[str, ...]


DEFAULT_TIERS: tuple[Tier, ...] = (
    Tier(
        "highest",
        50,
        (
            "claude code",
            "claude-code",
            "claude cli",
            "anthropic cli",
            "claude terminal",
            "@anthropic/claude-code",
        ),
    ),
    Tier(
        "high",
        30,
        (
            "claude agent",
            "claude mcp",
            "model context protocol",
            "claude sdk",
            "claude desktop",
            "claude computer use",
        ),
    ),
    Tier(
        "medium",
        15,
        (
            "claude 3",
            "claude api",
            "anthropic api",
            "claude sonnet",
            "claude opus",
            "claude haiku",
            "claude 3.5",
        ),
    ),
    Tier("low", 5, ("claude", "anthropic", "ai coding", "llm coding", "ai assistant")),
)


def score(title: str, content: str = "", tiers: tuple[Tier, ...] = DEFAULT_TIERS) -> int:
    """Score a title/content pair against the keyword tiers.

    Args:
        title: Item headline
        content: Item description or snippet
        tiers: Keyword tiers; defaults to the built-in topic taxonomy

    Returns:
        Integer relevance in [0, 100]
    """
    text = f"{title or ''} {content or ''}".lower()
    total = 0
    for tier in tiers:
        for keyword in tier.keywords:
            if keyword.lower() in text:
                total += tier.weight
    return max(0, min(total, MAX_SCORE))
