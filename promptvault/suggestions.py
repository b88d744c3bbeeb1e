"""
Suggestion hook for promptvault.

A suggester is any callable that takes prompt text and returns improvement
suggestions. None is bundled; callers plug in their own service.
"""
from typing import Callable, List, Sequence

Suggester = Callable[[str], Sequence[str]]


def normalize_suggestions(suggestions: Sequence[str]) -> List[str]:
    """Strip suggestions and drop blanks and repeats, keeping order."""
    cleaned: List[str] = []
    for suggestion in suggestions:
        text = suggestion.strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned
