"""
Fuzzy catalog filter.

Case-insensitive subsequence matching over "Label(ApiName)" strings.
Consecutive matched characters score progressively higher, so tight
matches rank above scattered ones. Ties keep catalog order.
"""

from typing import List, Optional, Tuple

from bypass_perm.models.catalog import Choice, SObjectDescription


def match(pattern: str, text: str) -> Optional[Tuple[int, List[Tuple[bool, str]]]]:
    """Score text against pattern; None when pattern is not a subsequence of text."""
    needle = pattern.lower()
    pattern_idx = 0
    current = 0
    total = 0
    runs: List[Tuple[bool, str]] = []

    for ch in text:
        hit = pattern_idx < len(needle) and ch.lower() == needle[pattern_idx]
        if hit:
            pattern_idx += 1
            current += 1 + current
        else:
            current = 0
        total += current

        if runs and runs[-1][0] == hit:
            runs[-1] = (hit, runs[-1][1] + ch)
        else:
            runs.append((hit, ch))

    if pattern_idx != len(needle):
        return None
    return total, runs


def fuzzy_filter(query: str, catalog: List[SObjectDescription]) -> List[Choice]:
    """Rank catalog entries matching query, best first."""
    query = (query or "").strip()
    ranked = []
    for index, sobject in enumerate(catalog):
        result = match(query, sobject.display)
        if result is None:
            continue
        score, runs = result
        ranked.append((-score, index, Choice(
            display=sobject.display,
            value=sobject.name,
            score=score,
            highlighted=runs,
        )))
    ranked.sort(key=lambda item: (item[0], item[1]))
    return [choice for _, _, choice in ranked]
