"""
Selection collaborators — how the operator picks automation kinds and sObjects.

The pipeline only sees the Selector protocol. InteractiveSelector drives
questionary prompts; StaticSelector replays values supplied up front.
"""

import logging
from typing import Any, List, Protocol

import questionary

from bypass_perm.models.catalog import Choice, Selection, SObjectDescription
from bypass_perm.models.permission import AutomationKind
from bypass_perm.selection.fuzzy import fuzzy_filter

logger = logging.getLogger(__name__)

HIGHLIGHT_STYLE = "fg:ansibrightgreen"


class SelectionCancelled(Exception):
    """Raised when the operator aborts a prompt."""
    pass


class Selector(Protocol):
    def filter(self, query: str, catalog: List[SObjectDescription]) -> List[Choice]:
        ...

    def select(self, catalog: List[SObjectDescription]) -> Selection:
        ...


class StaticSelector:
    """Selection fixed in advance (command-line values, API requests, tests)."""

    def __init__(self, kinds: List[AutomationKind], objects: List[str]):
        self.kinds = [AutomationKind(k) for k in kinds]
        self.objects = list(objects)

    def filter(self, query: str, catalog: List[SObjectDescription]) -> List[Choice]:
        return fuzzy_filter(query, catalog)

    def select(self, catalog: List[SObjectDescription]) -> Selection:
        known = {s.name for s in catalog}
        unknown = [o for o in self.objects if known and o not in known]
        if unknown:
            logger.warning("Selected sObjects not found in catalog", extra={"sobjects": unknown})
        return Selection(kinds=self.kinds, objects=self.objects)


class InteractiveSelector:
    """Checkbox prompts with fuzzy narrowing of the sObject catalog."""

    def filter(self, query: str, catalog: List[SObjectDescription]) -> List[Choice]:
        return fuzzy_filter(query, catalog)

    def select(self, catalog: List[SObjectDescription]) -> Selection:
        kinds = self._ask(questionary.checkbox(
            "What automations need a ByPass Custom Permission?",
            choices=[
                questionary.Choice(kind.value, value=kind, checked=True)
                for kind in AutomationKind
            ],
        ))
        objects = self._select_objects(catalog)
        return Selection(kinds=kinds, objects=objects)

    def _select_objects(self, catalog: List[SObjectDescription]) -> List[str]:
        selected: List[str] = []
        while True:
            query = self._ask(questionary.text("Filter objects (blank lists all):"))
            choices = self.filter(query, catalog)
            if not choices:
                questionary.print(f"No object matches '{query}'", style="fg:ansiyellow")
            else:
                picked = self._ask(questionary.checkbox(
                    "What objects need a ByPass Custom Permission?",
                    choices=[self._to_question_choice(c, c.value in selected) for c in choices],
                ))
                shown = {c.value for c in choices}
                selected = [s for s in selected if s not in shown] + picked
            if not self._ask(questionary.confirm("Search for more objects?", default=False)):
                return selected

    @staticmethod
    def _to_question_choice(choice: Choice, checked: bool) -> questionary.Choice:
        title = [(HIGHLIGHT_STYLE if hit else "", text) for hit, text in choice.highlighted]
        return questionary.Choice(title=title, value=choice.value, checked=checked)

    @staticmethod
    def _ask(question: questionary.Question) -> Any:
        answer = question.ask()
        if answer is None:
            raise SelectionCancelled("Selection aborted")
        return answer
