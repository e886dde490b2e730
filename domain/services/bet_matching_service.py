"""
Bet matching domain service.

Decides whether a bet wins against an announced draw result.
"""

from dataclasses import dataclass
from itertools import permutations

from domain.models.draw_result import DrawResult


@dataclass(frozen=True)
class MatchOutcome:
    """Outcome of matching one bet against one draw result."""

    won: bool
    matched_number: str | None = None


NO_MATCH = MatchOutcome(won=False)


def digit_permutations(numbers: str) -> set[str]:
    """All distinct digit orderings of numbers ("112" -> {"112", "121", "211"})."""
    return {"".join(p) for p in permutations(numbers)}


class BetMatchingService:
    """
    Pure domain service for bet-type matching rules.

    Each bet type compares the bet's digit string against one winning-number
    field of the draw:
    - straight types require an exact match
    - tod/reverse accept any digit permutation
    - run types accept the single digit anywhere in the field
    """

    def __init__(self):
        self._rules = {
            "THREE_TOP": self._match_three_top,
            "THREE_TOOD": self._match_three_tood,
            "THREE_FRONT": self._match_three_front,
            "THREE_BOTTOM": self._match_three_bottom,
            "THREE_REVERSE": self._match_three_reverse,
            "TWO_TOP": self._match_two_top,
            "TWO_BOTTOM": self._match_two_bottom,
            "RUN_TOP": self._match_run_top,
            "RUN_BOTTOM": self._match_run_bottom,
        }

    def supports(self, bet_type: str) -> bool:
        return bet_type in self._rules

    def match(self, bet_type: str, numbers: str, result: DrawResult) -> MatchOutcome:
        """
        Match a bet against a draw result.

        Raises:
            ValueError: If the bet type has no matching rule
        """
        rule = self._rules.get(bet_type)
        if rule is None:
            raise ValueError(f"No matching rule for bet type {bet_type}")
        return rule(numbers, result)

    @staticmethod
    def _exact(numbers: str, candidates: list[str]) -> MatchOutcome:
        if numbers in candidates:
            return MatchOutcome(won=True, matched_number=numbers)
        return NO_MATCH

    @staticmethod
    def _any_order(numbers: str, candidates: list[str]) -> MatchOutcome:
        wanted = sorted(numbers)
        for candidate in candidates:
            if len(candidate) == len(numbers) and sorted(candidate) == wanted:
                return MatchOutcome(won=True, matched_number=candidate)
        return NO_MATCH

    @staticmethod
    def _contains_digit(numbers: str, digits: str) -> MatchOutcome:
        if numbers and numbers in digits:
            return MatchOutcome(won=True, matched_number=numbers)
        return NO_MATCH

    def _match_three_top(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._exact(numbers, result.three_top_numbers())

    def _match_three_tood(self, numbers: str, result: DrawResult) -> MatchOutcome:
        candidates = result.three_top_numbers() + result.three_bottom_numbers()
        return self._any_order(numbers, candidates)

    def _match_three_front(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._exact(numbers, result.three_front_numbers())

    def _match_three_bottom(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._exact(numbers, result.three_bottom_numbers())

    def _match_three_reverse(self, numbers: str, result: DrawResult) -> MatchOutcome:
        winning = result.three_top_numbers()
        for candidate in sorted(digit_permutations(numbers)):
            if candidate in winning:
                return MatchOutcome(won=True, matched_number=candidate)
        return NO_MATCH

    def _match_two_top(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._exact(numbers, [result.two_top_number()])

    def _match_two_bottom(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._exact(numbers, [result.two_bottom_number()])

    def _match_run_top(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._contains_digit(numbers, result.run_top_digits())

    def _match_run_bottom(self, numbers: str, result: DrawResult) -> MatchOutcome:
        return self._contains_digit(numbers, result.two_bottom_number())
