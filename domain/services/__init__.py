"""
Domain services containing pure business logic.
"""

from domain.services.bet_matching_service import BetMatchingService, MatchOutcome

__all__ = ["BetMatchingService", "MatchOutcome"]
