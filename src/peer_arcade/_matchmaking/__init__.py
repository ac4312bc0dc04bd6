# Area: Matchmaking
"""Pairing of searchers on the shared matchmaking topic."""

from .pairing import MatchmakingSession, MatchResult, PairingDecision, decide_pairing

__all__ = ["MatchResult", "MatchmakingSession", "PairingDecision", "decide_pairing"]
