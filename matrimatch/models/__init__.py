from matrimatch.models.match import UserMatch, MatchStatus, MatchAction, MatchType

__all__ = [
    "UserMatch",
    "MatchStatus",
    "MatchAction",
    "MatchType",
]
