from .leaderboard import ContributorActivity, LeaderboardEntry

__all__ = [
    "ContributorActivity",
    "LeaderboardEntry",
]
