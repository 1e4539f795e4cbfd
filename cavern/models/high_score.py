"""
project: Cavern Explorer
module: high_score.py
License: MIT

High score table shared by the mini-games.
"""
import datetime

from cavern import db


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class HighScore(db.Model):
    """One leaderboard entry.

    Attributes:
        id: Primary key.
        player_name: Display name supplied by the client.
        score: Points scored.
        achieved_at: Server-assigned UTC timestamp (naive, UTC).
    """

    __tablename__ = "high_scores"
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(80), nullable=False)
    score = db.Column(db.Integer, nullable=False, index=True)
    achieved_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "playerName": self.player_name,
            "score": self.score,
            "achievedAt": self.achieved_at.isoformat() + "Z" if self.achieved_at else None,
        }

    def __repr__(self):
        return f"<HighScore {self.id} {self.player_name}={self.score}>"
