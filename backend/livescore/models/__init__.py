"""Models package — re-export all ORM classes for metadata discovery."""
from livescore.models.venue import Venue  # noqa: F401
from livescore.models.review import Review  # noqa: F401
from livescore.models.social_signal import SocialSignal  # noqa: F401
from livescore.models.score_history import ScoreHistory  # noqa: F401
