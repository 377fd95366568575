from app.models.subscription import Subscription
from app.models.user import User

__all__ = [
    "Subscription",
    "User",
]
