from spotbnb.models.users import User
from spotbnb.models.spots import Spot, SpotImage
from spotbnb.models.reviews import Review, ReviewImage

__all__ = ["User", "Spot", "SpotImage", "Review", "ReviewImage"]
