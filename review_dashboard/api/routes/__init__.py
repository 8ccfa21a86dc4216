from review_dashboard.api.routes.reviews import router as reviews_router
from review_dashboard.api.routes.properties import router as properties_router

__all__ = [
    "reviews_router",
    "properties_router",
]
