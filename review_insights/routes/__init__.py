from .analytics_routes import router as analytics_routes
from .auth_routes import router as auth_routes
from .report_routes import router as report_routes
from .review_routes import router as review_routes
from .upload_routes import router as upload_routes

__all__ = [
    "analytics_routes",
    "auth_routes",
    "report_routes",
    "review_routes",
    "upload_routes",
]
