from app.routes.analytics import router as analytics_router

__all__ = ["analytics_router"]
