from pawhub.api.v1.auth import router as auth_router
from pawhub.api.v1.users import router as user_router

__all__ = ["auth_router", "user_router"]
