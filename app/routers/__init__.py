from .course import router as course_router
from .educator import router as educator_router
from .user import router as user_router
from .webhooks import router as webhooks_router

routes = [
    educator_router,
    course_router,
    user_router,
    webhooks_router,
]
