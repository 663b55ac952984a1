from photogallery.web.routers.auth import router as auth_router
from photogallery.web.routers.comments import router as comments_router
from photogallery.web.routers.likes import router as likes_router
from photogallery.web.routers.photos import api_router as photos_api_router
from photogallery.web.routers.photos import router as photos_router
from photogallery.web.routers.upload import router as upload_router

__all__ = [
    "auth_router",
    "comments_router",
    "likes_router",
    "photos_api_router",
    "photos_router",
    "upload_router",
]
