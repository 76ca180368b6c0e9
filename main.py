import logging
import os
from contextlib import asynccontextmanager

import firebase_admin
from fastapi import FastAPI
from firebase_admin import credentials
from starlette.middleware.cors import CORSMiddleware

from config import Settings, get_settings
from routes.posts import router as posts_router
from services.kv_map import FirestoreMap, InMemoryMap, PostMap
from services.posts import PostStore

settings = get_settings()

logging.basicConfig(level=settings.log_level,
                    format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def init_firebase(settings: Settings):
    """Initialize Firebase Admin SDK when a service account file is available"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # default app not initialized yet
    if not os.path.exists(settings.firebase_credentials):
        logger.warning("Firebase credentials not found at %s; token verification is unavailable",
                       settings.firebase_credentials)
        return None
    cred = credentials.Certificate(settings.firebase_credentials)
    return firebase_admin.initialize_app(cred)


def build_post_map(settings: Settings, firebase_app) -> PostMap:
    if settings.backend == "firestore":
        if firebase_app is None:
            raise RuntimeError("POST_STORE_BACKEND=firestore requires FIREBASE_CREDENTIALS")
        return FirestoreMap(firebase_app, collection=settings.posts_collection)
    if settings.backend != "memory":
        raise RuntimeError(f"Unknown POST_STORE_BACKEND: {settings.backend}")
    return InMemoryMap()


@asynccontextmanager
async def lifespan(app: FastAPI):
    firebase_app = init_firebase(settings)
    post_map = build_post_map(settings, firebase_app)

    app.state.post_store = PostStore(post_map, empty_results_as_error=settings.empty_results_as_error)
    logger.info("Post store ready (backend=%s)", settings.backend)

    yield


app = FastAPI(lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(posts_router, prefix="/posts", tags=["posts"])
