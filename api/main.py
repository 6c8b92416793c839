from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant import router as assistant_router
from auth import router as auth_router
from core import db, errors, settings
from core.logging import configure_logging
from places import router as places_router
from users import router as users_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    configure_logging()
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.register_exception_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(places_router.router, tags=["places"])
app.include_router(users_router.router, tags=["users"])
app.include_router(assistant_router.router, tags=["assistant"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "travel-mate api"}
