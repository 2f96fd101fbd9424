from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import api_router
from app.core.config import settings
from app.core.errors import StorageError
from app.core.logging import configure_logging
from app.services.reservations.aggregator import ConflictAggregator
from app.services.reservations.checkout import CheckoutService
from app.services.reservations.coordinator import BookingSubmissionCoordinator
from app.services.reservations.names import RoomNameMatcher
from app.services.reservations.refresh import RefreshScheduler, RoomStatusBoard


def create_app(repository=None, start_scheduler: bool = True) -> FastAPI:
    """Build the API. ``repository`` defaults to the Supabase-backed one."""
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repo = repository
        if repo is None:
            from app.db.repository import ReservationRepository
            from app.db.supabase import get_supabase_client
            repo = ReservationRepository(await get_supabase_client())

        tz = ZoneInfo(settings.TIMEZONE)
        aggregator = ConflictAggregator(repo, tz, RoomNameMatcher(settings.ROOM_NAME_ALIASES))
        board = RoomStatusBoard(aggregator)
        app.state.repository = repo
        app.state.board = board
        app.state.coordinator = BookingSubmissionCoordinator(repo, tz, on_submitted=board.refresh)
        app.state.checkout = CheckoutService(repo, on_checked_out=board.refresh)

        scheduler = RefreshScheduler(board, settings.NOW_REFRESH_SECONDS, settings.FULL_REFRESH_SECONDS)
        if start_scheduler:
            scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        return JSONResponse(status_code=503, content={"detail": exc.message, "retryable": exc.retryable})

    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def read_root():
        return {
            "status": "online",
            "message": "Room reservation engine is running",
            "version": "1.0.0",
        }

    return app


app = create_app()
