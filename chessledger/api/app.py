"""
Chess ledger API.

Run with: uvicorn chessledger.api.app:app
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from chessledger.api.router import router
from chessledger.core.config import get_config
from chessledger.core.exceptions import (
    CannotPlaySelfError,
    GameError,
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    InvalidRequestError,
    NotYourChallengeError,
    NotYourTurnError,
    RepositoryError,
)

logger = logging.getLogger(__name__)

# first match wins: subclasses go before their parents
ERROR_STATUS_CODES: list[tuple[type[GameError], int]] = [
    (RepositoryError, status.HTTP_404_NOT_FOUND),
    (NotYourChallengeError, status.HTTP_403_FORBIDDEN),
    (NotYourTurnError, status.HTTP_403_FORBIDDEN),
    (CannotPlaySelfError, status.HTTP_400_BAD_REQUEST),
    (GameStateError, status.HTTP_400_BAD_REQUEST),
    (IllegalMoveError, status.HTTP_400_BAD_REQUEST),
    (InvalidFENError, status.HTTP_400_BAD_REQUEST),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
]


def status_code_for(exc: GameError) -> int:
    return next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(exc),
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def create_app() -> FastAPI:
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title="Chess Ledger API")
    app.include_router(router)
    app.add_exception_handler(GameError, game_error_handler)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("chess ledger API ready (database=%s)", config.database_url)
    return app


app = create_app()
