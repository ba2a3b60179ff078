"""Application configuration, read from CHESS_LEDGER_* environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, Field

ENV_PREFIX = "CHESS_LEDGER_"


class LedgerConfig(BaseModel):
    database_url: str = "sqlite:///chessledger.db"
    database_echo: bool = False
    log_level: str = "INFO"

    page_size: int = Field(default=25, gt=0)

    # Elo
    default_rating: int = 1200
    elo_k: int = Field(default=32, gt=0)
    elo_scale: int = Field(default=400, gt=0)
    rating_floor: int = Field(default=100, ge=0)

    # Does declining a draw offer use up the decliner's turn?
    decline_draw_passes_turn: bool = False

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "LedgerConfig":
        """Only the variables that are set override the defaults. Pydantic takes care of the type coercion."""
        environ = os.environ if environ is None else environ
        overrides = {
            name: environ[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in environ
        }
        return cls.model_validate(overrides)


@lru_cache
def get_config() -> LedgerConfig:
    return LedgerConfig.from_env()
