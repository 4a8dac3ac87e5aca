from datetime import timedelta
from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "coinbasis"
    db_echo: bool = False
    db_pool_size: int = 5
    redis_url: str = "redis://localhost:6379/0"
    debug: bool = False

    # Transfer matching
    transfer_time_window_seconds: int = Field(3600, gt=0)  # +/- around the withdrawal
    transfer_amount_tolerance: Decimal = Field(Decimal("0.0001"), ge=0)  # relative to the mean amount

    default_cost_basis_method: str = "FIFO"

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def transfer_time_window(self) -> timedelta:
        return timedelta(seconds=self.transfer_time_window_seconds)

    class Config:
        env_file = ".env"
        env_prefix = "COINBASIS_"


settings = Settings()
