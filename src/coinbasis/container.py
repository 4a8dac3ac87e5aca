from dependency_injector import containers, providers

from coinbasis.config import Settings
from coinbasis.db.session import build_engine, build_session_factory


class Container(containers.DeclarativeContainer):
    """Process-wide resources for the API. Workers build their own engine per task."""

    wiring_config = containers.WiringConfiguration(modules=["coinbasis.api.deps"])

    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.db_echo,
        pool_size=settings.provided.db_pool_size,
    )

    session_factory = providers.Singleton(build_session_factory, engine=engine)
