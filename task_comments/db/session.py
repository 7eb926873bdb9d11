from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def make_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # aiosqlite runs each connection on its own thread
        connect_args["check_same_thread"] = False
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
