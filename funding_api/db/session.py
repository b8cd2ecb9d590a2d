import ssl

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession

from funding_api.core.config import get_settings

settings = get_settings()


def _connect_args() -> dict:
    if not settings.database_ssl:
        return {}
    # Hosted Postgres (Supabase) presents certificates we do not pin
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return {"ssl": context}


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
    connect_args=_connect_args(),
)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session
