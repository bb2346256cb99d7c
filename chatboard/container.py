"""
Dependency injection container for ChatBoard.

The container owns every stateful component (database, store, registry,
limiter, counters) so nothing lives in module globals. The lifespan builds one
container per application and stores it on ``app.state.container``.

USAGE:
    container = ApplicationContainer()
    await container.initialize()
    app.state.container = container

    # In tests, with an in-memory store and no database:
    container = ApplicationContainer(config=config, store=FakeChatStore())
"""

import asyncio

from .auth.accounts import AccountService
from .auth.argon2_utils import create_hasher
from .config import get_config
from .config.models import AppConfig
from .database import DatabaseManager
from .persistence.chat_store import ChatStore
from .persistence.protocols import ChatStoreProtocol
from .realtime.board_pipeline import BoardMutationPipeline
from .realtime.envelope import EventSequencer
from .realtime.event_router import EventRouter
from .realtime.message_broadcaster import BroadcastFanout
from .realtime.message_validator import WebSocketMessageValidator
from .realtime.monitoring import MonitoringCounters
from .realtime.presence_broadcaster import PresenceBroadcaster
from .realtime.rate_limiter import RateLimiter
from .realtime.session_registry import SessionRegistry
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ApplicationContainer:
    """
    Holds the application's services and their lifecycle.

    Services are created in initialize(), not in __init__, so a container can
    be built without side effects.
    """

    def __init__(self, config: AppConfig | None = None, store: ChatStoreProtocol | None = None) -> None:
        self.config: AppConfig = config or get_config()

        # Persistence
        self.database_manager: DatabaseManager | None = None
        self.store: ChatStoreProtocol | None = store

        # Accounts
        self.accounts: AccountService | None = None

        # Realtime
        self.registry: SessionRegistry | None = None
        self.fanout: BroadcastFanout | None = None
        self.presence: PresenceBroadcaster | None = None
        self.rate_limiter: RateLimiter | None = None
        self.counters: MonitoringCounters | None = None
        self.board: BoardMutationPipeline | None = None
        self.router: EventRouter | None = None
        self.validator: WebSocketMessageValidator | None = None

        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Create the database schema and wire every service.

        Safe to call more than once; later calls return immediately.

        Raises:
            DatabaseError: If the schema cannot be created
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing application container", **self.config.summary())

            if self.store is None:
                self.database_manager = DatabaseManager(self.config.database.url, echo=self.config.database.echo)
                await self.database_manager.create_tables()
                self.store = ChatStore(self.database_manager.session_maker)

            auth = self.config.auth
            hasher = create_hasher(
                time_cost=auth.argon2_time_cost,
                memory_cost=auth.argon2_memory_cost,
                parallelism=auth.argon2_parallelism,
            )
            self.accounts = AccountService(self.store, hasher, min_password_length=auth.min_password_length)

            self._initialize_realtime(self.store)
            self._initialized = True
            logger.info("Application container initialized")

    def _initialize_realtime(self, store: ChatStoreProtocol) -> None:
        chat = self.config.chat
        assert self.accounts is not None

        self.registry = SessionRegistry()
        self.fanout = BroadcastFanout(self.registry, EventSequencer())
        self.presence = PresenceBroadcaster(self.registry, self.fanout)
        self.presence.attach()
        self.rate_limiter = RateLimiter(
            window_ms=chat.rate_limit_window_ms,
            max_messages=chat.rate_limit_max_messages,
        )
        self.counters = MonitoringCounters()
        self.board = BoardMutationPipeline(store, self.fanout, max_length=chat.max_content_length)
        self.validator = WebSocketMessageValidator(max_message_size=chat.max_frame_size)
        self.router = EventRouter(
            accounts=self.accounts,
            store=store,
            registry=self.registry,
            fanout=self.fanout,
            presence=self.presence,
            rate_limiter=self.rate_limiter,
            board=self.board,
            counters=self.counters,
            history_limit=chat.history_limit,
            max_content_length=chat.max_content_length,
        )

    async def shutdown(self) -> None:
        """Close open sessions and dispose of the database engine."""
        logger.info("Shutting down application container")
        if self.registry is not None:
            for session in self.registry.sessions():
                session.close()
        if self.database_manager is not None:
            await self.database_manager.dispose()
            self.database_manager = None
        self._initialized = False
        logger.info("Application container shutdown complete")
