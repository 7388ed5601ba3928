"""Dependency injection singletons for Logo Forge."""

from logo_forge.accounts.service import AccountService
from logo_forge.common.config import get_settings
from logo_forge.common.database import DatabaseManager
from logo_forge.generation.dispatcher import GenerationDispatcher
from logo_forge.generation.provider import GeminiImageClient
from logo_forge.generation.storage import ImageStore
from logo_forge.generation.upscale import ReplicateUpscaler
from logo_forge.history.service import HistoryService
from logo_forge.logos.service import LogoService
from logo_forge.payments.service import PaymentService
from logo_forge.usage.ledger import DatabaseUsageLedger, InMemoryUsageLedger, UsageLedger
from logo_forge.usage.service import UsageService

_db: DatabaseManager | None = None
_logos: LogoService | None = None
_accounts: AccountService | None = None
_payments: PaymentService | None = None
_gemini: GeminiImageClient | None = None
_store: ImageStore | None = None
_dispatcher: GenerationDispatcher | None = None
_memory_ledger: InMemoryUsageLedger | None = None
_database_ledger: DatabaseUsageLedger | None = None
_upscaler: ReplicateUpscaler | None = None
_history: HistoryService | None = None
_usage: UsageService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_logo_service() -> LogoService:
    global _logos
    if _logos is None:
        _logos = LogoService()
    return _logos


def get_account_service() -> AccountService:
    global _accounts
    if _accounts is None:
        _accounts = AccountService(get_settings(), logo_service=get_logo_service())
    return _accounts


def get_history_service() -> HistoryService:
    global _history
    if _history is None:
        _history = HistoryService()
    return _history


def get_payment_service() -> PaymentService:
    global _payments
    if _payments is None:
        _payments = PaymentService(get_settings(), get_account_service())
    return _payments


def get_gemini_client() -> GeminiImageClient:
    global _gemini
    if _gemini is None:
        settings = get_settings()
        _gemini = GeminiImageClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.generation_timeout,
        )
    return _gemini


def get_image_store() -> ImageStore:
    global _store
    if _store is None:
        settings = get_settings()
        _store = ImageStore(
            settings.images_dir,
            settings.public_base_url,
            inline=settings.inline_images,
        )
    return _store


def get_dispatcher() -> GenerationDispatcher:
    global _dispatcher
    if _dispatcher is None:
        settings = get_settings()
        _dispatcher = GenerationDispatcher(
            get_gemini_client(),
            get_image_store(),
            timeout=settings.generation_timeout,
            max_prompts=settings.max_prompts,
        )
    return _dispatcher


def get_upscaler() -> ReplicateUpscaler:
    global _upscaler
    if _upscaler is None:
        settings = get_settings()
        _upscaler = ReplicateUpscaler(
            api_token=settings.replicate_api_token,
            model=settings.upscale_model,
            timeout=settings.upscale_timeout,
        )
    return _upscaler


def get_ledger(backend: str) -> UsageLedger:
    """Shared ledger instance for a configured backend name."""
    global _memory_ledger, _database_ledger
    if backend == "memory":
        if _memory_ledger is None:
            _memory_ledger = InMemoryUsageLedger()
        return _memory_ledger
    if backend == "database":
        if _database_ledger is None:
            _database_ledger = DatabaseUsageLedger(get_db())
        return _database_ledger
    raise ValueError(f"Unknown ledger backend: {backend!r}")


def get_usage_service() -> UsageService:
    global _usage
    if _usage is None:
        settings = get_settings()
        _usage = UsageService(
            settings,
            get_db(),
            get_account_service(),
            get_dispatcher(),
            anonymous_ledger=get_ledger(settings.anonymous_ledger),
            account_ledger=get_ledger(settings.account_ledger),
            history=get_history_service(),
        )
    return _usage


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _logos, _accounts, _payments, _gemini, _store, _dispatcher
    global _memory_ledger, _database_ledger, _upscaler, _history, _usage
    _db = None
    _logos = None
    _accounts = None
    _payments = None
    _gemini = None
    _store = None
    _dispatcher = None
    _memory_ledger = None
    _database_ledger = None
    _upscaler = None
    _history = None
    _usage = None
