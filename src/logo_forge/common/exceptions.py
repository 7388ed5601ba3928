"""Logo Forge exception hierarchy."""


class LogoForgeError(Exception):
    """Base exception for all Logo Forge errors."""

    def __init__(self, message: str = "", code: str = "LOGO_FORGE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidRequestError(LogoForgeError):
    """Raised when a request is malformed (e.g. empty or oversized prompt batch)."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, code="INVALID_REQUEST")


class QuotaExceededError(LogoForgeError):
    """Raised when a caller has no generation rounds left in the current period."""

    def __init__(
        self,
        message: str = "Generation limit reached",
        total: int = 0,
        used: int = 0,
    ):
        self.total = total
        self.used = used
        super().__init__(message, code="QUOTA_EXCEEDED")


class LedgerPersistenceError(LogoForgeError):
    """Raised when usage could not be read from or written to durable storage."""

    def __init__(self, message: str = "Usage could not be recorded"):
        super().__init__(message, code="LEDGER_UNAVAILABLE")


class GenerationUpstreamError(LogoForgeError):
    """Raised when the image provider fails for a single prompt."""

    def __init__(self, message: str = "Image generation failed", status: int | None = None):
        self.status = status
        super().__init__(message, code="UPSTREAM_FAILURE")

    @property
    def reason(self) -> str:
        """Placeholder caption key for this failure."""
        return "quota-exceeded" if self.status == 429 else "api-error"


class AuthenticationRequiredError(LogoForgeError):
    """Raised when an account-only operation is called anonymously."""

    def __init__(self, message: str = "Sign in required"):
        super().__init__(message, code="AUTH_REQUIRED")


class UserNotFoundError(LogoForgeError):
    """Raised when a user cannot be found in the database."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="NOT_FOUND")


class LogoNotFoundError(LogoForgeError):
    """Raised when a saved logo does not exist or belongs to someone else."""

    def __init__(self, message: str = "Logo not found"):
        super().__init__(message, code="NOT_FOUND")


class PaymentProviderError(LogoForgeError):
    """Raised when the payment provider is unavailable or rejects a call."""

    def __init__(self, message: str = "Payment provider error", configured: bool = True):
        self.configured = configured
        super().__init__(message, code="PAYMENT_PROVIDER")


class PremiumRequiredError(LogoForgeError):
    """Raised when a premium-only operation is called by a non-premium caller."""

    def __init__(self, message: str = "Unlimited access required"):
        super().__init__(message, code="PREMIUM_REQUIRED")


class UpscaleProviderError(LogoForgeError):
    """Raised when the upscaling provider is unavailable or rejects a call."""

    def __init__(
        self,
        message: str = "Upscaling failed",
        status: int | None = None,
        configured: bool = True,
    ):
        self.status = status
        self.configured = configured
        super().__init__(message, code="UPSCALE_PROVIDER")


STATUS_BY_CODE = {
    "INVALID_REQUEST": 400,
    "AUTH_REQUIRED": 401,
    "PREMIUM_REQUIRED": 403,
    "NOT_FOUND": 404,
    "QUOTA_EXCEEDED": 429,
    "PAYMENT_PROVIDER": 502,
    "UPSCALE_PROVIDER": 502,
    "LEDGER_UNAVAILABLE": 503,
}


def status_for(error: LogoForgeError) -> int:
    """HTTP status for a domain error."""
    if isinstance(error, (PaymentProviderError, UpscaleProviderError)) and not error.configured:
        return 503
    if isinstance(error, UpscaleProviderError) and error.status == 429:
        return 429
    return STATUS_BY_CODE.get(error.code, 500)
