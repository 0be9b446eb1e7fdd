"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Session
  2xxx: Wallet
  6xxx: Payments
  9xxx: System / transport
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Session ---

class InvalidCredentialsError(AppError):
    """401 on a login attempt. Never clears stored credentials."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(1003, message, 401)


class SessionExpiredError(AppError):
    """401 on any other authenticated call. Stored credentials are cleared first."""

    def __init__(self) -> None:
        super().__init__(1006, "Session expired. Please login again.", 401)


# --- 2xxx: Wallet ---

class WalletNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(2002, "Wallet not found for current user", 404)


# --- 6xxx: Payments ---

class PaymentTimeoutError(AppError):
    def __init__(self, payment_id: str, attempts: int) -> None:
        super().__init__(
            6001,
            f"Payment timeout: {payment_id} not settled after {attempts} attempts",
            504,
        )


# --- 9xxx: System ---

class NetworkError(AppError):
    def __init__(self, detail: str = "Network error. Please check your connection.") -> None:
        super().__init__(9003, detail, 503)


class UpstreamError(AppError):
    """Non-2xx response from the remote service (other than 401)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(9004, message, 502)
