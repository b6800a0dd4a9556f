"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Request validation (transport boundary)
  2xxx: Bank account
  9xxx: System / persistence
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


# --- 1xxx: Request validation ---

class RequestValidationFailedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, detail, 400)


# --- 2xxx: Bank account ---

class InvalidAmountError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(2001, message, 400)


class InsufficientFundsError(AppError):
    def __init__(self) -> None:
        super().__init__(
            2002,
            "The amount to be withdrawn cannot be greater than the current balance",
            400,
        )


class BankAccountNotFoundError(AppError):
    def __init__(self, bank_account_id: str) -> None:
        super().__init__(2003, f"Bank account not found: {bank_account_id}", 404)


# --- 9xxx: System ---

class ConflictError(AppError):
    def __init__(self, detail: str | None = None) -> None:
        message = "The error occurred due to a unique constraint violation in the database"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(9001, message, 409)


class PersistenceError(AppError):
    def __init__(self, detail: str = "Database operation failed") -> None:
        super().__init__(9002, detail, 500)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9003, detail, 500)
