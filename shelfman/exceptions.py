"""
Exceptions for Shelfman.

All errors are StockError with a structured code for programmatic handling.
Each failure of the allocation engine has its own subclass so callers can
either catch StockError and switch on ``code``, or catch the specific class.
"""

from typing import Any


class StockError(Exception):
    """
    Structured exception for stock operations.

    Usage:
        try:
            inventory.reserve_smart('SKU1', 6, Channel.POS)
        except StockError as e:
            if e.code == 'APPROVAL_REQUIRED':
                print(f"Autorização necessária para {e.tier}")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'ITEM_NOT_FOUND': 'Item não encontrado',
        'INVALID_ARGUMENT': 'Argumento inválido',
        'INSUFFICIENT_STOCK': 'Quantidade insuficiente no estoque',
        'APPROVAL_REQUIRED': 'Autorização necessária para usar outra área de estoque',
        'CONCURRENT_MODIFICATION': 'Modificação concorrente detectada',
        'TRANSFER_FAILED': 'Transferência entre áreas falhou',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    @property
    def tier(self):
        """Shortcut for data['tier']."""
        return self.data.get('tier')

    @property
    def item_code(self) -> str | None:
        """Shortcut for data['item_code']."""
        return self.data.get('item_code')

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (int, bool, type(None))) else str(v)
                for k, v in self.data.items()
            }
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"


class NotFound(StockError):
    """Item code does not resolve to a known item."""

    def __init__(self, item_code: str, message: str | None = None):
        super().__init__('ITEM_NOT_FOUND', message, item_code=item_code)


class InvalidArgument(StockError):
    """A caller-supplied argument is out of range."""

    def __init__(self, reason: str, message: str | None = None, **data: Any):
        super().__init__('INVALID_ARGUMENT', message or reason, reason=reason, **data)

    @property
    def reason(self) -> str:
        return self.data['reason']


class InsufficientStock(StockError):
    """The tier does not hold enough stock to cover the request."""

    def __init__(self, tier, message: str | None = None, **data: Any):
        super().__init__('INSUFFICIENT_STOCK', message, tier=tier, **data)


class ApprovalRequired(StockError):
    """Fulfilling the request needs a human to authorize using ``tier``."""

    def __init__(self, tier, message: str | None = None, **data: Any):
        super().__init__('APPROVAL_REQUIRED', message, tier=tier, **data)


class ConcurrencyConflict(StockError):
    """Another caller consumed the batch between planning and committing."""

    def __init__(self, batch_id: int, message: str | None = None, **data: Any):
        super().__init__('CONCURRENT_MODIFICATION', message, batch_id=batch_id, **data)

    @property
    def batch_id(self) -> int:
        return self.data['batch_id']


class TransferFailure(StockError):
    """A tier-to-tier transfer could not move any stock."""

    def __init__(self, reason: str, message: str | None = None, **data: Any):
        super().__init__('TRANSFER_FAILED', message or reason, reason=reason, **data)

    @property
    def reason(self) -> str:
        return self.data['reason']
