"""
Exceptions for RO Ledger.

All errors are LedgerError with a structured code for programmatic handling.
Subclasses group the codes by kind so callers can catch by type too.
"""

from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            ledger.import_units('p-1', ['SN1'], 'Kho Tổng')
        except LedgerError as e:
            if e.code == 'ALREADY_IN_STOCK':
                print(f"Serial {e.serial} đang tồn kho")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    default_code = 'LEDGER_ERROR'

    _default_messages = {
        'LEDGER_ERROR': 'Lỗi sổ kho',
        # Referential integrity
        'PRODUCT_IN_USE': 'Model đang được sử dụng bởi máy trong hệ thống',
        'WAREHOUSE_IN_USE': 'Kho vẫn còn máy tồn',
        'LAST_WAREHOUSE': 'Phải giữ lại ít nhất một kho',
        # Unit state
        'ALREADY_IN_STOCK': 'Mã serial đang tồn kho',
        'REIMPORT_LIMIT_EXCEEDED': 'Mã serial đã tái nhập một lần, không thể tái nhập tiếp',
        # Selection / input
        'EMPTY_BATCH': 'Danh sách serial trống',
        'UNKNOWN_PRODUCT': 'Model không tồn tại',
        'UNKNOWN_WAREHOUSE': 'Kho không tồn tại',
        'UNKNOWN_CUSTOMER': 'Khách hàng không hợp lệ',
        'UNKNOWN_PLAN': 'Kế hoạch sản xuất không tồn tại',
        'UNKNOWN_SERIAL': 'Mã serial không tồn tại',
        'PRODUCT_MISMATCH': 'Mã serial không thuộc model đã chọn',
        'NOT_IN_STOCK': 'Mã serial không hợp lệ hoặc đã xuất',
        'ALREADY_SCANNED': 'Mã serial đã trong danh sách quét',
        'NOT_IN_PLAN': 'Mã serial không thuộc kế hoạch này',
        'DUPLICATE_ID': 'Mã định danh đã tồn tại',
        'DUPLICATE_NAME': 'Tên kho đã tồn tại',
        'INVALID_FIELD': 'Trường dữ liệu không hợp lệ',
        'INVALID_NAME': 'Tên không được để trống',
        'INVALID_DRAFT_KIND': 'Loại bản nháp không hợp lệ',
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.data:
            details = ', '.join(f'{k}={v}' for k, v in self.data.items())
            return f"[{self.code}] {self.message} ({details})"
        return f"[{self.code}] {self.message}"

    @property
    def serial(self) -> str | None:
        """Shortcut for data['serial']."""
        return self.data.get('serial')

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (str, int, float, bool, type(None), list)) else str(v)
                for k, v in self.data.items()
            }
        }


class ReferentialIntegrityError(LedgerError):
    """Deletion of a catalog entity that units still reference (or the last warehouse)."""

    default_code = 'PRODUCT_IN_USE'


class AlreadyInStock(LedgerError):
    """Import of a serial that is currently on shelf."""

    default_code = 'ALREADY_IN_STOCK'


class ReimportLimitExceeded(LedgerError):
    """Second re-import of a serial. A unit may come back only once."""

    default_code = 'REIMPORT_LIMIT_EXCEEDED'


class InvalidSelection(LedgerError):
    """Empty batch, unknown target or unknown product."""

    default_code = 'EMPTY_BATCH'
