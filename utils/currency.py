from decimal import Decimal


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount as currency string, e.g. '$1,234.56' or '-$12.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_magnitude(amount: Decimal, symbol: str = "$") -> str:
    """Format without sign; the caller conveys direction by color."""
    return f"{symbol}{abs(amount):,.2f}"


def signed_amount(magnitude: Decimal, is_expense: bool) -> Decimal:
    """Apply the expense/income toggle to a positive magnitude."""
    return -magnitude if is_expense else magnitude
