from utiltrack.settings import settings


def format_currency(amount: float) -> str:
    """Format an amount with the configured currency: 1234.5 -> '1 234.50 ₴'"""
    formatted = f"{amount:,.2f}".replace(",", " ")
    return f"{formatted} {settings.currency_symbol}"
