# app/core/formatting.py


def format_rupiah(amount: float) -> str:
    """
    Format an amount as Indonesian Rupiah, no fractional digits.

    Examples:
        >>> format_rupiah(50000)
        'Rp 50.000'
        >>> format_rupiah(-1250.6)
        '-Rp 1.251'
    """
    rounded = int(round(abs(amount)))
    grouped = f"{rounded:,}".replace(",", ".")
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}Rp {grouped}"
