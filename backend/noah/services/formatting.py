from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP

SYP_SUFFIX = 'ل.س'


def format_currency(amount, currency: str = 'USD') -> str:
    """Whole-unit display string: USD as `$1,235`, SYP as `1,235 ل.س`."""
    whole = int(Decimal(str(amount or 0)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    digits = f'{abs(whole):,}'
    sign = '-' if whole < 0 else ''
    if currency == 'SYP':
        return f'{sign}{digits} {SYP_SUFFIX}'
    if currency == 'USD':
        return f'{sign}${digits}'
    return f'{sign}{digits} {currency}'


__all__ = ['format_currency']
