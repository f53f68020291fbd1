from __future__ import annotations

import math
from typing import Tuple


def format_interval(interval: Tuple[float, float], digits: int = 4) -> str:
    """Format a (low, high) pair as ``[low, high]``."""
    lo, hi = interval
    return f"[{float(lo):.{digits}g}, {float(hi):.{digits}g}]"


def format_uncertainty(value: float, err: float) -> str:
    """Format ``value +/- err`` in parenthesis notation, e.g. ``41.84(15)``.

    The uncertainty keeps two significant digits when its leading digit is 1
    and one otherwise; the value is rounded to the same decimal place. The
    shorter of the plain and the exponent form (``1.23(2)e4``) is returned.
    """
    value = float(value)
    err = abs(float(err))
    if math.isnan(value) or math.isnan(err):
        return "NaN"
    if math.isinf(value) or math.isinf(err):
        return "inf"
    if err == 0.0:
        return f"{value:g}(0)"

    err_exp = int(math.floor(math.log10(err)))
    sig = 2 if int(err / 10.0**err_exp + 1e-12) == 1 else 1
    last = err_exp - sig + 1  # decimal exponent of the last digit shown
    digits = round(err / 10.0**last)
    if digits >= 10**sig:
        # e.g. 0.096 rounds up to one more digit than it has
        last += 1
        digits = round(err / 10.0**last)

    if last < 0:
        plain = f"{value:.{-last}f}({digits})"
    else:
        plain = f"{round(value / 10.0**last) * 10.0**last:.0f}({digits * 10**last})"

    if value == 0.0 or abs(value) < err:
        exp = err_exp
    else:
        exp = int(math.floor(math.log10(abs(value))))
    exp = max(exp, last)
    scientific = f"{value / 10.0**exp:.{exp - last}f}({digits})e{exp}"

    return plain if len(plain) <= len(scientific) else scientific
