"""Exceptions and warnings raised by the estimators."""
from __future__ import annotations


class DegenerateInputError(ValueError):
    """The observations cannot support a straight-line fit.

    Raised for fewer than three observations or a singular design matrix
    (e.g. every Ndfa value identical).
    """


class DivisionByZeroError(ZeroDivisionError):
    """The fitted slope is numerically zero, so theta is undefined.

    A horizontal balance line never crosses zero; this is distinct from a
    large but finite theta.
    """


class FailedConvergenceWarning(UserWarning):
    """MCMC diagnostics (R-hat / ESS) are outside their thresholds."""
