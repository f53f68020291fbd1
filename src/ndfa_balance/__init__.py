"""ndfa_balance public API."""
import logging

from .bayes import BayesianEstimate, SamplerOptions, bayesian_theta
from .bootstrap import BootstrapEstimate, BootstrapOptions, bootstrap_theta
from .delta import DeltaEstimate, delta_method
from .errors import DegenerateInputError, DivisionByZeroError, FailedConvergenceWarning
from .inputs import NDFA, PARTIAL_BALANCE, TOTAL_BALANCE, Observations
from .pipeline import BalancePipeline, BalanceResult, analyse_balances, run_balance
from .priors import PriorSpec, get_priors
from .ratio import theta_from_coefficients, theta_from_fit
from .regression import LinearFit, fit_linear

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BalancePipeline",
    "BalanceResult",
    "BayesianEstimate",
    "BootstrapEstimate",
    "BootstrapOptions",
    "DegenerateInputError",
    "DeltaEstimate",
    "DivisionByZeroError",
    "FailedConvergenceWarning",
    "LinearFit",
    "NDFA",
    "Observations",
    "PARTIAL_BALANCE",
    "PriorSpec",
    "SamplerOptions",
    "TOTAL_BALANCE",
    "analyse_balances",
    "bayesian_theta",
    "bootstrap_theta",
    "delta_method",
    "fit_linear",
    "get_priors",
    "run_balance",
    "theta_from_coefficients",
    "theta_from_fit",
]
