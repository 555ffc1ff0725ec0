"""
XIRR SOLVER
Annualized rate r such that NPV(r) of dated cash flows is zero

RESPONSIBILITIES:
- NPV and its analytic derivative in a single pass (actual/365)
- Newton-Raphson from a 10% guess
- Bounded bisection when Newton does not converge
- Report "not computable" as None, never as an exception

RULES:
❌ No cash-flow construction
❌ No rounding (callers round for display)
✅ Rate never drops to or below -100% inside the solver
✅ Deterministic output
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from app.config import settings
from app.domain.models import CashFlow
from app.domain.services.cash_flow_builder import not_computable_reason

logger = logging.getLogger(__name__)

NEWTON = "newton"
BISECTION = "bisection"


@dataclass(frozen=True)
class XirrSolution:
    """Solved rate plus how it was found"""
    rate: float
    method: str
    iterations: int

    @property
    def percentage(self) -> float:
        return self.rate * 100.0


class XirrSolver:
    """
    XIRR root finder
    Newton-Raphson with a bisection safety net
    """

    def __init__(
        self,
        initial_guess: Optional[float] = None,
        tolerance: Optional[float] = None,
        max_iterations: Optional[int] = None,
        lower_bound: Optional[float] = None,
        upper_bound: Optional[float] = None,
        bisection_steps: Optional[int] = None,
        rate_floor: Optional[float] = None,
        day_count_basis: Optional[float] = None,
    ):
        """
        Initialize solver; every argument defaults to the XIRR_* settings

        Args:
            initial_guess: Newton starting rate (default 0.1)
            tolerance: |NPV| below which a rate is accepted (default 1e-7)
            max_iterations: Newton iteration cap (default 100)
            lower_bound: Bisection lower rate (default -0.9999)
            upper_bound: Bisection upper rate (default 10.0)
            bisection_steps: Bisection step cap (default 100)
            rate_floor: Clamp for Newton steps at or below -100% (default -0.999999)
            day_count_basis: Days per year (default 365)
        """
        self.initial_guess = settings.XIRR_INITIAL_GUESS if initial_guess is None else initial_guess
        self.tolerance = settings.XIRR_TOLERANCE if tolerance is None else tolerance
        self.max_iterations = settings.XIRR_MAX_ITERATIONS if max_iterations is None else max_iterations
        self.lower_bound = settings.XIRR_BISECTION_LOWER if lower_bound is None else lower_bound
        self.upper_bound = settings.XIRR_BISECTION_UPPER if upper_bound is None else upper_bound
        self.bisection_steps = settings.XIRR_BISECTION_STEPS if bisection_steps is None else bisection_steps
        self.rate_floor = settings.XIRR_RATE_FLOOR if rate_floor is None else rate_floor
        self.day_count_basis = settings.XIRR_DAY_COUNT_BASIS if day_count_basis is None else day_count_basis

        if self.lower_bound <= -1.0 or self.lower_bound >= self.upper_bound:
            raise ValueError("Bisection bounds must satisfy -1 < lower < upper")
        if self.rate_floor <= -1.0:
            raise ValueError("Rate floor must be above -1")

    def solve(self, flows: Sequence[CashFlow]) -> Optional[float]:
        """
        Solve for the annual rate as a decimal fraction (0.1 == 10%)

        Returns:
            Rate, or None when the series is degenerate or no root is found
        """
        solution = self.solve_detailed(flows)
        return solution.rate if solution is not None else None

    def solve_detailed(self, flows: Sequence[CashFlow]) -> Optional[XirrSolution]:
        """Same as solve(), keeping the method and iteration count"""
        reason = not_computable_reason(flows)
        if reason is not None:
            logger.debug("XIRR not computable: %s (%d flows)", reason, len(flows))
            return None

        amounts, times = self.year_fractions(flows)

        solution = self._newton(amounts, times)
        if solution is not None:
            return solution

        logger.debug(
            "Newton did not converge in %d iterations; falling back to bisection",
            self.max_iterations,
        )
        solution = self._bisect(amounts, times)
        if solution is None:
            logger.debug(
                "XIRR not computable: no sign change on [%s, %s]",
                self.lower_bound,
                self.upper_bound,
            )
        return solution

    def year_fractions(self, flows: Sequence[CashFlow]) -> Tuple[List[float], List[float]]:
        """Amounts and actual/365 year offsets from the first flow's date"""
        origin = flows[0].flow_date
        amounts = [float(cf.amount) for cf in flows]
        times = [(cf.flow_date - origin).days / self.day_count_basis for cf in flows]
        return amounts, times

    @staticmethod
    def npv_with_derivative(
        rate: float,
        amounts: Sequence[float],
        times: Sequence[float],
    ) -> Tuple[float, float]:
        """
        f(r)  = Σ a_i / (1+r)^t_i
        f'(r) = Σ -t_i * a_i / (1+r)^(t_i+1)

        Returns (nan, nan) when a discount factor overflows.
        """
        base = 1.0 + rate
        if base <= 0:
            return math.nan, math.nan

        log_base = math.log(base)
        value = 0.0
        slope = 0.0
        for amount, t in zip(amounts, times):
            try:
                discounted = amount * math.exp(-t * log_base)
            except OverflowError:
                return math.nan, math.nan
            value += discounted
            slope -= t * discounted / base
        return value, slope

    def _newton(self, amounts: List[float], times: List[float]) -> Optional[XirrSolution]:
        rate = self.initial_guess
        for iteration in range(1, self.max_iterations + 1):
            value, slope = self.npv_with_derivative(rate, amounts, times)
            if not (math.isfinite(value) and math.isfinite(slope)):
                return None
            if abs(value) < self.tolerance:
                return XirrSolution(rate=rate, method=NEWTON, iterations=iteration)
            if slope == 0:
                return None

            rate = rate - value / slope
            if not math.isfinite(rate):
                return None
            # (1+r)^t is undefined for a negative base
            if rate <= -1.0:
                rate = self.rate_floor
        return None

    def _bisect(self, amounts: List[float], times: List[float]) -> Optional[XirrSolution]:
        lo, hi = self.lower_bound, self.upper_bound
        f_lo, _ = self.npv_with_derivative(lo, amounts, times)
        f_hi, _ = self.npv_with_derivative(hi, amounts, times)
        if not (math.isfinite(f_lo) and math.isfinite(f_hi)):
            return None

        if abs(f_lo) < self.tolerance:
            return XirrSolution(rate=lo, method=BISECTION, iterations=0)
        if abs(f_hi) < self.tolerance:
            return XirrSolution(rate=hi, method=BISECTION, iterations=0)
        if (f_lo > 0) == (f_hi > 0):
            return None

        for step in range(1, self.bisection_steps + 1):
            mid = 0.5 * (lo + hi)
            f_mid, _ = self.npv_with_derivative(mid, amounts, times)
            if not math.isfinite(f_mid):
                return None
            if abs(f_mid) < self.tolerance:
                return XirrSolution(rate=mid, method=BISECTION, iterations=step)
            if (f_mid > 0) == (f_lo > 0):
                lo, f_lo = mid, f_mid
            else:
                hi = mid

        return XirrSolution(rate=0.5 * (lo + hi), method=BISECTION, iterations=self.bisection_steps)
