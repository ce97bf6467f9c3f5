"""
Closed table of built-in math functions: name -> (arity, routine).

Python's math module raises ValueError/OverflowError where IEEE-754 libm
routines return NaN or infinity. Every routine here returns the IEEE result
instead, so sqrt(-1) is NaN, ln(0) is -inf and exp(1000) is inf.
"""
from __future__ import annotations

import math
from typing import Callable

from contracts import FunctionSpec, UnknownFunctionError

MathFn = Callable[..., float]


# ──────────────────────────────────────────────────────────────────────────────
# IEEE-754 arithmetic
# ──────────────────────────────────────────────────────────────────────────────

def ieee_div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def ieee_rem(a: float, b: float) -> float:
    """Floating remainder; the sign follows the dividend (C fmod)."""
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


def _ieee(fn: MathFn, on_overflow: MathFn | None = None) -> MathFn:
    def wrapped(*args: float) -> float:
        try:
            return float(fn(*args))
        except ValueError:
            return math.nan
        except OverflowError:
            return on_overflow(*args) if on_overflow is not None else math.inf
    wrapped.__name__ = getattr(fn, "__name__", "wrapped")
    return wrapped


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and x % 2 == 1


# ──────────────────────────────────────────────────────────────────────────────
# Rounding
# ──────────────────────────────────────────────────────────────────────────────

def _integral(fn: Callable[[float], int]) -> MathFn:
    # math.floor & co. return ints and reject inf/NaN; a zero result keeps the input's sign.
    def wrapped(x: float) -> float:
        if not math.isfinite(x):
            return x
        result = float(fn(x))
        return math.copysign(result, x) if result == 0 else result
    wrapped.__name__ = fn.__name__
    return wrapped


def _round_half_away(x: float) -> int:
    magnitude = abs(x)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, x))


_floor = _integral(math.floor)
_ceil = _integral(math.ceil)
_trunc = _integral(math.trunc)
_round = _integral(_round_half_away)


def _fract(x: float) -> float:
    return x - _trunc(x)


def _signum(x: float) -> float:
    if math.isnan(x):
        return math.nan
    return math.copysign(1.0, x)


def _mul_add(a: float, b: float, c: float) -> float:
    return a * b + c


def _div_euclid(a: float, b: float) -> float:
    q = _trunc(ieee_div(a, b))
    if ieee_rem(a, b) < 0:
        return q - 1.0 if b > 0 else q + 1.0
    return q


def _rem_euclid(a: float, b: float) -> float:
    r = ieee_rem(a, b)
    return r + abs(b) if r < 0 else r


# ──────────────────────────────────────────────────────────────────────────────
# Powers & logarithms
# ──────────────────────────────────────────────────────────────────────────────

def _powf(a: float, b: float) -> float:
    if a == 0 and b < 0:
        return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
    try:
        return math.pow(a, b)
    except ValueError:
        return math.nan
    except OverflowError:
        return -math.inf if a < 0 and _is_odd_integer(b) else math.inf


def _log_domain(fn: MathFn, pole: float = 0.0) -> MathFn:
    # Logarithms diverge to -inf at the pole and are NaN below it.
    def wrapped(x: float) -> float:
        if x == pole:
            return -math.inf
        if x < pole:
            return math.nan
        return fn(x)
    wrapped.__name__ = fn.__name__
    return wrapped


_ln = _log_domain(math.log)
_log2 = _log_domain(math.log2)
_log10 = _log_domain(math.log10)
_ln_1p = _log_domain(math.log1p, pole=-1.0)


def _log(x: float, base: float) -> float:
    return ieee_div(_ln(x), _ln(base))


_atanh_open = _ieee(math.atanh)


def _atanh(x: float) -> float:
    if abs(x) == 1:
        return math.copysign(math.inf, x)
    return _atanh_open(x)


def _sinh_overflow(x: float) -> float:
    return math.copysign(math.inf, x)


# ──────────────────────────────────────────────────────────────────────────────
# Table
# ──────────────────────────────────────────────────────────────────────────────

FUNCTIONS: dict[str, tuple[int, MathFn]] = {
    "floor":      (1, _floor),
    "ceil":       (1, _ceil),
    "round":      (1, _round),
    "trunc":      (1, _trunc),
    "fract":      (1, _fract),
    "abs":        (1, math.fabs),
    "signum":     (1, _signum),
    "mul_add":    (3, _mul_add),
    "div_euclid": (2, _div_euclid),
    "rem_euclid": (2, _rem_euclid),
    "powf":       (2, _powf),
    "sqrt":       (1, _ieee(math.sqrt)),
    "exp":        (1, _ieee(math.exp)),
    "exp2":       (1, _ieee(math.exp2)),
    "ln":         (1, _ln),
    "log":        (2, _log),
    "log2":       (1, _log2),
    "log10":      (1, _log10),
    "cbrt":       (1, math.cbrt),
    "hypot":      (2, _ieee(math.hypot)),
    "sin":        (1, _ieee(math.sin)),
    "cos":        (1, _ieee(math.cos)),
    "tan":        (1, _ieee(math.tan)),
    "asin":       (1, _ieee(math.asin)),
    "acos":       (1, _ieee(math.acos)),
    "atan":       (1, math.atan),
    "atan2":      (2, math.atan2),
    "exp_m1":     (1, _ieee(math.expm1)),
    "ln_1p":      (1, _ln_1p),
    "sinh":       (1, _ieee(math.sinh, on_overflow=_sinh_overflow)),
    "cosh":       (1, _ieee(math.cosh)),
    "tanh":       (1, math.tanh),
    "asinh":      (1, math.asinh),
    "acosh":      (1, _ieee(math.acosh)),
    "atanh":      (1, _atanh),
}


def lookup(name: str) -> tuple[int, MathFn]:
    """Returns (arity, routine). Raises UnknownFunctionError."""
    try:
        return FUNCTIONS[name]
    except KeyError:
        raise UnknownFunctionError(name) from None


def function_arity(name: str) -> int:
    return lookup(name)[0]


def function_names() -> list[str]:
    return sorted(FUNCTIONS)


def function_specs() -> list[FunctionSpec]:
    return [FunctionSpec(name=name, arity=FUNCTIONS[name][0]) for name in function_names()]
