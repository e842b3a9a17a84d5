# src/ciuupi/cli.py
"""
ciuupi CLI

Subcommands:
  - bsvec      Optimize the knot vector (b(1..5), s(0..5)) for alpha and rho (or a, c, X)
  - cp         Coverage probability of a knot vector on a gamma grid
  - sel        Scaled expected length of a knot vector on a gamma grid
  - ci         Realized CIUUPI for a data set
  - standard   Standard confidence interval for a data set

Vectors are comma separated; matrices are rows separated by ';'.
Every subcommand prints one JSON document to stdout.

Examples:
  python -m ciuupi.cli bsvec --alpha 0.05 --rho 0.4
  python -m ciuupi.cli bsvec --alpha 0.05 --a 0,2,0,-2 --c 0,0,0,1 \
      --x "1,-1,-1,1;1,1,-1,-1;1,-1,1,-1;1,1,1,1"
  python -m ciuupi.cli cp --alpha 0.05 --rho 0.4 --bsvec 0,0,0,0,0,1.96,1.96,1.96,1.96,1.96,1.96
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import CIUUPIConfig, load_config
from .core import bsciuupi, describe
from .errors import CIUUPIError, InputValidationError
from .intervals import ciuupi, cistandard, cpciuupi, selciuupi
from .optimize import standard_ci

LOG = logging.getLogger("ciuupi.cli")


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _parse_vec(text: Optional[str]) -> Optional[List[float]]:
    if text is None:
        return None
    return [float(v) for v in text.split(",") if v.strip()]


def _parse_matrix(text: Optional[str]) -> Optional[np.ndarray]:
    if text is None:
        return None
    rows = [_parse_vec(r) for r in text.split(";") if r.strip()]
    return np.asarray(rows, dtype=float)


def _gamma_grid(args: argparse.Namespace) -> np.ndarray:
    if args.gam is not None:
        return np.asarray(_parse_vec(args.gam), dtype=float)
    return np.arange(args.gam_start, args.gam_stop + 0.5 * args.gam_step, args.gam_step)


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _frame_to_dict(df) -> Dict[str, float]:
    row = df.iloc[0]
    return {"lower": float(row["lower"]), "upper": float(row["upper"])}


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--alpha", type=float, default=None, help="1 - alpha is the minimum coverage (default 0.05 or config)")
    p.add_argument("--clamped", action="store_true", help="Use clamped instead of natural cubic splines")
    p.add_argument("--config", type=str, default=None, help="YAML file with CIUUPIConfig fields")


def _add_rho(p: argparse.ArgumentParser) -> None:
    p.add_argument("--rho", type=float, default=None, help="Known correlation")
    p.add_argument("--a", type=str, default=None, help="Contrast for the parameter of interest")
    p.add_argument("--c", type=str, default=None, help="Contrast for the prior information")
    p.add_argument("--x", type=str, default=None, help="Design matrix, rows separated by ';'")


def _add_gamma(p: argparse.ArgumentParser) -> None:
    p.add_argument("--bsvec", type=str, required=True, help="Knot vector b(1..5),s(0..5)")
    p.add_argument("--gam", type=str, default=None, help="Explicit gamma values")
    p.add_argument("--gam-start", dest="gam_start", type=float, default=0.0)
    p.add_argument("--gam-stop", dest="gam_stop", type=float, default=8.0)
    p.add_argument("--gam-step", dest="gam_step", type=float, default=0.1)


def _config(args: argparse.Namespace) -> CIUUPIConfig:
    cfg = load_config(args.config) if args.config else CIUUPIConfig()
    changes: Dict[str, Any] = {}
    if args.clamped:
        changes["natural"] = False
    if args.alpha is not None:
        changes["alpha"] = args.alpha
    return cfg.replace(**changes) if changes else cfg


# -----------------------------------------------------------------------------
# Subcommands
# -----------------------------------------------------------------------------

def _cmd_bsvec(args: argparse.Namespace) -> None:
    cfg = _config(args)
    vec = bsciuupi(
        cfg.alpha,
        cfg.natural,
        rho=args.rho,
        a=_parse_vec(args.a),
        c=_parse_vec(args.c),
        x=_parse_matrix(args.x),
        config=cfg,
    )
    _emit({"alpha": cfg.alpha, "natural": cfg.natural, "bsvec": [float(v) for v in vec], **describe(vec, cfg.n_ints)})


def _cmd_cp(args: argparse.Namespace) -> None:
    cfg = _config(args)
    gams = _gamma_grid(args)
    cp = cpciuupi(
        gams, _parse_vec(args.bsvec), cfg.alpha, cfg.natural,
        rho=args.rho, a=_parse_vec(args.a), c=_parse_vec(args.c), x=_parse_matrix(args.x), config=cfg,
    )
    _emit({"gam": gams.tolist(), "coverage": cp.tolist(), "min_coverage": float(cp.min())})


def _cmd_sel(args: argparse.Namespace) -> None:
    cfg = _config(args)
    gams = _gamma_grid(args)
    sel = selciuupi(gams, _parse_vec(args.bsvec), cfg.alpha, cfg.natural, config=cfg)
    _emit({"gam": gams.tolist(), "sel": sel.tolist(), "max_sel": float(sel.max())})


def _cmd_ci(args: argparse.Namespace) -> None:
    cfg = _config(args)
    res = ciuupi(
        cfg.alpha, _parse_vec(args.a), _parse_vec(args.c), _parse_matrix(args.x),
        _parse_vec(args.bsvec), args.t, _parse_vec(args.y), natural=cfg.natural, sig=args.sig,
    )
    _emit({"ciuupi": _frame_to_dict(res)})


def _cmd_standard(args: argparse.Namespace) -> None:
    cfg = _config(args)
    if args.knots:
        _emit({"bsvec": standard_ci(cfg.d, cfg.n_ints, cfg.alpha).tolist()})
        return
    if args.a is None or args.x is None or args.y is None:
        raise InputValidationError("standard needs --a, --x and --y (or --knots)")
    res = cistandard(_parse_vec(args.a), _parse_matrix(args.x), _parse_vec(args.y), cfg.alpha, sig=args.sig)
    _emit({"standard": _frame_to_dict(res)})


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ciuupi", description="Confidence intervals utilizing uncertain prior information.")
    ap.add_argument("--log_level", type=str, default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("bsvec", help="Optimize the knot vector")
    _add_common(p)
    _add_rho(p)
    p.set_defaults(func=_cmd_bsvec)

    p = sub.add_parser("cp", help="Coverage probability curve")
    _add_common(p)
    _add_rho(p)
    _add_gamma(p)
    p.set_defaults(func=_cmd_cp)

    p = sub.add_parser("sel", help="Scaled expected length curve")
    _add_common(p)
    _add_gamma(p)
    p.set_defaults(func=_cmd_sel)

    p = sub.add_parser("ci", help="Realized CIUUPI")
    _add_common(p)
    p.add_argument("--a", type=str, required=True)
    p.add_argument("--c", type=str, required=True)
    p.add_argument("--x", type=str, required=True)
    p.add_argument("--y", type=str, required=True)
    p.add_argument("--t", type=float, default=0.0)
    p.add_argument("--sig", type=float, default=None)
    p.add_argument("--bsvec", type=str, required=True)
    p.set_defaults(func=_cmd_ci)

    p = sub.add_parser("standard", help="Standard interval, or its knot vector with --knots")
    _add_common(p)
    p.add_argument("--knots", action="store_true", help="Print the standard knot vector instead")
    p.add_argument("--a", type=str, default=None)
    p.add_argument("--x", type=str, default=None)
    p.add_argument("--y", type=str, default=None)
    p.add_argument("--sig", type=float, default=None)
    p.set_defaults(func=_cmd_standard)
    return ap


# -----------------------------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    try:
        args.func(args)
    except CIUUPIError as e:
        LOG.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
