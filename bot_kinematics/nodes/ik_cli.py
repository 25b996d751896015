"""Command-line front end for the bot arm FK/IK solvers."""

import argparse
import logging
import time
from typing import List, Optional

import numpy as np

from bot_kinematics.common.kinematics import forward
from bot_kinematics.common.limits import JointLimits
from bot_kinematics.common.parameters import ParameterError, load_parameters
from bot_kinematics.common.utils import Pose, matrix_to_pose, pose_to_matrix, se3_pos_ori_error
from bot_kinematics.selector import BotKinematicsSolver
from bot_kinematics.solvers import DEFAULT_TOLERANCE

logger = logging.getLogger("bot_kinematics.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bot_ik",
        description="Forward and closed-form inverse kinematics for the bot arm.",
    )
    parser.add_argument("--config", required=True, help="kinematics.yaml with the geometry constants")
    parser.add_argument("--group", default=None, help="planning group inside the config")
    parser.add_argument("--float32", action="store_true", help="compute in single precision")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")

    sub = parser.add_subparsers(dest="command", required=True)

    fk = sub.add_parser("fk", help="pose from joint angles")
    fk.add_argument("joints", type=float, nargs=3, metavar="Q")

    ik = sub.add_parser("ik", help="joint angles from a target position")
    ik.add_argument("position", type=float, nargs=3, metavar="XYZ")
    ik.add_argument(
        "--quat",
        type=float,
        nargs=4,
        default=(0.0, 0.0, 0.0, 1.0),
        metavar=("QX", "QY", "QZ", "QW"),
        help="target orientation, reported against but not solved for",
    )
    ik.add_argument("--seed", type=float, nargs=3, default=(0.0, 0.0, 0.0), metavar="Q")
    ik.add_argument(
        "--limit",
        type=float,
        default=None,
        help="symmetric joint limit in radians; the seed is clamped into it",
    )
    ik.add_argument("--tolerance", type=float, default=DEFAULT_TOLERANCE)
    ik.add_argument("--all", action="store_true", help="print every candidate solution")
    return parser


def _format_vector(v) -> str:
    return "[" + ", ".join(f"{float(x):.6f}" for x in v) + "]"


def _run_fk(params, args) -> int:
    T = forward(params, args.joints)
    pose = matrix_to_pose(T)
    print(f"position:    {_format_vector(pose.position)}")
    print(f"orientation: {_format_vector(pose.orientation)}")
    print(np.array2string(np.asarray(T), precision=6, suppress_small=True))
    return 0


def _run_ik(params, args) -> int:
    solver = BotKinematicsSolver(tolerance=args.tolerance)
    limits = None
    if args.limit is not None:
        limits = JointLimits.symmetric(args.limit, 3)
    if not solver.initialize(params, joint_limits=limits):
        return 2

    seed = np.asarray(args.seed, dtype=float)
    if limits is not None and not limits.satisfies_bounds(seed):
        seed = limits.clamp(seed)
        logger.info("Seed clamped to joint limits: %s", _format_vector(seed))

    target = pose_to_matrix(Pose(tuple(args.position), tuple(args.quat)), dtype=params.dtype)

    if args.all:
        solutions, _ = solver.get_position_ik(target)
        for i, sol in enumerate(solutions):
            print(f"candidate {i}: {_format_vector(sol)}")

    t0 = time.perf_counter()
    q, ok, info = solver.search_position_ik(target, seed.tolist())
    dt_ms = (time.perf_counter() - t0) * 1000.0

    if not ok or q is None:
        logger.warning(
            "[BotIK] t=%.2f ms, solve failed: %s", dt_ms, info["error_code"].name
        )
        return 1

    pos_err, ori_err = se3_pos_ori_error(forward(params, q), target)
    logger.info(
        "[BotIK] t=%.2f ms, pos_err=%.2f mm, ori_err=%.2f deg, ok=True",
        dt_ms,
        pos_err * 1000.0,
        np.rad2deg(ori_err),
    )
    print(f"solution: {_format_vector(q)}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Entry point for the ``bot_ik`` console script."""
    parsed = _build_parser().parse_args(args)

    logging.basicConfig(
        level=getattr(logging, str(parsed.log_level).upper(), logging.INFO),
        format="[%(levelname)s] [%(name)s]: %(message)s",
    )

    dtype = np.float32 if parsed.float32 else np.float64
    try:
        params = load_parameters(parsed.config, group=parsed.group, dtype=dtype)
    except (FileNotFoundError, ParameterError) as exc:
        logger.error("Could not load bot parameters: %s", exc)
        return 2

    if parsed.command == "fk":
        return _run_fk(params, parsed)
    return _run_ik(params, parsed)


if __name__ == "__main__":
    raise SystemExit(main())
