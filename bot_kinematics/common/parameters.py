"""Geometry constants for the three-joint bot arm."""

import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import numpy as np
import yaml

logger = logging.getLogger("bot_kinematics.parameters")

# Key under the planning group in a MoveIt-style kinematics.yaml.
DH_PARAMETERS_KEY = "kinematics_solver_dh_parameters"

PARAMETER_NAMES: Tuple[str, ...] = ("a1", "a2", "a3", "l1", "l2", "l3", "t1", "t3")

SUPPORTED_DTYPES = (np.float32, np.float64)


class ParameterError(ValueError):
    """Raised when geometry constants are missing or unusable."""


@dataclass(frozen=True)
class Parameters:
    """
    Link lengths and offsets of one manipulator instance.

    Attributes:
        a1: Forward offset of the shoulder from the base axis.
        a2: Upper arm length (shoulder to elbow).
        a3: Forearm length (elbow to tool point).
        l1: Base column height.
        l2: Lateral shoulder offset.
        l3: Lateral elbow offset.
        t1: Base flange thickness, added to ``l1``.
        t3: Forward tool offset at the tip.
        dtype: Floating point type used for every computed pose and joint
            vector (``np.float64`` or ``np.float32``).
    """

    a1: float
    a2: float
    a3: float
    l1: float
    l2: float
    l3: float
    t1: float
    t3: float
    dtype: Any = np.float64

    def __post_init__(self) -> None:
        dtype = np.dtype(self.dtype).type
        if dtype not in SUPPORTED_DTYPES:
            raise ParameterError(
                f"Unsupported parameter dtype {self.dtype!r}; "
                "use numpy.float32 or numpy.float64."
            )
        object.__setattr__(self, "dtype", dtype)

        for name in PARAMETER_NAMES:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(
                value, (int, float, np.integer, np.floating)
            ):
                raise ParameterError(
                    f"Parameter '{name}' must be a real number, got {value!r}"
                )
            if not math.isfinite(float(value)):
                raise ParameterError(f"Parameter '{name}' must be finite, got {value!r}")
            object.__setattr__(self, name, float(value))

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        dtype: Any = np.float64,
    ) -> "Parameters":
        """
        Build parameters from a key-value mapping.

        Every name in ``PARAMETER_NAMES`` must be present; unknown keys are
        ignored with a warning.

        Raises:
            ParameterError: If a required key is missing or a value is not
                a finite number.
        """
        if not isinstance(mapping, Mapping):
            raise ParameterError(
                f"Expected a mapping of geometry constants, got {type(mapping).__name__}"
            )

        missing = [name for name in PARAMETER_NAMES if name not in mapping]
        if missing:
            raise ParameterError(
                "Missing geometry constants: " + ", ".join(missing)
            )

        extra = sorted(set(mapping) - set(PARAMETER_NAMES))
        if extra:
            logger.warning("Ignoring unknown geometry constants: %s", ", ".join(map(str, extra)))

        values = {}
        for name in PARAMETER_NAMES:
            raw = mapping[name]
            try:
                values[name] = float(raw)
            except (TypeError, ValueError) as exc:
                raise ParameterError(
                    f"Parameter '{name}' must be a real number, got {raw!r}"
                ) from exc
        return cls(dtype=dtype, **values)

    def as_dict(self) -> dict:
        """Geometry constants keyed by name (without the dtype)."""
        return {name: getattr(self, name) for name in PARAMETER_NAMES}

    def __str__(self) -> str:
        values = " ".join(f"{getattr(self, name):g}" for name in PARAMETER_NAMES)
        return f"Distances: [{values}]"


def load_parameters(
    path: str,
    group: Optional[str] = None,
    dtype: Any = np.float64,
) -> Parameters:
    """
    Load geometry constants from a kinematics YAML file.

    The file is laid out like MoveIt's ``kinematics.yaml``: one entry per
    planning group, each holding a ``kinematics_solver_dh_parameters``
    mapping. A file whose top level is the constants mapping itself is also
    accepted when ``group`` is None.

    Args:
        path: Path to the YAML file.
        group: Planning group name. When None and the file holds exactly one
            group, that group is used.
        dtype: Floating point type for the resulting parameters.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ParameterError: If the group or the constants cannot be found.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Kinematics config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    if not isinstance(document, Mapping):
        raise ParameterError(f"Kinematics config {path} must hold a mapping")

    if group is None:
        if all(name in document for name in PARAMETER_NAMES):
            section = document
        else:
            groups = [key for key, value in document.items() if isinstance(value, Mapping)]
            if len(groups) != 1:
                raise ParameterError(
                    f"Kinematics config {path} holds {len(groups)} groups; "
                    "select one explicitly"
                )
            group = groups[0]
            section = document[group]
    else:
        if group not in document:
            raise ParameterError(f"Group '{group}' not found in {path}")
        section = document[group]

    if isinstance(section, Mapping) and DH_PARAMETERS_KEY in section:
        section = section[DH_PARAMETERS_KEY]

    params = Parameters.from_mapping(section, dtype=dtype)
    logger.info("Loaded parameters for ik solver: %s", params)
    return params

