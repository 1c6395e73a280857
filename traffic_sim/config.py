"""Simulator configuration.

This module defines the SimulatorConfig dataclass and helpers to resolve the
traffic model selector and to load a configuration from a JSON file or a
``key=value`` parameter file.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional, Union

from traffic_sim.core.enums import TrafficModel
from traffic_sim.core.errors import InvalidParameter, UnknownModel

logger = logging.getLogger(__name__)

MODEL_ALIASES = {
    "pareto": TrafficModel.PARETO,
    "fgn": TrafficModel.FRACTIONAL_GAUSSIAN_NOISE,
    "fractional": TrafficModel.FRACTIONAL_GAUSSIAN_NOISE,
    "fractional_gaussian_noise": TrafficModel.FRACTIONAL_GAUSSIAN_NOISE,
}

# Parameter file keys that differ from the dataclass field names.
KEY_ALIASES = {
    "totalTime": "total_time",
    "numSources": "num_sources",
    "alphaOn": "alpha_on",
    "alphaOff": "alpha_off",
    "xmOn": "xm_on",
    "xmOff": "xm_off",
    "onRate": "on_rate",
    "queueCapacity": "queue_capacity",
    "serviceRate": "service_rate",
    "sampleInterval": "sample_interval",
}


def parse_model(value: Union[str, TrafficModel]) -> TrafficModel:
    """Resolve a traffic model selector.

    Args:
        value: A TrafficModel, or one of "pareto", "fgn", "fractional",
            "fractional_gaussian_noise" (case-insensitive).

    Returns:
        The matching TrafficModel.

    Raises:
        UnknownModel: If the selector is not recognised.
    """
    if isinstance(value, TrafficModel):
        return value
    key = str(value).strip().lower()
    if key not in MODEL_ALIASES:
        raise UnknownModel(f"Unknown model type: {value} (expected: pareto or fgn)")
    return MODEL_ALIASES[key]


@dataclass
class SimulatorConfig:
    """Parameters of a simulation run.

    Attributes:
        total_time: Simulation horizon.
        num_sources: Number of ON/OFF sources.
        alpha_on: Pareto shape of ON periods.
        xm_on: Pareto scale of ON periods.
        alpha_off: Pareto shape of OFF periods.
        xm_off: Pareto scale of OFF periods.
        on_rate: Load each source contributes while ON.
        model: Duration model of every source.
        hurst: Hurst exponent, used only by the FGN model.
        seed: Seed basis, source i is seeded with seed + i.
        queue_capacity: Capacity of the bounded queue.
        service_rate: Load drained from the queue after every event.
        sample_interval: Spacing of periodic rate samples, or None to sample
            after every event.
    """

    total_time: float
    num_sources: int
    alpha_on: float
    xm_on: float
    alpha_off: float
    xm_off: float
    on_rate: float = 1.0
    model: TrafficModel = TrafficModel.PARETO
    hurst: float = 0.8
    seed: int = 1234
    queue_capacity: float = 100.0
    service_rate: float = 5.0
    sample_interval: Optional[float] = None

    def __post_init__(self):
        self.model = parse_model(self.model)
        self.validate()

    def validate(self) -> None:
        """Check every parameter range.

        Raises:
            InvalidParameter: If a parameter is out of range.
        """
        if self.total_time <= 0:
            raise InvalidParameter(f"total_time must be > 0, got {self.total_time}")
        if self.num_sources < 1:
            raise InvalidParameter(f"num_sources must be >= 1, got {self.num_sources}")
        if self.alpha_on <= 1:
            raise InvalidParameter(f"alpha_on must be > 1, got {self.alpha_on}")
        if self.alpha_off <= 1:
            raise InvalidParameter(f"alpha_off must be > 1, got {self.alpha_off}")
        if self.xm_on <= 0:
            raise InvalidParameter(f"xm_on must be > 0, got {self.xm_on}")
        if self.xm_off <= 0:
            raise InvalidParameter(f"xm_off must be > 0, got {self.xm_off}")
        if self.on_rate < 0:
            raise InvalidParameter(f"on_rate must be >= 0, got {self.on_rate}")
        if not 0.5 < self.hurst < 1.0:
            raise InvalidParameter(f"hurst must be in (0.5, 1.0), got {self.hurst}")
        if self.queue_capacity <= 0:
            raise InvalidParameter(
                f"queue_capacity must be > 0, got {self.queue_capacity}"
            )
        if self.service_rate < 0:
            raise InvalidParameter(f"service_rate must be >= 0, got {self.service_rate}")
        if self.sample_interval is not None and self.sample_interval <= 0:
            raise InvalidParameter(
                f"sample_interval must be > 0, got {self.sample_interval}"
            )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["model"] = self.model.name.lower()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulatorConfig":
        """Build a configuration from a mapping, ignoring unknown keys."""
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = KEY_ALIASES.get(key, key)
            if name not in known:
                logger.warning("Unknown parameter: %s", key)
                continue
            kwargs[name] = value
        missing = [
            name
            for name in ("total_time", "num_sources", "alpha_on", "xm_on", "alpha_off", "xm_off")
            if name not in kwargs
        ]
        if missing:
            raise InvalidParameter(f"Missing parameters: {', '.join(missing)}")
        return cls(**kwargs)


def _coerce(name: str, value: str) -> Any:
    if name == "model" or name not in {f.name for f in fields(SimulatorConfig)}:
        return value
    if name in ("num_sources", "seed"):
        return int(value)
    if name == "sample_interval" and value.lower() in ("", "none"):
        return None
    return float(value)


def parse_parameter_file(text: str) -> Dict[str, Any]:
    """Parse ``key=value`` lines into a parameter mapping.

    Blank lines, ``#`` comments and lines without exactly one ``=`` are
    skipped.
    """
    params: Dict[str, Any] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        parts = line.split("=")
        if len(parts) != 2:
            continue
        key, value = parts[0].strip(), parts[1].strip()
        name = KEY_ALIASES.get(key, key)
        try:
            params[key] = _coerce(name, value)
        except ValueError as exc:
            raise InvalidParameter(f"Invalid value for {key}: {value!r}") from exc
    return params


def load_config(filename: str) -> SimulatorConfig:
    """Load a configuration file.

    Files ending in .json are read as JSON objects, anything else as a
    ``key=value`` parameter file.

    Args:
        filename: Path of the configuration file.

    Returns:
        The validated configuration.

    Raises:
        InvalidParameter: If a parameter is missing or out of range.
        UnknownModel: If the model selector is not recognised.
    """
    with open(filename) as f:
        text = f.read()

    if os.path.splitext(filename)[1].lower() == ".json":
        data = json.loads(text)
    else:
        data = parse_parameter_file(text)

    config = SimulatorConfig.from_dict(data)
    logger.info("Loaded configuration from %s: %s", filename, config.to_dict())
    return config


def save_config(config: SimulatorConfig, filename: str) -> None:
    """Save a configuration as JSON."""
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
