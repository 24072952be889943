# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Tunable parameters of the annealing floorplanner
"""

import math
from dataclasses import dataclass, fields, asdict, replace
from typing import Any, Optional

from blockfp.utils.utils import read_json_yaml_file


@dataclass(frozen=True)
class AnnealParams:
    """Parameters of the cost function, the move set and the annealing schedules"""

    # Weights of the cost terms
    area_weight: float = 0.2
    wirelength_weight: float = 0.3
    outline_weight: float = 1.0
    boundary_weight: float = 0.2
    macro_blockage_weight: float = 0.2
    location_weight: float = 0.1
    notch_weight: float = 0.1

    # Probabilities of the moves (the double swap takes the remainder)
    resize_prob: float = 0.3
    pos_swap_prob: float = 0.2
    neg_swap_prob: float = 0.2
    double_swap_prob: float = 0.3

    # Annealing schedule
    init_prob: float = 0.95  # Initial acceptance probability of uphill moves
    max_num_step: int = 300  # Temperature steps
    perturb_per_step: int = 100  # Perturbations per temperature step
    cooling_rate_high: float = 0.995  # Slowest cooling rate of the workers
    cooling_rate_low: float = 0.985  # Fastest cooling rate of the workers
    max_num_restart: int = 2  # Restarts of an infeasible run
    feasibility_tolerance: float = 0.001  # Relative slack on the outline

    # Parallel multi-level schedule
    num_level: int = 5
    num_worker: int = 10
    heat_rate: float = 0.5
    parallel: bool = True  # Run the workers of a level in separate processes

    # Shrinking of soft blocks while the floorplan does not fit
    shrink_factor: float = 0.995
    shrink_freq: float = 0.01

    # Notch penalty
    notch_size_cap: float = 50.0  # Absolute cap of the notch size threshold
    notch_align: bool = True  # Align the macros before measuring notches

    seed: int = 0  # Master random seed

    def __post_init__(self) -> None:
        for name in ["resize_prob", "pos_swap_prob", "neg_swap_prob", "double_swap_prob"]:
            p = getattr(self, name)
            assert 0 <= p <= 1, f"Incorrect probability {name}={p}"
        assert self.resize_prob + self.pos_swap_prob + self.neg_swap_prob + self.double_swap_prob > 0, \
            "All move probabilities are zero"
        assert 0 < self.init_prob < 1, "The initial acceptance probability must be in (0,1)"
        assert self.max_num_step > 0 and self.perturb_per_step > 0, \
            "The number of steps and perturbations must be positive"
        assert self.num_level > 0 and self.num_worker > 0, \
            "The number of levels and workers must be positive"
        assert self.max_num_restart >= 0, "Incorrect number of restarts"
        for name in ["cooling_rate_high", "cooling_rate_low", "shrink_factor"]:
            v = getattr(self, name)
            assert 0 < v <= 1, f"Incorrect value {name}={v}"
        assert 0 < self.shrink_freq <= 1, "The shrink frequency must be in (0,1]"
        assert self.heat_rate > 0, "The heat rate must be positive"
        assert self.feasibility_tolerance >= 0, "Incorrect feasibility tolerance"
        assert self.notch_size_cap > 0, "Incorrect notch size cap"

    @property
    def max_num_shrink(self) -> int:
        """Maximum number of shrinks of a run"""
        return int(1.0 / self.shrink_freq)

    @property
    def shrink_period(self) -> int:
        """Steps between possible shrinks"""
        return max(1, int(self.max_num_step * self.shrink_freq))

    def cooling_rates(self) -> list[float]:
        """Cooling rates of the workers, linearly spaced from the high to the low rate"""
        if self.num_worker < 2:
            return [self.cooling_rate_high]
        step = (self.cooling_rate_high - self.cooling_rate_low) / (self.num_worker - 1)
        return [self.cooling_rate_high - j * step for j in range(self.num_worker)]

    def initial_temperature(self, avg_delta_cost: float) -> float:
        """Temperature that accepts an average uphill move with probability init_prob"""
        return -avg_delta_cost / math.log(self.init_prob)

    def updated(self, **kwargs: Any) -> 'AnnealParams':
        """Returns a copy with some parameters changed (None values are ignored)"""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Optional[dict[str, Any]]) -> 'AnnealParams':
        """
        Builds the parameters from a dictionary. Missing keys take the default values
        :param data: dictionary of parameters
        :return: the parameters
        """
        if data is None:
            return AnnealParams()
        assert isinstance(data, dict), "The parameters must be a dictionary"
        types = {f.name: f.type for f in fields(AnnealParams)}
        kwargs = dict[str, Any]()
        for key, value in data.items():
            assert key in types, f"Unknown parameter {key}"
            if types[key] in (float, 'float'):
                assert isinstance(value, (int, float)) and not isinstance(value, bool), \
                    f"Parameter {key} must be a number"
                value = float(value)
            elif types[key] in (int, 'int'):
                assert isinstance(value, int) and not isinstance(value, bool), \
                    f"Parameter {key} must be an integer"
            elif types[key] in (bool, 'bool'):
                assert isinstance(value, bool), f"Parameter {key} must be a boolean"
            kwargs[key] = value
        return AnnealParams(**kwargs)

    @staticmethod
    def read(filename: str) -> 'AnnealParams':
        """
        Reads the parameters from a JSON or YAML file
        :param filename: name of the file
        :return: the parameters
        """
        return AnnealParams.from_dict(read_json_yaml_file(filename))
