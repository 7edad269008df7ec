from __future__ import annotations

from dataclasses import FrozenInstanceError, replace

import pytest

from ecosim.config import (
    BoundaryType,
    InvalidParametersError,
    Parameters,
    PredatorParameters,
    PreyParameters,
    SimulationParameters,
    WorldParameters,
    load_parameters,
)


def test_defaults_are_valid_and_dt_follows_tick_rate():
    params = Parameters()
    params.validate()
    assert params.simulation.dt == pytest.approx(1.0 / 60.0)
    assert SimulationParameters(tick_rate=4.0).dt == 0.25
    assert params.world.boundary_type == BoundaryType.WRAPAROUND


@pytest.mark.parametrize(
    "params, message",
    [
        (replace(Parameters(), world=WorldParameters(height=-1.0)), "World dimensions must be positive"),
        (replace(Parameters(), prey=PreyParameters(max_speed=0.0)), "Agent speeds must be positive"),
        (replace(Parameters(), predator=PredatorParameters(initial_energy=0.0)), "Initial energy must be positive"),
        (replace(Parameters(), simulation=SimulationParameters(tick_rate=-5.0)), "Tick rate must be positive"),
    ],
)
def test_validate_reports_each_constraint(params, message):
    with pytest.raises(InvalidParametersError, match=message):
        params.validate()


def test_validate_reports_the_first_violation_only():
    params = Parameters(
        predator=PredatorParameters(max_speed=0.0, initial_energy=0.0),
        world=WorldParameters(width=0.0),
        simulation=SimulationParameters(tick_rate=0.0),
    )
    with pytest.raises(InvalidParametersError) as excinfo:
        params.validate()
    assert str(excinfo.value) == "World dimensions must be positive"


def test_validation_error_is_a_value_error():
    assert issubclass(InvalidParametersError, ValueError)


def test_parameters_are_immutable():
    params = PredatorParameters()
    with pytest.raises(FrozenInstanceError):
        params.max_speed = 10.0  # type: ignore[misc]


def test_load_parameters_merges_sections_over_defaults():
    params = load_parameters(
        {
            "predator": {"max_speed": 3.5, "initial_count": 4},
            "world": {"width": 320, "boundary_type": "Walls"},
            "simulation": {"enable_reproduction": False},
        }
    )
    assert params.predator.max_speed == 3.5
    assert params.predator.initial_count == 4
    assert params.predator.perception_radius == PredatorParameters().perception_radius
    assert params.prey == PreyParameters()
    assert params.world.width == 320
    assert params.world.height == WorldParameters().height
    assert params.world.boundary_type == BoundaryType.WALLS
    assert params.simulation.enable_reproduction is False


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"predators": {}}, "Unknown key 'predators'"),
        ({"prey": {"speed": 2.0}}, "Unknown key 'prey.speed'"),
        ({"world": {"boundary_type": "mirror"}}, "Invalid value 'mirror' for 'world.boundary_type'"),
        ({"world": [1, 2]}, "Section 'world' must be a mapping"),
        ({"world": {"width": "wide"}}, "Invalid value 'wide' for 'world.width'"),
        ({"predator": {"max_speed": None}}, "Invalid value None for 'predator.max_speed'"),
        ({"predator": {"initial_count": 2.5}}, "Invalid value 2.5 for 'predator.initial_count'"),
        ({"simulation": {"enable_reproduction": "sometimes"}}, "Invalid value 'sometimes' for 'simulation.enable_reproduction'"),
        ([1, 2], "Parameters must be a mapping"),
        ({"simulation": [1, 2]}, "Section 'simulation' must be a mapping"),
        ({"simulation": {"tick_rate": 0}}, "Tick rate must be positive"),
    ],
)
def test_load_parameters_rejects_bad_input(raw, message):
    with pytest.raises(InvalidParametersError, match=message):
        load_parameters(raw)


def test_from_yaml_reads_file(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text(
        "predator:\n"
        "  energy_per_tick: 1.5\n"
        "prey:\n"
        "  flee_distance: 25\n"
        "world:\n"
        "  boundary_type: wraparound\n"
        "  height: 240\n"
    )
    params = Parameters.from_yaml(path)
    assert params.predator.energy_per_tick == 1.5
    assert params.prey.flee_distance == 25
    assert params.world.height == 240
    assert params.world.boundary_type == BoundaryType.WRAPAROUND


def test_from_yaml_accepts_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert Parameters.from_yaml(path) == Parameters()


def test_load_parameters_coerces_values_to_declared_types():
    params = load_parameters(
        {
            "predator": {"initial_count": 4.0, "max_speed": "3.5"},
            "world": {"width": 320, "boundary_type": BoundaryType.WALLS},
            "simulation": {"max_agents": "25", "enable_reproduction": "False"},
        }
    )
    assert params.predator.initial_count == 4
    assert isinstance(params.predator.initial_count, int)
    assert params.predator.max_speed == 3.5
    assert isinstance(params.world.width, float)
    assert params.world.boundary_type == BoundaryType.WALLS
    assert params.simulation.max_agents == 25
    assert params.simulation.enable_reproduction is False
