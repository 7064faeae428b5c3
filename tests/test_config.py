"""Tests for TargetingConfig validation.

Covers:
- Defaults are valid
- Out-of-domain values are rejected at construction
- Boundary values are accepted
- Values read back unchanged (no hidden clamping)
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dataclasses import replace

import pytest

from soft_targeting.config import SandboxConfig, TargetingConfig
from soft_targeting.core.errors import (
    ConfigurationError,
    MissingReference,
    StaleReference,
    TargetingError,
)
from soft_targeting.core.models import Enemy


class TestDefaults:

    def test_defaults_construct(self):
        cfg = TargetingConfig()
        assert cfg.search_radius > 0
        assert cfg.search_interval > 0
        assert cfg.target_class is None

    def test_sandbox_defaults_construct(self):
        assert SandboxConfig().enemy_count > 0


class TestRejection:

    @pytest.mark.parametrize("field, value", [
        ("search_radius", 0.0),
        ("search_radius", -5.0),
        ("search_interval", 0.0),
        ("max_horizontal_camera_angle", 90.5),
        ("max_horizontal_camera_angle", -1.0),
        ("max_vertical_camera_angle", 61.0),
        ("max_horizontal_player_half_angle", 181.0),
        ("camera_direction_weight", 1.5),
        ("distance_weight", -0.1),
        ("player_direction_weight", 2.0),
        ("search_radius", float("nan")),
        ("search_radius", float("inf")),
        ("distance_weight", True),
        ("distance_weight", "1.0"),
    ])
    def test_out_of_domain_raises(self, field, value):
        with pytest.raises(ConfigurationError) as excinfo:
            TargetingConfig(**{field: value})
        assert excinfo.value.field == field

    def test_error_is_value_error_and_targeting_error(self):
        with pytest.raises(ValueError):
            TargetingConfig(search_radius=-1.0)
        with pytest.raises(TargetingError):
            TargetingConfig(search_radius=-1.0)

    def test_target_class_must_be_a_class(self):
        with pytest.raises(ConfigurationError):
            TargetingConfig(target_class="Enemy")

    def test_target_tag_must_be_string(self):
        with pytest.raises(ConfigurationError):
            TargetingConfig(target_tag=None)

    def test_replace_revalidates(self):
        cfg = TargetingConfig()
        with pytest.raises(ConfigurationError):
            replace(cfg, camera_direction_weight=3.0)


class TestRoundTrip:

    @pytest.mark.parametrize("field, value", [
        ("max_horizontal_camera_angle", 0.0),
        ("max_horizontal_camera_angle", 90.0),
        ("max_vertical_camera_angle", 60.0),
        ("max_horizontal_player_half_angle", 180.0),
        ("camera_direction_weight", 0.0),
        ("distance_weight", 1.0),
        ("player_direction_weight", 0.37),
        ("search_radius", 1e-3),
        ("search_interval", 2.5),
    ])
    def test_in_domain_value_reads_back_unchanged(self, field, value):
        cfg = TargetingConfig(**{field: value})
        assert getattr(cfg, field) == value

    def test_integers_accepted(self):
        cfg = TargetingConfig(search_radius=500, max_horizontal_camera_angle=30)
        assert cfg.search_radius == 500
        assert cfg.max_horizontal_camera_angle == 30

    def test_to_dict_contains_every_field(self):
        cfg = TargetingConfig(target_tag="Boss", target_class=Enemy)
        d = cfg.to_dict()
        assert d["target_tag"] == "Boss"
        assert d["target_class"] is Enemy
        assert TargetingConfig(**d) == cfg


class TestErrorTaxonomy:

    def test_every_error_is_a_targeting_error(self):
        for cls in (ConfigurationError, MissingReference, StaleReference):
            assert issubclass(cls, TargetingError)

    def test_configuration_error_message_names_field(self):
        err = ConfigurationError("search_radius", -1.0, "a number > 0")
        assert str(err) == "search_radius must be a number > 0 (got -1.0)"
