"""Unit tests for the criteria registry."""

from dataclasses import FrozenInstanceError

import pytest

from callqa.core.criteria import (
    DEFAULT_REGISTRY,
    EVALUATION_PARAMETERS,
    CriteriaRegistry,
    registry_from_config,
)
from callqa.core.errors import ConfigurationError
from callqa.core.models import EvaluationParameter, ParameterType


class TestDefaultRegistry:
    def test_has_eleven_parameters_in_order(self):
        assert len(DEFAULT_REGISTRY) == 11
        assert DEFAULT_REGISTRY.keys[0] == "greeting"
        assert DEFAULT_REGISTRY.keys[-1] == "professionalClosing"

    def test_weights_match_rubric(self):
        assert [p.weight for p in DEFAULT_REGISTRY] == [5, 12, 10, 8, 8, 10, 12, 15, 8, 10, 5]

    def test_total_weight(self):
        assert DEFAULT_REGISTRY.total_weight() == 103

    def test_keys_unique_and_weights_positive(self):
        keys = [p.key for p in EVALUATION_PARAMETERS]
        assert len(keys) == len(set(keys))
        assert all(p.weight > 0 for p in EVALUATION_PARAMETERS)

    def test_pass_fail_parameters(self):
        pass_fail = [p.key for p in DEFAULT_REGISTRY if p.type is ParameterType.PASS_FAIL]
        assert pass_fail == ["customerVerification", "complianceDisclosure", "commitmentSecured"]

    def test_lookup_by_key(self):
        param = DEFAULT_REGISTRY.get("complianceDisclosure")
        assert param.name == "Compliance Disclosure"
        assert param.weight == 15
        assert "empathy" in DEFAULT_REGISTRY

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            DEFAULT_REGISTRY.get("nope")

    def test_registry_is_read_only(self):
        with pytest.raises(AttributeError):
            DEFAULT_REGISTRY._params = ()
        with pytest.raises(FrozenInstanceError):
            DEFAULT_REGISTRY.get("greeting").weight = 99


class TestRegistryValidation:
    def _param(self, key="a", weight=5):
        return EvaluationParameter(name=key, key=key, type=ParameterType.SCORE, weight=weight, description="")

    def test_rejects_empty(self):
        with pytest.raises(ConfigurationError):
            CriteriaRegistry([])

    def test_rejects_duplicate_keys(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            CriteriaRegistry([self._param("a"), self._param("a")])

    @pytest.mark.parametrize("weight", [0, -1, 2.5, True])
    def test_rejects_bad_weight(self, weight):
        with pytest.raises(ConfigurationError):
            CriteriaRegistry([self._param(weight=weight)])


class TestRegistryFromConfig:
    def test_builds_registry(self):
        registry = registry_from_config(
            [
                {"name": "Opening", "key": "opening", "type": "score", "weight": 4},
                {"name": "Disclosure", "key": "disclosure", "type": "PASS_FAIL", "weight": 6},
            ]
        )
        assert registry.keys == ["opening", "disclosure"]
        assert registry.get("disclosure").type is ParameterType.PASS_FAIL
        assert registry.total_weight() == 10

    def test_unknown_type_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            registry_from_config([{"name": "X", "key": "x", "type": "stars", "weight": 3}])

    def test_missing_field_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            registry_from_config([{"name": "X", "weight": 3}])
