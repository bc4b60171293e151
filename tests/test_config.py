"""Tests for generator configuration."""

import json

import pytest
from pydantic import ValidationError

from gql_scaffold.core.config import GeneratorConfig


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.namespace == "Spree::GraphQL"
        assert config.schema_namespace == "Spree::GraphQL::Schema"
        assert config.max_depth == 5
        assert config.overwrite is True
        assert config.factories == {"shop": "store", "mutation": None}

    def test_from_file(self, tmp_path):
        path = tmp_path / "scaffold.json"
        path.write_text(json.dumps({"namespace": "Shop::Api", "max_depth": 3, "lib_dir": "lib/api/"}))
        config = GeneratorConfig.from_file(path)
        assert config.namespace == "Shop::Api"
        assert config.max_depth == 3
        assert config.lib_dir == "lib/api"

    @pytest.mark.parametrize("namespace", ["spree::graphql", "Spree::", "Spree GraphQL"])
    def test_invalid_namespace(self, namespace):
        with pytest.raises(ValidationError):
            GeneratorConfig(namespace=namespace)

    def test_max_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(max_depth=0)

    def test_absolute_output_dir(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(lib_dir="/var/lib/api")
