"""Tests for refgraph.config module."""

import pytest
from refgraph.config import DEFAULT_OPTIONS, GraphOptions


class TestGraphOptions:
    """Test GraphOptions class."""

    def test_defaults(self):
        """Test default validation switches."""
        options = GraphOptions()
        assert options.allow_self_adjacency is True
        assert options.reject_duplicate_adjacencies is False
        assert options.allow_virtual_junctions is False
        assert options == DEFAULT_OPTIONS

    def test_from_dict(self):
        """Test creating options from a dictionary."""
        options = GraphOptions.from_dict({
            'allow_self_adjacency': False,
            'allow_virtual_junctions': True,
        })
        assert options.allow_self_adjacency is False
        assert options.allow_virtual_junctions is True
        assert options.reject_duplicate_adjacencies is False

    def test_unknown_key_raises(self):
        """Test that unknown option names are rejected."""
        with pytest.raises(ValueError, match="Unknown graph option"):
            GraphOptions.from_dict({'allow_everything': True})

    def test_non_boolean_raises(self):
        """Test that option values must be booleans."""
        with pytest.raises(ValueError, match="true or false"):
            GraphOptions.from_dict({'allow_self_adjacency': 'yes please'})

    def test_to_dict_round_trip(self):
        """Test converting options to a dictionary and back."""
        options = GraphOptions(reject_duplicate_adjacencies=True)
        assert GraphOptions.from_dict(options.to_dict()) == options

    def test_from_yaml_top_level(self, tmp_path):
        """Test loading a dedicated options file."""
        path = tmp_path / "options.yaml"
        path.write_text("allow_self_adjacency: false\n")
        options = GraphOptions.from_yaml(path)
        assert options.allow_self_adjacency is False

    def test_from_yaml_options_section(self, tmp_path):
        """Test loading options from a graph document."""
        path = tmp_path / "graph.yaml"
        path.write_text(
            "options:\n"
            "  reject_duplicate_adjacencies: true\n"
            "blocks:\n"
            "  - start: 10\n"
            "    bases: ACCTA\n"
        )
        options = GraphOptions.from_yaml(path)
        assert options.reject_duplicate_adjacencies is True

    def test_from_yaml_document_without_options(self, tmp_path):
        """Test that a graph document without options gives defaults."""
        path = tmp_path / "graph.yaml"
        path.write_text("blocks:\n  - start: 10\n    bases: ACCTA\n")
        assert GraphOptions.from_yaml(path) == DEFAULT_OPTIONS

    def test_from_empty_yaml(self, tmp_path):
        """Test that an empty file gives defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert GraphOptions.from_yaml(path) == DEFAULT_OPTIONS


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
