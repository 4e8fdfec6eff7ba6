"""Tests for the refgraph command-line interface."""

import pytest
from click.testing import CliRunner
from refgraph import __version__
from refgraph.cli import cli


GRAPH_YAML = """
blocks:
  - start: 10
    bases: ACCTA
  - start: 20
    bases: GGTTAC
adjacencies:
  - left: 14R
    right: 20L
"""

BROKEN_YAML = GRAPH_YAML + """  - left: 15R
    right: 20L
"""


@pytest.fixture
def runner():
    return CliRunner()


def write_graph(text, name="graph.yaml"):
    with open(name, "w") as f:
        f.write(text)
    return name


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self, runner):
        """Test that --help runs without error."""
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'refgraph' in result.output

    def test_cli_version(self, runner):
        """Test that --version displays version."""
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_command(self, runner):
        """Test that invalid commands fail."""
        result = runner.invoke(cli, ['nonexistent_command'])
        assert result.exit_code != 0


class TestCommands:
    """Test individual commands."""

    def test_init_then_info(self, runner):
        """Test that the generated template loads."""
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ['init', '--output', 'template.yaml'])
            assert result.exit_code == 0

            result = runner.invoke(cli, ['info', 'template.yaml'])
            assert result.exit_code == 0
            assert 'Blocks: 3' in result.output
            assert 'main' in result.output

    def test_resolve_template_thread(self, runner):
        """Test resolving the template's thread from the command line."""
        with runner.isolated_filesystem():
            runner.invoke(cli, ['init', '--output', 'template.yaml'])
            result = runner.invoke(cli, ['resolve', 'template.yaml', '--path', '10+,20+,30-'])
            assert result.exit_code == 0
            assert result.output.strip() == 'ACCTAGGTTACTCAA'

    def test_resolve_window(self, runner):
        """Test resolving a window of a reverse block."""
        with runner.isolated_filesystem():
            path = write_graph(GRAPH_YAML)
            result = runner.invoke(cli, ['resolve', path, '-p', '10-', '-s', '1', '-e', '3'])
            assert result.exit_code == 0
            assert result.output.strip() == 'AG'

    def test_resolve_broken_path(self, runner):
        """Test that an unjoined walk exits with an error."""
        with runner.isolated_filesystem():
            path = write_graph(GRAPH_YAML)
            result = runner.invoke(cli, ['resolve', path, '-p', '20+,10+'])
            assert result.exit_code == 1
            assert 'Error building thread' in result.output

    def test_invalid_graph_aborts(self, runner):
        """Test that an invalid record aborts by default."""
        with runner.isolated_filesystem():
            path = write_graph(BROKEN_YAML)
            result = runner.invoke(cli, ['info', path])
            assert result.exit_code == 1
            assert 'Error loading graph' in result.output

    def test_malformed_yaml(self, runner):
        """Test that a file that is not YAML gives an error message."""
        with runner.isolated_filesystem():
            path = write_graph("blocks: [start: 10\n  bases: {ACCTA\n")
            result = runner.invoke(cli, ['info', path])
            assert result.exit_code == 1
            assert 'Error loading graph' in result.output

    def test_invalid_graph_skipped(self, runner):
        """Test that --skip-invalid keeps going."""
        with runner.isolated_filesystem():
            path = write_graph(BROKEN_YAML)
            result = runner.invoke(cli, ['info', path, '--skip-invalid'])
            assert result.exit_code == 0
            assert 'Skipped 1 invalid records' in result.output

    def test_neighbors(self, runner):
        """Test listing neighbours of a side."""
        with runner.isolated_filesystem():
            path = write_graph(GRAPH_YAML)
            result = runner.invoke(cli, ['neighbors', path, '-c', '14', '-f', 'right'])
            assert result.exit_code == 0
            assert result.output.split() == ['10L', '20L']

    def test_neighbors_unknown_side(self, runner):
        """Test that a side off the graph is reported."""
        with runner.isolated_filesystem():
            path = write_graph(GRAPH_YAML)
            result = runner.invoke(cli, ['neighbors', path, '-c', '12', '-f', 'left'])
            assert result.exit_code == 1

    def test_export(self, runner):
        """Test exporting TSV tables."""
        with runner.isolated_filesystem():
            path = write_graph(GRAPH_YAML)
            result = runner.invoke(cli, ['export', path, '-o', 'out'])
            assert result.exit_code == 0
            with open('out/blocks.tsv') as f:
                assert f.readline().startswith('start\tend')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
