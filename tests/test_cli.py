"""Tests for the command-line interface."""

import json
import tarfile

import pytest
from click.testing import CliRunner

from gql_scaffold.cli import extract_archive, main
from schema_builders import widget_schema

LIB = "lib/solidus_graphql_api/graphql"

SDL = """
schema {
  query: QueryRoot
  mutation: Mutation
}

type QueryRoot {
  widget: Widget
}

type Mutation {
  noop: Boolean
}

type Widget {
  id: ID!
  name: String
}
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(widget_schema()))
    return path


class TestGenerate:
    """Tests for the generate command."""

    def test_generates_files(self, runner, schema_file, reference_dir, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-r", str(reference_dir), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert "Parsing schema..." in result.output
        assert "Done. Methods: 4." in result.output
        assert (out / LIB / "schema" / "types" / "widget.rb").exists()
        assert (out / "spec" / "graphql" / "types" / "widget_spec.rb").exists()

    def test_sdl_schema(self, runner, reference_dir, tmp_path):
        schema = tmp_path / "schema.graphql"
        schema.write_text(SDL)
        out = tmp_path / "out"
        result = runner.invoke(
            main, ["generate", "-s", str(schema), "-r", str(reference_dir), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert "Done. Methods: 4." in result.output
        assert (out / LIB / "types" / "widget.rb").exists()

    def test_options(self, runner, schema_file, reference_dir, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(
            main,
            [
                "generate",
                "-s", str(schema_file),
                "-r", str(reference_dir),
                "-o", str(out),
                "--namespace", "Shop::Api",
                "--header", "# Generated",
            ],
        )
        assert result.exit_code == 0, result.output
        schema = (out / LIB / "schema" / "types" / "widget.rb").read_text()
        assert schema.startswith("# Generated\n\nclass Shop::Api::Schema::Types::Widget <")

    def test_config_file(self, runner, schema_file, reference_dir, tmp_path):
        config = tmp_path / "scaffold.json"
        config.write_text(json.dumps({"lib_dir": "lib/api", "spec_dir": "spec/api"}))
        out = tmp_path / "out"
        result = runner.invoke(
            main,
            ["generate", "-s", str(schema_file), "-r", str(reference_dir), "-o", str(out), "-c", str(config)],
        )
        assert result.exit_code == 0, result.output
        assert (out / "lib" / "api" / "types" / "widget.rb").exists()
        assert (out / "spec" / "api" / "types" / "widget_spec.rb").exists()

    def test_invalid_config(self, runner, schema_file, reference_dir, tmp_path):
        config = tmp_path / "scaffold.json"
        config.write_text(json.dumps({"namespace": "not a namespace"}))
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-r", str(reference_dir), "-c", str(config)]
        )
        assert result.exit_code == 2

    def test_no_overwrite(self, runner, schema_file, reference_dir, tmp_path):
        out = tmp_path / "out"
        args = ["generate", "-s", str(schema_file), "-r", str(reference_dir), "-o", str(out)]
        assert runner.invoke(main, args).exit_code == 0
        stub = out / LIB / "types" / "widget.rb"
        stub.write_text("# mine\n")

        result = runner.invoke(main, args + ["--no-overwrite", "-v"])
        assert result.exit_code == 0, result.output
        assert stub.read_text() == "# mine\n"
        assert "Kept existing files:" in result.output

    def test_report(self, runner, schema_file, reference_dir, tmp_path):
        report = tmp_path / "report.json"
        result = runner.invoke(
            main,
            [
                "generate",
                "-s", str(schema_file),
                "-r", str(reference_dir),
                "-o", str(tmp_path / "out"),
                "--report", str(report),
            ],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(report.read_text())
        assert data["total"] == 4
        assert data["dependencies"]["Types::QueryRoot"] == ["Types::Widget"]

    def test_fatal_schema_problem(self, runner, reference_dir, tmp_path):
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps(widget_schema(subscription="Subscription")))
        result = runner.invoke(
            main, ["generate", "-s", str(schema), "-r", str(reference_dir), "-o", str(tmp_path / "out")]
        )
        assert result.exit_code == 1
        assert "subscription" in result.output
        assert not (tmp_path / "out").exists()

    def test_reference_archive(self, runner, schema_file, reference_dir, tmp_path):
        archive = tmp_path / "graphql-ruby.tgz"
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(reference_dir, arcname="graphql-ruby-2.0")
        out = tmp_path / "out"
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-r", str(archive), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert "Extracting archive graphql-ruby.tgz..." in result.output
        assert (out / LIB / "schema" / "schema.rb").exists()

    def test_reference_archive_member_outside(self, runner, schema_file, reference_dir, tmp_path):
        archive = tmp_path / "graphql-ruby.tar.gz"
        payload = tmp_path / "payload.rb"
        payload.write_text("# outside\n")
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(reference_dir, arcname="graphql-ruby-2.0")
            tar.add(payload, arcname="../escaped.rb")
        out = tmp_path / "out"
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-r", str(archive), "-o", str(out)]
        )
        assert result.exit_code == 1
        assert "Cannot extract graphql-ruby.tar.gz" in result.output
        assert not out.exists()

    def test_extract_archive_rejects_escaping_member(self, tmp_path):
        archive = tmp_path / "bad.tgz"
        payload = tmp_path / "payload.rb"
        payload.write_text("# outside\n")
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(payload, arcname="../../escaped.rb")
        with pytest.raises(tarfile.OutsideDestinationError):
            extract_archive(archive)

    def test_reference_plain_file(self, runner, schema_file, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("not a checkout\n")
        out = tmp_path / "out"
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-r", str(notes), "-o", str(out)]
        )
        assert result.exit_code == 2
        assert "notes.txt is neither a directory nor" in result.output
        assert not out.exists()

    def test_reference_without_builtins(self, runner, schema_file, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        out = tmp_path / "out"
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-r", str(empty), "-o", str(out)]
        )
        assert result.exit_code == 1
        assert "No built-in type classes" in result.output
        assert not out.exists()


def test_types_command(runner, schema_file, reference_dir):
    result = runner.invoke(main, ["types", "-s", str(schema_file), "-r", str(reference_dir)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    for expected in [
        "Mutation -> Types::Mutation < Types::BaseObject",
        "QueryRoot -> Types::QueryRoot < Types::BaseObject",
        "Widget -> Types::Widget < Types::BaseObject",
    ]:
        assert expected in lines


def test_types_command_without_builtins(runner, schema_file, tmp_path):
    result = runner.invoke(main, ["types", "-s", str(schema_file), "-r", str(tmp_path)])
    assert result.exit_code == 1
    assert "No built-in type classes" in result.output
