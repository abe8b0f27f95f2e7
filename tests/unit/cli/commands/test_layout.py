"""
Unit tests for the 'layout' command.
"""

import json

import pytest
from click.testing import CliRunner

from dsdiff.cli.commands.layout import layout

BEFORE = {
    "docstore/data": {
        "n1": {"__data__": {"hash": "h1", "class_name": "TextNode"}},
    },
    "docstore/ref_doc_info": {"doc1": {"node_ids": ["n1"]}},
}

AFTER = {
    "docstore/data": {
        "n1": {"__data__": {"hash": "h1-new", "class_name": "TextNode"}},
        "n2": {"__data__": {"hash": "h2", "class_name": "TextNode"}},
    },
    "docstore/ref_doc_info": {"doc1": {"node_ids": ["n1", "n2", "missing"]}},
}


@pytest.fixture
def runner():
    return CliRunner()


def _write():
    with open("before.json", "w") as f:
        json.dump(BEFORE, f)
    with open("after.json", "w") as f:
        json.dump(AFTER, f)


class TestLayoutCommand:
    def test_after_view(self, runner):
        with runner.isolated_filesystem():
            _write()
            result = runner.invoke(layout, ["before.json", "after.json", "--ticks", "50"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["view"] == "after"
        assert payload["ticks"] == 50
        assert payload["state"] == "running"

        nodes = {n["id"]: n for n in payload["graph"]["nodes"]}
        assert nodes["n1"]["status"] == "modified"
        assert nodes["n2"]["status"] == "added"
        assert nodes["doc1"]["nodeType"] == "document"
        assert all(isinstance(n["x"], float) for n in nodes.values())

        assert payload["graph"]["links"] == [
            {"source": "doc1", "target": "n1"},
            {"source": "doc1", "target": "n2"},
        ]
        assert set(payload["transform"]) == {"translateX", "translateY", "scale"}
        assert payload["details"]["doc1"]["connected_nodes"] == 2

    def test_before_view_has_no_diff_context(self, runner):
        with runner.isolated_filesystem():
            _write()
            result = runner.invoke(layout, ["before.json", "after.json", "--view", "before", "--ticks", "5"])

        payload = json.loads(result.output)
        assert {n["status"] for n in payload["graph"]["nodes"]} == {"unchanged"}

    def test_type_filter(self, runner):
        with runner.isolated_filesystem():
            _write()
            result = runner.invoke(
                layout, ["before.json", "after.json", "--type", "text-node", "--ticks", "5"]
            )

        payload = json.loads(result.output)
        assert {n["id"] for n in payload["graph"]["nodes"]} == {"n1", "n2"}
        assert payload["graph"]["links"] == []

    def test_output_file_and_config(self, runner):
        with runner.isolated_filesystem():
            _write()
            with open("config.yaml", "w") as f:
                f.write("viewport:\n  width: 400\n  height: 300\n")
            result = runner.invoke(
                layout,
                ["before.json", "after.json", "--ticks", "400", "--config", "config.yaml", "-o", "graph.json"],
            )
            with open("graph.json") as f:
                payload = json.load(f)

        assert result.exit_code == 0
        assert "Generated: graph.json" in result.output
        assert payload["state"] == "settled"
        for node in payload["graph"]["nodes"]:
            sx = node["x"] * payload["transform"]["scale"] + payload["transform"]["translateX"]
            assert -40 <= sx <= 440

    def test_empty_view(self, runner):
        with runner.isolated_filesystem():
            with open("before.json", "w") as f:
                json.dump({}, f)
            with open("after.json", "w") as f:
                json.dump(AFTER, f)
            result = runner.invoke(
                layout, ["before.json", "after.json", "--view", "before", "-o", "graph.json"]
            )

        assert result.exit_code == 0
        assert "No graph data to display" in result.output

    def test_unusable_files(self, runner):
        with runner.isolated_filesystem():
            with open("before.json", "w") as f:
                f.write("[]")
            with open("after.json", "w") as f:
                f.write("{}")
            result = runner.invoke(layout, ["before.json", "after.json"])

        assert result.exit_code == 2
