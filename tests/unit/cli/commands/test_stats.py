"""
Unit tests for the 'stats' command.
"""

import json

import pytest
from click.testing import CliRunner

from dsdiff.cli.commands.stats import stats

SNAPSHOT = {
    "docstore/data": {
        "n1": {"__data__": {"hash": "h1", "class_name": "TextNode"}},
        "n2": {"__data__": {"hash": "h2", "class_name": "TextNode"}},
        "n3": {"__data__": {"hash": "h3", "class_name": "TextNode"}},
    },
    "docstore/ref_doc_info": {"doc1": {"node_ids": ["n1", "n2"]}},
}


@pytest.fixture
def runner():
    return CliRunner()


class TestStatsCommand:
    def test_json(self, runner):
        with runner.isolated_filesystem():
            with open("snap.json", "w") as f:
                json.dump(SNAPSHOT, f)
            result = runner.invoke(stats, ["snap.json", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_nodes"] == 4
        assert data["total_links"] == 2
        assert data["nodes_by_type"] == {"document": 1, "text-node": 3}
        assert data["orphans"] == 1
        assert data["components"] == 2

    def test_table(self, runner):
        with runner.isolated_filesystem():
            with open("snap.json", "w") as f:
                json.dump(SNAPSHOT, f)
            result = runner.invoke(stats, ["snap.json"])

        assert result.exit_code == 0
        assert "Orphans" in result.output
        assert "Components" in result.output

    def test_missing_file(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(stats, ["nope.json"])

        assert result.exit_code == 2
        assert "Failed to read file." in result.output

    def test_no_nodes(self, runner):
        with runner.isolated_filesystem():
            with open("snap.json", "w") as f:
                json.dump({"unrelated": True}, f)
            result = runner.invoke(stats, ["snap.json"])

        assert result.exit_code == 2
        assert "no docstore nodes found" in result.output
