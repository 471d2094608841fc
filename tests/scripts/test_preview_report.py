"""Tests for the report preview CLI."""

import json

from scripts.preview_report import main


def write_request(tmp_path, payload) -> str:
    path = tmp_path / "request.json"
    path.write_text(json.dumps(payload))
    return str(path)


class TestPreviewReport:
    """Tests for scripts/preview_report.py."""

    def test_prints_compiled_sql(self, tmp_path, capsys) -> None:
        path = write_request(tmp_path, {"tables": ["sales", "stores"], "columns": ["stores.name"]})

        assert main([path]) == 0
        out = capsys.readouterr().out
        assert "INNER JOIN stores ON sales.store_id = stores.id" in out

    def test_shows_dropped_tables(self, tmp_path, capsys) -> None:
        path = write_request(tmp_path, {"tables": ["sales", "brands"]})

        assert main([path]) == 0
        assert "skipped_table" in capsys.readouterr().out

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "request.json"
        path.write_text("{not json")

        assert main([str(path)]) == 1

    def test_compile_error(self, tmp_path) -> None:
        path = write_request(tmp_path, {"tables": []})

        assert main([path]) == 1

    def test_file_graph_source(self, tmp_path, capsys) -> None:
        graph = tmp_path / "graph.json"
        graph.write_text(
            json.dumps(
                {
                    "version": 1,
                    "edges": [
                        {"owner_table": "invoices", "referenced_table": "clients", "fk_column": "client_id"}
                    ],
                }
            )
        )
        path = write_request(tmp_path, {"tables": ["clients", "invoices"]})

        assert main([path, "--graph-source", "file", "--graph-path", str(graph)]) == 0
        assert "invoices.client_id = clients.id" in capsys.readouterr().out
