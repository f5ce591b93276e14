"""
Tests for canonical JSON rendering and atomic snapshot writes.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest

from exporter.errors import ExportWriteError, SnapshotError
from exporter.writer import SnapshotWriter, render


class TestRender:
    """Test suite for render()."""

    def test_pretty_printed_with_trailing_newline(self):
        text = render([{"block_id": "minecraft:stone", "air": False}])

        assert text == '[\n  {\n    "block_id": "minecraft:stone",\n    "air": false\n  }\n]\n'

    def test_no_html_escaping(self):
        text = render({"name": "<b>fish & chips</b>"})
        assert "<b>fish & chips</b>" in text

    def test_non_ascii_written_literally(self):
        text = render({"name": "Schwert ⚔"})
        assert "Schwert ⚔" in text
        assert "\\u" not in text

    def test_floats_not_rounded(self):
        text = render({"min": [0.0625, 0.1875, 1e-7], "max": [0.9375, 0.3, 1.0]})
        parsed = json.loads(text)
        assert parsed["min"] == [0.0625, 0.1875, 1e-7]
        assert parsed["max"][1] == 0.3

    def test_numpy_values_coerced(self):
        text = render({"top": np.float64(0.5), "count": np.int32(3), "box": np.array([0.0, 1.0])})
        assert json.loads(text) == {"top": 0.5, "count": 3, "box": [0.0, 1.0]}

    def test_unserializable_value_raises(self):
        with pytest.raises(TypeError):
            render({"value": object()})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_rejected(self, value):
        with pytest.raises(SnapshotError, match="not valid JSON"):
            render({"min": [0.0, value, 0.0]})

    def test_round_trip_reproduces_bytes(self, static_host):
        from exporter.profiles import PROFILES, build_registry
        from exporter.snapshot import SnapshotBuilder

        registry = build_registry(PROFILES["data"], static_host)
        builder = SnapshotBuilder(registry)
        for kind, records, layout in (
            ("blocks", static_host.block_states(), "array"),
            ("items", static_host.items(), "mapping"),
        ):
            text = render(builder.build(kind, records, layout=layout))
            assert render(json.loads(text)) == text


class TestSnapshotWriter:
    """Test suite for SnapshotWriter."""

    def setup_method(self):
        self.test_temp_dir = Path(tempfile.mkdtemp())

    def teardown_method(self):
        if self.test_temp_dir.exists():
            shutil.rmtree(self.test_temp_dir)

    def test_write_creates_directory(self):
        out_dir = self.test_temp_dir / "run" / "data"

        path = SnapshotWriter(out_dir).write("blocks.json", [{"air": True}])

        assert path == out_dir / "blocks.json"
        assert path.read_text(encoding="utf-8") == render([{"air": True}])
        assert list(out_dir.iterdir()) == [path]

    def test_write_replaces_existing_file(self):
        writer = SnapshotWriter(self.test_temp_dir)
        writer.write("items.json", {"a": 1})
        writer.write("items.json", {"b": 2})

        assert json.loads((self.test_temp_dir / "items.json").read_text(encoding="utf-8")) == {"b": 2}

    def test_directory_path_occupied_by_file(self):
        occupied = self.test_temp_dir / "data"
        occupied.write_text("not a directory")

        with pytest.raises(ExportWriteError):
            SnapshotWriter(occupied).write("blocks.json", [])

        assert occupied.read_text() == "not a directory"
        assert not (self.test_temp_dir / "blocks.json").exists()

    def test_failed_write_leaves_no_partial_file(self):
        writer = SnapshotWriter(self.test_temp_dir)

        with patch("exporter.writer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(ExportWriteError, match="disk full"):
                writer.write("blocks.json", [{"air": True}])

        assert list(self.test_temp_dir.iterdir()) == []

    def test_failed_write_keeps_previous_version(self):
        writer = SnapshotWriter(self.test_temp_dir)
        writer.write("blocks.json", [{"air": True}])

        with patch("exporter.writer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(ExportWriteError):
                writer.write("blocks.json", [{"air": False}])

        assert json.loads((self.test_temp_dir / "blocks.json").read_text(encoding="utf-8")) == [{"air": True}]

    def test_non_finite_snapshot_writes_nothing(self):
        writer = SnapshotWriter(self.test_temp_dir / "data")

        with pytest.raises(SnapshotError):
            writer.write("blocks.json", [{"max": [1.0, float("nan"), 1.0]}])

        assert not (self.test_temp_dir / "data").exists()

    def test_write_all_writes_every_file(self):
        writer = SnapshotWriter(self.test_temp_dir)

        paths = writer.write_all([("blocks.json", [{"air": True}]), ("items.json", {"a": 1})])

        assert paths == [self.test_temp_dir / "blocks.json", self.test_temp_dir / "items.json"]
        assert sorted(p.name for p in self.test_temp_dir.iterdir()) == ["blocks.json", "items.json"]

    def test_write_all_renders_before_touching_disk(self):
        writer = SnapshotWriter(self.test_temp_dir / "data")

        with pytest.raises(SnapshotError):
            writer.write_all([("blocks.json", [{"air": True}]), ("items.json", {"x": float("inf")})])

        assert not (self.test_temp_dir / "data").exists()

    def test_write_all_restores_previous_files_on_failure(self):
        writer = SnapshotWriter(self.test_temp_dir)
        writer.write_all([("blocks.json", ["old blocks"]), ("items.json", {"old": "items"})])
        real_replace = os.replace

        def fail_items(src, dst):
            # Fail the staged rename only, so restoring the backup still works
            if Path(dst).name == "items.json" and Path(src).suffix == ".tmp":
                raise OSError("disk full")
            return real_replace(src, dst)

        with patch("exporter.writer.os.replace", side_effect=fail_items):
            with pytest.raises(ExportWriteError, match="items.json"):
                writer.write_all([("blocks.json", ["new blocks"]), ("items.json", {"new": "items"})])

        assert json.loads((self.test_temp_dir / "blocks.json").read_text(encoding="utf-8")) == ["old blocks"]
        assert json.loads((self.test_temp_dir / "items.json").read_text(encoding="utf-8")) == {"old": "items"}
        assert sorted(p.name for p in self.test_temp_dir.iterdir()) == ["blocks.json", "items.json"]
