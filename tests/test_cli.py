"""Tests for the command line front end."""

import pytest
from py_hexmap.cli import build_parser, main
from py_hexmap.core.hex_grid import HexGrid
from py_hexmap.core.map_format import save_map


@pytest.fixture
def flat_map(tmp_path):
    grid = HexGrid()
    grid.create_map(10, 5)
    return save_map(tmp_path / "flat.map", grid)


class TestGenerate:
    def test_generate_writes_map(self, tmp_path, capsys):
        out = tmp_path / "out" / "seeded.map"
        code = main(["generate", "--width", "20", "--height", "15", "--seed", "42", "--out", str(out)])

        assert code == 0
        assert out.exists()
        assert "seed 42" in capsys.readouterr().out

    def test_same_seed_same_file(self, tmp_path):
        first = tmp_path / "a.map"
        second = tmp_path / "b.map"
        main(["generate", "--seed", "9", "--out", str(first)])
        main(["generate", "--seed", "9", "--out", str(second)])
        assert first.read_bytes() == second.read_bytes()

    def test_invalid_size(self, tmp_path, capsys):
        code = main(["generate", "--width", "21", "--out", str(tmp_path / "x.map")])
        assert code == 2
        assert not (tmp_path / "x.map").exists()

    def test_too_large(self, tmp_path):
        assert main(["generate", "--width", "1000", "--out", str(tmp_path / "x.map")]) == 2

    def test_invalid_settings(self, tmp_path, capsys):
        code = main(["generate", "--regions", "9", "--out", str(tmp_path / "x.map")])
        assert code == 2
        assert "Invalid generator settings" in capsys.readouterr().out


class TestPath:
    def test_path_found(self, flat_map, capsys):
        code = main(["path", str(flat_map), "--from", "0", "0", "--to", "3", "0"])
        output = capsys.readouterr().out
        assert code == 0
        assert "Path of 4 cells, cost 15, 1 turns" in output

    def test_no_path(self, tmp_path, capsys):
        grid = HexGrid()
        grid.create_map(10, 5)
        grid.water_level[grid.offset_index(3, 0)] = 1
        path = save_map(tmp_path / "wet.map", grid)

        assert main(["path", str(path), "--from", "0", "0", "--to", "3", "0"]) == 1
        assert "No path" in capsys.readouterr().out

    def test_out_of_bounds(self, flat_map):
        assert main(["path", str(flat_map), "--from", "0", "0", "--to", "10", "0"]) == 2

    def test_bad_speed(self, flat_map):
        assert main(["path", str(flat_map), "--from", "0", "0", "--to", "3", "0", "--speed", "0"]) == 2

    def test_bad_file(self, tmp_path):
        bad = tmp_path / "bad.map"
        bad.write_bytes(b"\x07\x00")
        assert main(["path", str(bad), "--from", "0", "0", "--to", "1", "0"]) == 2


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "generate" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["generate"])
    assert args.seed is None
    assert args.regions == 1
