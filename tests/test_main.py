import pytest

import main


def test_headless_driver_plays_seeded_moves(capsys):
    main.main(["--rows", "4", "--cols", "4", "--colors", "3", "--moves", "3", "--seed", "1"])
    out = capsys.readouterr().out
    assert "turn 1: selected" in out
    board_lines = [line for line in out.splitlines() if line and not line.startswith(("turn", "--"))]
    assert all(len(line.split()) == 4 for line in board_lines)


def test_unknown_gravity_is_rejected():
    with pytest.raises(SystemExit):
        main.main(["--gravity", "sideways"])
