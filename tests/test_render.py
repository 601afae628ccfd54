from tetracore.board import Layer
from tetracore.render import (
    AsciiSink,
    EndgameSnapshot,
    PlayfieldSnapshot,
    PlaytimeSnapshot,
    ScoreSnapshot,
    cell_char,
    playfield_lines,
)
from tetracore.tetromino import Shape


EMPTY = (Shape.NONE, Layer.FIELD)


def _rows(height=3, width=4):
    return tuple(tuple(EMPTY for _ in range(width)) for _ in range(height))


def test_cell_char_by_layer():
    assert cell_char(EMPTY) == " "
    assert cell_char((Shape.T, Layer.ACTIVE)) == "T"
    assert cell_char((Shape.T, Layer.GHOST)) == "+"
    assert cell_char((Shape.T, Layer.FIELD)) == "t"


def test_playfield_lines_top_row_first():
    rows = list(_rows())
    rows[0] = ((Shape.J, Layer.FIELD),) + rows[0][1:]
    lines = playfield_lines(PlayfieldSnapshot(rows=tuple(rows)))
    assert lines == ["+----+", "|    |", "|    |", "|j   |", "+----+"]


def test_highlighted_rows_are_drawn_solid():
    lines = playfield_lines(PlayfieldSnapshot(rows=_rows(), highlighted_rows=(0, 2)))
    assert lines[1] == "|====|"
    assert lines[2] == "|    |"
    assert lines[3] == "|====|"


def test_ascii_sink_text_fragments():
    sink = AsciiSink()
    sink.show_preview([Shape.O, Shape.T])
    sink.show_score(ScoreSnapshot(level=3, score=1200, lines=34, clear_counts=(2, 1, 0, 7)))
    sink.show_playtime(PlaytimeSnapshot(minutes=2, seconds=5, centis=50))
    assert sink.preview == "Next: O T"
    assert sink.score == "Level: 3  Score: 1200  Lines: 34  [2/1/0/7]"
    assert sink.playtime == "Time: 02:05.50"
    assert sink.updates == ["preview", "score", "playtime"]


def test_ascii_sink_endgame_text():
    sink = AsciiSink()
    sink.show_endgame(EndgameSnapshot(finished=False, goal_reached=False))
    assert sink.endgame == ""
    sink.show_endgame(EndgameSnapshot(finished=True, goal_reached=True))
    assert sink.endgame == "FINISHED"
    sink.show_endgame(EndgameSnapshot(finished=True, goal_reached=False))
    assert sink.endgame == "GAME OVER"
    assert sink.frame().endswith("GAME OVER")
