from __future__ import annotations

from strcursor import Cursor, Grapheme, TextBuffer

# U+0362 attaches to the space before it, so each mark forms a cluster with that space.
CHANT = "chuu  \u0362chuu \u0362 yeah"


def not_bare_whitespace(cluster: Grapheme) -> bool:
    return not cluster.is_base(str.isspace)


def not_whitespace(cp: str) -> bool:
    return not cp.isspace()


def make_cursor() -> Cursor:
    return Cursor.at_grapheme_left_of(TextBuffer(CHANT), 10)


def test_before_while() -> None:
    cursor = make_cursor()

    text, stop = cursor.before_while(not_bare_whitespace)

    assert text == " \u0362ch"
    assert stop == Cursor.at_grapheme_left_of(cursor.buffer, 5)


def test_after_while() -> None:
    cursor = make_cursor()

    text, stop = cursor.after_while(not_bare_whitespace)

    assert text == "uu \u0362"
    assert stop == Cursor.at_grapheme_left_of(cursor.buffer, 15)


def test_code_point_before_while() -> None:
    cursor = make_cursor()

    text, stop = cursor.code_point_before_while(not_whitespace)

    assert text == "\u0362ch"
    assert stop == Cursor.at_code_point_left_of(cursor.buffer, 6)


def test_code_point_after_while() -> None:
    cursor = make_cursor()

    text, stop = cursor.code_point_after_while(not_whitespace)

    assert text == "uu"
    assert stop == Cursor.at_grapheme_left_of(cursor.buffer, 12)


def test_scan_that_never_matches_stays_put() -> None:
    cursor = make_cursor()

    assert cursor.before_while(lambda g: False) == ("", cursor)
    assert cursor.code_point_after_while(lambda cp: False) == ("", cursor)


def test_scan_to_the_edges() -> None:
    buffer = TextBuffer(CHANT)

    text, stop = Cursor.at_end(buffer).before_while(lambda g: True)
    assert text == CHANT
    assert stop == Cursor.at_start(buffer)

    text, stop = Cursor.at_start(buffer).code_point_after_while(lambda cp: True)
    assert text == CHANT
    assert stop == Cursor.at_end(buffer)


def test_scan_does_not_move_receiver() -> None:
    cursor = make_cursor()

    cursor.after_while(lambda g: True)

    assert cursor.byte_position() == 10
