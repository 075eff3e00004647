from tabcomplete.tokens import detect, get_token_before_cursor, is_word_char
from tabcomplete.models import TokenInfo

def test_token_ends_at_cursor_and_keeps_dash():
    tok = detect("deploy to prod-", 15)
    assert tok == TokenInfo("prod-", 10, 15)

def test_cursor_past_end_is_clamped():
    assert detect("deploy to prod-", 16) == TokenInfo("prod-", 10, 15)
    assert detect("abc", -4) == TokenInfo("", 0, 0)

def test_text_after_cursor_is_ignored():
    tok = get_token_before_cursor("see kubern later", 10)
    assert tok.token == "kubern"
    assert (tok.start, tok.end) == (4, 10)

def test_boundary_yields_empty_token():
    tok = detect("fix the ", 8)
    assert tok.token == "" and tok.start == tok.end == 8

def test_path_like_runs_are_one_token():
    assert detect("open src/app/main.py", 20).token == "src/app/main.py"
    assert detect("x@y", 3).token == "y"

def test_word_chars():
    assert all(is_word_char(c) for c in "aZ09._-/")
    assert not any(is_word_char(c) for c in " @:,\t\né")

def test_end_is_always_the_clamped_cursor():
    for text in ("", "a", "deploy to prod-", "x y/z.w", "  "):
        for cursor in range(-2, len(text) + 3):
            tok = detect(text, cursor)
            assert tok.end == max(0, min(cursor, len(text)))
            assert 0 <= tok.start <= tok.end <= len(text)
            assert tok.token == text[tok.start:tok.end]
