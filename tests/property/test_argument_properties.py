from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from ledgernet.domain.environment import classify_arguments
from ledgernet.domain.escaping import escape_arguments, unescape_argument
from ledgernet.domain.volumes import build_volume_specs

_word = st.text(alphabet=st.characters(min_codepoint=97, max_codepoint=122), min_size=1, max_size=8)
_positional = st.text(alphabet="abcxyz0123456789.-_/:", min_size=0, max_size=12)
_assignment = st.builds(lambda key, value: f"{key}={value}", _word, st.text(max_size=8))
_tokens = st.lists(st.one_of(_positional, _assignment), max_size=12)
_segment = st.text(alphabet="abcdefgh0123456789-_.", min_size=1, max_size=8).filter(lambda s: s not in {".", ".."})


@settings(max_examples=200)
@given(tokens=_tokens)
def test_classification_removes_assignments_and_preserves_order(tokens: list[str]) -> None:
    assignments, positionals = classify_arguments(tokens)
    assert positionals == [token for token in tokens if "=" not in token]
    assert all("=" not in token for token in positionals)
    for token in tokens:
        if "=" in token:
            assert token.split("=", 1)[0] in assignments


@settings(max_examples=100)
@given(paths=st.lists(st.lists(_segment, min_size=1, max_size=4), min_size=1, max_size=5), trailing=st.booleans())
def test_mount_names_follow_final_segments(paths: list[list[str]], trailing: bool) -> None:
    joined = ["/" + "/".join(parts) + ("/" if trailing else "") for parts in paths]
    specs = build_volume_specs(",".join(joined), None, container_home="/home/indy")
    assert [spec.mount_name for spec in specs] == [parts[-1] for parts in paths]
    assert all(spec.container_path == f"/home/indy/{spec.mount_name}" for spec in specs)


@settings(max_examples=300)
@given(text=st.text(alphabet="'\" ab\\", max_size=30))
def test_escape_round_trips_quotes_and_spaces(text: str) -> None:
    rendered = escape_arguments([text])
    assert rendered.startswith('"') and rendered.endswith('"')
    assert unescape_argument(rendered) == text


@settings(max_examples=100)
@given(tokens=st.lists(st.text(alphabet="'\" abc", min_size=1, max_size=6), max_size=6))
def test_escape_round_trips_token_sequences(tokens: list[str]) -> None:
    assert unescape_argument(escape_arguments(tokens)) == " ".join(tokens)
