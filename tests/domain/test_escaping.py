from __future__ import annotations

from ledgernet.domain.escaping import EscapedCommand, escape_arguments, unescape_argument


def test_escape_joins_and_wraps() -> None:
    assert escape_arguments(["ledger", "nym", "did=abc"]) == '"ledger nym did=abc"'


def test_escape_quotes() -> None:
    assert escape_arguments(["it's", 'say "hi"']) == "\"it\\'s say \\\"hi\\\"\""


def test_empty_arguments_still_render_quoted_string() -> None:
    assert escape_arguments([]) == '""'
    assert EscapedCommand.of(["indy-cli"], []).argv() == ["indy-cli", '""']


def test_unescape_inverts_escape() -> None:
    original = "a 'b' \"c\" \\' d"
    assert unescape_argument(escape_arguments([original])) == original


def test_escaped_command_keeps_structure_until_render() -> None:
    command = EscapedCommand.of(["indy-cli", "create-wallet"], ["--name", "O'Brien"])
    assert command.sub_command == ("indy-cli", "create-wallet")
    assert command.arguments == ("--name", "O'Brien")
    assert command.argv() == ["indy-cli", "create-wallet", "\"--name O\\'Brien\""]
