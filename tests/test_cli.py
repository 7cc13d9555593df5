"""CLI integration tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from pcat.cli import _parse_args, main


def _make_tree(root: Path) -> None:
    """Create a minimal project directory tree for testing."""
    src = root / "src"
    src.mkdir()
    (src / "main.rs").write_text("fn main() {}")
    (src / "util.py").write_text("def util():\n    pass\n")
    (src / "util_test.py").write_text("def test():\n    pass\n")
    (src / ".env").write_text("SECRET=1\n")
    (root / "README.md").write_text("# Project\n\n```sh\nmake\n```\n")
    git = root / ".git"
    git.mkdir()
    (git / "HEAD").write_text("ref: refs/heads/main\n")


def _render_help(capsys: pytest.CaptureFixture[str]) -> str:
    """Run `pcat --help` via CLI entrypoint and return captured stdout."""
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    return capsys.readouterr().out


def test_help_includes_tagline_and_usage(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "pcat: Concatenate files into one Markdown document" in out
    assert "Common usage:" in out
    assert "pcat . --not '**/*_test.py'" in out
    assert "--with-line-numbers" in out


def test_render_directory(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["src", "-e", "rs"]) == 0
    out = capsys.readouterr().out
    assert out == "`src/main.rs`\n```rs\nfn main() {}\n```\n\n---\n"


def test_list_directory_skips_hidden(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["--list", "."]) == 0
    out = capsys.readouterr().out
    assert out == "README.md\nsrc/main.rs\nsrc/util.py\nsrc/util_test.py\n"


def test_list_hidden(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["-l", "--hidden", "."]) == 0
    out = capsys.readouterr().out
    assert ".git/HEAD" in out
    assert "src/.env" in out


def test_list_with_exclusion(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["-l", "src", "--not", "**/*_test.py"]) == 0
    assert capsys.readouterr().out == "src/main.rs\nsrc/util.py\n"


def test_interleaved_flags_and_paths(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["src", "-e", ".py", "--not", "**/*_test.py", "-l", "README.md"]) == 0
    assert capsys.readouterr().out == "src/util.py\nREADME.md\n"


def test_explicit_markdown_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["README.md"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("`README.md`\n````markdown\n# Project\n")
    assert out.endswith("```\n````\n\n---\n")


def test_line_numbers(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["-n", "src/util.py"]) == 0
    out = capsys.readouterr().out
    assert "   1 | def util():\n   2 |     pass\n```" in out


def test_paths_from_stdin(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("src/util.py\n\n  README.md  \n"))
    assert main(["--list"]) == 0
    assert capsys.readouterr().out == "src/util.py\nREADME.md\n"


def test_no_paths_is_an_error(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([]) == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "no paths provided" in err


def test_invalid_path_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["missing.txt"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "pcat: invalid path 'missing.txt'" in captured.err


def test_invalid_pattern_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["src", "--not", "bad\\"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "invalid exclude pattern 'bad\\'" in captured.err


def test_binary_warning_goes_to_stderr(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "blob.bin").write_bytes(b"\x00\xff")
    (tmp_path / "a.txt").write_text("a\n")
    monkeypatch.chdir(tmp_path)
    assert main(["."]) == 0
    captured = capsys.readouterr()
    assert captured.out == "`a.txt`\n```txt\na\n```\n\n---\n"
    assert "Warning: skipping binary file blob.bin" in captured.err


def test_empty_selection_prints_nothing(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["src", "-e", "go"]) == 0
    assert capsys.readouterr().out == ""


def test_clipboard(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    copied: list[str] = []
    monkeypatch.setattr("pcat.cli.copy_to_clipboard", copied.append)
    assert main(["-c", "src/main.rs"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Copied to clipboard" in captured.err
    assert copied == ["`src/main.rs`\n```rs\nfn main() {}\n```\n\n---\n"]


def test_config_file_sets_defaults(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".pcat.toml").write_text('extensions = ["py"]\nexclude = ["**/*_test.py"]\n')
    monkeypatch.chdir(tmp_path)
    assert main(["-l", "src"]) == 0
    assert capsys.readouterr().out == "src/util.py\n"


def test_cli_extension_overrides_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".pcat.toml").write_text('extensions = ["py"]\n')
    monkeypatch.chdir(tmp_path)
    assert main(["-l", "-e", "rs", "src"]) == 0
    assert capsys.readouterr().out == "src/main.rs\n"


def test_no_config_flag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".pcat.toml").write_text('extensions = ["py"]\n')
    monkeypatch.chdir(tmp_path)
    assert main(["-l", "--no-config", "src"]) == 0
    assert capsys.readouterr().out == "src/main.rs\nsrc/util.py\nsrc/util_test.py\n"


def test_explicit_flag_detection() -> None:
    _, explicit_flags = _parse_args(["-e", "py", "--hidden", "src"])
    assert explicit_flags == {"extensions", "hidden"}
    _, explicit_flags = _parse_args(["src"])
    assert explicit_flags == set()


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("v") or out.startswith("unknown")


def test_config_extensions_with_leading_dot(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".pcat.toml").write_text('extensions = [".rs"]\n')
    monkeypatch.chdir(tmp_path)
    assert main(["-l", "src"]) == 0
    assert capsys.readouterr().out == "src/main.rs\n"


def test_non_utf8_bytes_reach_stdout_unchanged(
    tmp_path: Path, capsysbinary: pytest.CaptureFixture[bytes], monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "latin1.txt").write_bytes(b"caf\xe9\n")
    monkeypatch.chdir(tmp_path)
    assert main(["latin1.txt"]) == 0
    assert capsysbinary.readouterr().out == b"`latin1.txt`\n```txt\ncaf\xe9\n```\n\n---\n"
