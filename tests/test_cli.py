"""Tests for catlr.cli — CLI entry point.

Tests here cover:
  - Flag spellings and scope routing
  - Legacy extension arguments
  - Usage errors and multi-root runs
  - The end-to-end "exclude the directory, keep one file" scenario
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from catlr.cli import _flag_spellings, build_parser, run_catlr, split_directories
from tests.conftest import run_cli


class TestFlagParsing:
    def test_spellings_single_scope(self) -> None:
        assert _flag_spellings("l", "e") == ["-el", "-le"]
        assert _flag_spellings("p", "i") == ["-ip", "-pi"]

    def test_spellings_both_scopes(self) -> None:
        spellings = _flag_spellings("lp", "e")
        assert spellings[0] == "-e"
        assert set(spellings[1:]) == {"-elp", "-epl", "-lep", "-lpe", "-pel", "-ple"}

    @pytest.mark.parametrize(
        ("flag", "dest"),
        [
            ("-e", "exclude"),
            ("--exclude", "exclude"),
            ("-lpe", "exclude"),
            ("-i", "include"),
            ("-pli", "include"),
            ("-le", "list_exclude"),
            ("-el", "list_exclude"),
            ("--list-exclude", "list_exclude"),
            ("-li", "list_include"),
            ("-il", "list_include"),
            ("-pe", "print_exclude"),
            ("-ep", "print_exclude"),
            ("-pi", "print_include"),
            ("-ip", "print_include"),
            ("--print-include", "print_include"),
        ],
    )
    def test_flag_routes_to_scope(self, flag: str, dest: str) -> None:
        args = build_parser().parse_args(["src", flag, "a", "b"])
        assert getattr(args, dest) == ["a", "b"]
        assert args.directories == ["src"]

    def test_repeated_flags_accumulate(self) -> None:
        args = build_parser().parse_args(["-e", "a", "-i", "b", "-e", "c"])
        assert args.exclude == ["a", "c"]
        assert args.include == ["b"]

    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.directories == []
        assert args.use_ignore_file is True
        assert args.charset == "unicode"

    def test_flag_without_pattern_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run_catlr(["-e"], io.BytesIO(), io.StringIO())
        assert exc_info.value.code == 2


class TestSplitDirectories:
    def test_default_root(self) -> None:
        assert split_directories([]) == (["."], [])

    def test_legacy_extensions(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".hidden").mkdir()
        assert split_directories([".", ".txt", ".md", ".hidden", "src"]) == (
            [".", ".hidden", "src"],
            ["*.txt", "*.md"],
        )

    def test_only_extensions_uses_current_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert split_directories([".py"]) == (["."], ["*.py"])


class TestRunCatlr:
    def test_exclude_directory_keep_one_file(self, project_tree: Path) -> None:
        out, err = run_cli(
            [str(project_tree), "-e", "build/", "-i", "build/main.js", "-le", ".git/"]
        )
        assert err == ""
        assert out == "\n".join(
            [
                "--- Directory Tree for: project ---",
                f"Located at: {project_tree}",
                "",
                "project/",
                "├── build/",
                "│   └── main.js",
                "└── src/",
                "    └── main.cpp",
                "",
                "--- File Contents (Recursive) ---",
                "--- build/main.js ---",
                "console.log(1);",
                "",
                "--- src/main.cpp ---",
                "int main() {}",
                "",
                "--- End of Listing ---",
                "",
            ]
        )

    def test_print_only_scope_keeps_tree(self, project_tree: Path) -> None:
        out, _ = run_cli([str(project_tree), "-pe", "build", ".git"])
        assert "├── build/" in out
        assert "--- build/" not in out
        assert "--- .git/config ---" not in out
        assert "--- src/main.cpp ---" in out

    def test_list_only_scope_prunes_content_walk(self, project_tree: Path) -> None:
        out, _ = run_cli([str(project_tree), "-le", "build/"])
        assert "── build/" not in out
        assert "--- build/" not in out
        assert "--- src/main.cpp ---" in out

    def test_base_name_exclude_is_exact(self, tmp_path: Path) -> None:
        root = tmp_path / "names"
        (root / "node_modules").mkdir(parents=True)
        (root / "node_modules" / "index.js").write_text("js")
        (root / "modules").write_text("plain file")
        out, _ = run_cli([str(root), "-e", "modules"])
        assert "── modules" not in out
        assert "names/\n└── node_modules/\n    └── index.js\n" in out
        assert "--- node_modules/index.js ---" in out

    def test_legacy_extension_filters_printing(
        self, project_tree: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(project_tree)
        out, _ = run_cli([".", ".cpp"])
        assert "--- src/main.cpp ---" in out
        assert "--- build/main.js ---" not in out
        assert "├── build/" in out

    def test_missing_root_still_exits_zero(
        self, project_tree: Path, tmp_path: Path
    ) -> None:
        out, err = run_cli([str(tmp_path / "missing"), str(project_tree)])
        assert "catlr: cannot access" in err
        assert out.startswith("--- Directory Tree for: project ---")

    def test_no_ignore_flag(self, project_tree: Path) -> None:
        (project_tree / ".gitignore").write_text("*.cpp\n")
        with_ignore, _ = run_cli([str(project_tree)])
        without_ignore, _ = run_cli([str(project_tree), "--no-ignore"])
        assert "--- src/main.cpp ---" not in with_ignore
        assert "--- src/main.cpp ---" in without_ignore

    def test_ascii_charset(self, project_tree: Path) -> None:
        out, _ = run_cli([str(project_tree), "--charset", "ascii", "-le", ".git/"])
        assert "|-- build/" in out
        assert "\\-- src/" in out
