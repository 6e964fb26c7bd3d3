from pathlib import Path

import pytest

from dmiextract.cli.main import build_config, main, parse_args
from dmiextract.core.constants import EXIT_EXPORT_FAILED, EXIT_FILE_NOT_FOUND, EXIT_OK, EXIT_WRONG_EXTENSION
from dmiextract.core.errors import OutputRootError
from dmiextract.processing.image import ArtifactWriter

from conftest import relative_files, write_dmi


def test_parse_args_defaults():
    args = parse_args(["a.dmi"])
    config = build_config(args)
    assert config.output_root == Path("out")
    assert not config.export_still and not config.export_animated
    assert config.per_container_subfolder and config.per_format_subfolder


def test_parse_args_short_and_long_flags():
    args = parse_args(["-o", "dest", "-p", "--animated", "-d", "--noformat", "a.dmi", "b.dmi"])
    config = build_config(args)
    assert config.output_root == Path("dest")
    assert config.export_still and config.export_animated
    assert not config.per_container_subfolder
    assert not config.per_format_subfolder
    assert args.files == [Path("a.dmi"), Path("b.dmi")]


def test_files_are_required(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args([])
    assert info.value.code != 0


def test_full_export(tmp_path: Path):
    src = write_dmi(tmp_path / "mob.dmi", [("idle", 1, 1, None), ("walk", 1, 2, None)])
    out = tmp_path / "out"

    code = main(["-o", str(out), "-p", "-g", str(src)])

    assert code == EXIT_OK
    assert relative_files(out) == [
        "mob/animated/walk.gif",
        "mob/still/idle.png",
        "mob/still/walk_F0.png",
        "mob/still/walk_F1.png",
    ]


def test_missing_file_exits_1_and_writes_nothing(tmp_path: Path, capsys):
    good = write_dmi(tmp_path / "good.dmi", [("idle", 1, 1, None)])
    out = tmp_path / "out"

    code = main(["-o", str(out), "-p", str(good), str(tmp_path / "missing.dmi")])

    assert code == EXIT_FILE_NOT_FOUND
    assert not out.exists()
    assert "[ERROR] File does not exist" in capsys.readouterr().err


def test_wrong_extension_exits_2(tmp_path: Path, capsys):
    other = tmp_path / "sheet.png"
    other.write_bytes(b"x")
    out = tmp_path / "out"

    code = main(["-o", str(out), "-p", str(other)])

    assert code == EXIT_WRONG_EXTENSION
    assert not out.exists()
    assert "[ERROR] Non-DMI file extension" in capsys.readouterr().err


def test_first_invalid_file_decides_exit_code(tmp_path: Path):
    other = tmp_path / "sheet.png"
    other.write_bytes(b"x")
    code = main(["-o", str(tmp_path / "out"), "-p", str(other), str(tmp_path / "missing.dmi")])
    assert code == EXIT_WRONG_EXTENSION


def test_nothing_enabled_is_a_no_op(tmp_path: Path, capsys):
    src = write_dmi(tmp_path / "mob.dmi", [("idle", 1, 1, None)])
    out = tmp_path / "out"

    assert main(["-o", str(out), str(src)]) == EXIT_OK
    assert not out.exists()
    assert "[WARNING] Nothing to export" in capsys.readouterr().out


def test_parse_error_gives_export_failed(tmp_path: Path):
    bad = tmp_path / "bad.dmi"
    bad.write_bytes(b"nope")
    good = write_dmi(tmp_path / "good.dmi", [("idle", 1, 1, None)])
    out = tmp_path / "out"

    code = main(["-o", str(out), "-p", str(bad), str(good)])

    assert code == EXIT_EXPORT_FAILED
    assert relative_files(out) == ["good/still/idle.png"]


def test_artifact_failure_gives_export_failed(tmp_path: Path):
    class FailingWriter(ArtifactWriter):
        def write_still(self, image, path):
            raise OSError("read-only file system")

    src = write_dmi(tmp_path / "mob.dmi", [("idle", 1, 1, None)])
    code = main(["-o", str(tmp_path / "out"), "-p", str(src)], writer=FailingWriter())
    assert code == EXIT_EXPORT_FAILED


def test_uncreatable_output_root_raises(tmp_path: Path, capsys):
    src = write_dmi(tmp_path / "mob.dmi", [("idle", 1, 1, None)])
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    with pytest.raises(OutputRootError):
        main(["-o", str(blocker / "out"), "-p", str(src)])
    assert "[CRITICAL]" in capsys.readouterr().err


def test_log_file_receives_summary(tmp_path: Path):
    src = write_dmi(tmp_path / "mob.dmi", [("idle", 1, 1, None)])
    log = tmp_path / "logs" / "run.log"

    assert main(["-o", str(tmp_path / "out"), "-p", "--log-file", str(log), str(src)]) == EXIT_OK

    text = log.read_text()
    assert "Session started:" in text
    assert "Summary" in text
    assert "[SUCCESS]" in text
