import datetime as dt
import os
import pwd
import re
import socket

from barstatus import system

_UNITS = ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi")


def test_cat_returns_first_line(tmp_path):
    target = tmp_path / "file"
    target.write_text("hello\nworld\n")
    assert system.cat(str(target)) == "hello"


def test_cat_line_without_newline(tmp_path):
    target = tmp_path / "file"
    target.write_text("single")
    assert system.cat(str(target)) == "single"


def test_cat_empty_file_is_unknown(tmp_path):
    target = tmp_path / "file"
    target.write_text("")
    assert system.cat(str(target)) is None


def test_cat_blank_first_line_is_unknown(tmp_path):
    target = tmp_path / "file"
    target.write_text("\nsecond\n")
    assert system.cat(str(target)) is None


def test_cat_long_line_fits_buffer(tmp_path):
    text = "x" * 5000
    target = tmp_path / "file"
    target.write_text(text)
    result = system.cat(str(target))
    assert len(result) < 1024
    assert text.startswith(result)


def test_cat_missing_file_warns(tmp_path, capsys):
    missing = tmp_path / "missing"
    assert system.cat(str(missing)) is None
    assert f"fopen '{missing}'" in capsys.readouterr().err


def test_datetime_literal_format():
    assert system.datetime("status") == "status"


def test_datetime_year_is_digits():
    result = system.datetime("%Y")
    assert len(result) == 4
    assert result.isdigit()
    assert abs(int(result) - dt.date.today().year) <= 1


def test_datetime_empty_is_unknown(capsys):
    assert system.datetime("") is None
    assert "strftime" in capsys.readouterr().err


def test_disk_perc_in_range(tmp_path):
    assert 0 <= int(system.disk_perc(str(tmp_path))) <= 100


def test_disk_sizes_are_human_formatted(tmp_path):
    for func in (system.disk_free, system.disk_total, system.disk_used):
        number, unit = func(str(tmp_path)).split(" ")
        assert unit in _UNITS
        whole, fraction = number.split(".")
        assert whole.isdigit()
        assert len(fraction) == 1
        assert fraction.isdigit()


def test_disk_missing_path(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert system.disk_free(missing) is None
    assert system.disk_perc(missing) is None
    assert system.disk_total(missing) is None
    assert system.disk_used(missing) is None
    assert "statvfs" in capsys.readouterr().err


def test_entropy_reads_number(tmp_path):
    target = tmp_path / "entropy_avail"
    target.write_text("256\n")
    assert system.entropy(str(target)) == "256"


def test_entropy_garbage_is_unknown(tmp_path):
    target = tmp_path / "entropy_avail"
    target.write_text("abc\n")
    assert system.entropy(str(target)) is None


def test_hostname_matches_socket():
    assert system.hostname() == socket.gethostname()


def test_kernel_release_matches_uname():
    assert system.kernel_release() == os.uname().release


def test_load_avg_has_three_values():
    values = system.load_avg().split(" ")
    assert len(values) == 3
    assert all(re.fullmatch(r"\d+\.\d{2}", v) for v in values)


def test_num_files_counts_entries(tmp_path):
    for name in ("a", "b", "c"):
        (tmp_path / name).write_text("")
    (tmp_path / "sub").mkdir()
    assert system.num_files(str(tmp_path)) == "4"


def test_num_files_empty_directory(tmp_path):
    assert system.num_files(str(tmp_path)) == "0"


def test_num_files_missing(tmp_path, capsys):
    assert system.num_files(str(tmp_path / "none")) is None
    assert "opendir" in capsys.readouterr().err


def test_run_command_first_line():
    assert system.run_command("echo foo") == "foo"


def test_run_command_only_first_line_kept():
    assert system.run_command("printf 'a\\nb\\n'") == "a"


def test_run_command_no_output():
    assert system.run_command("true") is None


def test_uptime_format():
    match = re.fullmatch(r"(\d+)h (\d+)m", system.uptime())
    assert match
    assert int(match.group(2)) < 60


def test_ids_match_process():
    assert system.gid() == str(os.getgid())
    assert system.uid() == str(os.geteuid())


def test_username_matches_passwd():
    assert system.username() == pwd.getpwuid(os.geteuid()).pw_name


def test_temp_converts_millidegrees(tmp_path):
    sensor = tmp_path / "temp"
    sensor.write_text("45000\n")
    assert system.temp(str(sensor)) == "45"


def test_temp_truncates(tmp_path):
    sensor = tmp_path / "temp"
    sensor.write_text("999\n")
    assert system.temp(str(sensor)) == "0"


def test_temp_missing(tmp_path):
    assert system.temp(str(tmp_path / "temp")) is None