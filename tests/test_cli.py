import pytest

import primes_cli

from conftest import is_prime_td


def test_cli_finds_primes(tmp_path, capsys):
    out = tmp_path / "primes.txt"
    rc = primes_cli.main(["-o", str(out), "-n", "3", "-d", "10", "-p", "8", "-O", "300", "-s", "42"])
    assert rc == 0
    lines = out.read_text().splitlines()
    assert len(lines) == 3 and all(is_prime_td(int(x)) for x in lines)
    text = capsys.readouterr().out
    assert "Prime #3 found" in text
    assert "Initialization time:" in text and "Execution time:" in text


def test_cli_truncates_unless_append(tmp_path, capsys):
    out = tmp_path / "primes.txt"
    out.write_text("stale\n")
    args = ["-o", str(out), "-n", "1", "-d", "10", "-O", "100", "-s", "1"]
    assert primes_cli.main(args) == 0
    assert len(out.read_text().splitlines()) == 1
    assert primes_cli.main(args + ["-a"]) == 0
    assert len(out.read_text().splitlines()) == 2


@pytest.mark.parametrize("args, msg", [
    (["-d", "9"], "number of digits"),
    (["-n", "0"], "number of primes"),
    (["-p", "200"], "precision"),
    (["-p", "0"], "precision"),
    (["-s", "-5"], "seed"),
    (["-O", "0"], "offset primes"),
])
def test_cli_rejects_bad_config(tmp_path, capsys, args, msg):
    rc = primes_cli.main(["-o", str(tmp_path / "p.txt")] + args)
    assert rc == 1
    err = capsys.readouterr().err
    assert err.startswith("Error:") and msg in err
    assert not (tmp_path / "p.txt").exists()


def test_cli_unwritable_output(tmp_path, capsys):
    rc = primes_cli.main(["-o", str(tmp_path / "nope" / "p.txt"), "-n", "1", "-d", "10"])
    assert rc == 1
    assert "failure to open output file" in capsys.readouterr().err


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as exc:
        primes_cli.main(["--version"])
    assert exc.value.code == 0
    assert "primesearch" in capsys.readouterr().out


def test_cli_timing_brackets_progress(tmp_path, capsys):
    out = tmp_path / "primes.txt"
    rc = primes_cli.main(["-o", str(out), "-n", "2", "-d", "10", "-O", "100", "-s", "1", "-w", "1"])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("Initialization time:")
    assert lines[1:3] == ["Prime #1 found", "Prime #2 found"]
    assert lines[-1].startswith("Execution time:")


@pytest.mark.parametrize("args", [["-n", "abc"], ["-d", "1.5"], ["--bogus"], ["-o"]])
def test_cli_bad_flag_values_exit_1(tmp_path, capsys, args):
    rc = primes_cli.main(args)
    assert rc == 1
    assert capsys.readouterr().err.startswith("Error:")
