import pytest
from run_experiments import build_parser, main, parse_options


def test_main_prints_report(capsys):
    assert main(['10', '100', '500', '7']) == 0
    out = capsys.readouterr().out
    assert '[Test setting]' in out
    assert 'The number of entries         : 100' in out
    assert 'The filter size               : 1024 [bits]' in out
    assert 'The number of hash functions  : 7' in out
    assert 'True Positive Rate            : 1' in out
    assert 'Estimated False Positive Rate : ' in out


def test_main_writes_log_file(tmp_path, capsys):
    log_path = tmp_path / 'trace.log'
    assert main(['8', '16', '16', '1', '--log-file', str(log_path)]) == 0
    assert 'BLOOM FILTER TEST' in log_path.read_text()


def test_main_size_error(capsys):
    assert main(['-1']) == 1
    assert 'Failed to set the size of filter list.' in capsys.readouterr().err


def test_defaults():
    options = parse_options(build_parser().parse_args([]))
    assert options.log2_num_bits == 13
    assert options.num_entries == 1024
    assert options.num_challenges == 1024
    assert options.seed is None


def test_non_positive_counts_use_defaults():
    options = parse_options(build_parser().parse_args(['12', '0', '-5', '99']))
    assert options.log2_num_bits == 12
    assert options.num_entries == 1024
    assert options.num_challenges == 1024
    assert options.seed == 99


def test_help_exits():
    with pytest.raises(SystemExit) as excinfo:
        main(['--help'])
    assert excinfo.value.code == 0
