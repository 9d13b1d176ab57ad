import pytest

from tele import build_parser


def test_interval_defaults_to_settings():
    args = build_parser().parse_args([])

    assert args.interval is None
    assert args.once is False


def test_interval_accepts_positive_seconds():
    assert build_parser().parse_args(["--interval", "2.5"]).interval == 2.5


@pytest.mark.parametrize("value", ["0", "-1", "nan", "soon"])
def test_interval_rejects_non_positive(value):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--interval", value])
