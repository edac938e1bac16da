from multini import Parameters, read_stream, VALID_MARKERS
from typing import get_args
from itertools import product
from contextlib import nullcontext
import pytest


class TestParameters:

    def test_defaults(self):
        parameters = Parameters()
        assert parameters.option_delimiters == ("=", ":")
        assert parameters.comment_prefixes == ("#", ";")
        assert not parameters.keep_comments
        assert parameters.global_section_name == "global"
        assert parameters.backup_suffix == ".bak"
        assert parameters.encoding is None

    def test_single_markers(self):
        parameters = Parameters(option_delimiters="=", comment_prefixes=";")
        assert parameters.option_delimiters == ("=",)
        assert parameters.comment_prefixes == (";",)
        assert Parameters(comment_prefixes=None).comment_prefixes == ()

    @pytest.mark.parametrize(
        "opt_delim,comment_prefix",
        [
            pair
            for pair in product(get_args(VALID_MARKERS), get_args(VALID_MARKERS))
            if pair[0] in {"=", ":", "#"}
        ],
    )
    def test_distinct_markers(self, opt_delim, comment_prefix):
        with (
            pytest.raises(ValueError) if opt_delim == comment_prefix else nullcontext()
        ):
            Parameters(option_delimiters=opt_delim, comment_prefixes=comment_prefix)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"option_delimiters": "["},
            {"comment_prefixes": "["},
            {"option_delimiters": "=="},
            {"option_delimiters": ()},
            {"global_section_name": ""},
            {"backup_suffix": ""},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            Parameters(**kwargs)

    def test_update(self):
        parameters = Parameters()
        parameters.update(option_delimiters=";", comment_prefixes="#")
        assert parameters.option_delimiters == (";",)
        assert parameters.comment_prefixes == ("#",)

    def test_update_is_all_or_nothing(self):
        parameters = Parameters()
        with pytest.raises(ValueError):
            parameters.update(keep_comments=True, option_delimiters="#")
        assert not parameters.keep_comments
        assert parameters.option_delimiters == ("=", ":")

    def test_update_unknown(self):
        with pytest.raises(TypeError):
            Parameters().update(unknown=1)

    def test_copy(self):
        parameters = Parameters(keep_comments=True)
        copy = parameters.copy(encoding="latin-1")
        assert copy.keep_comments
        assert copy.encoding == "latin-1"
        assert parameters.encoding is None

    def test_custom_reading(self):
        ini_file = read_stream(
            ["top: 1", "# kept", "; key = x", "[s]", "a:b=c"],
            option_delimiters=":",
            comment_prefixes="#",
            keep_comments=True,
            global_section_name="top",
        )
        top = ini_file.section("top")
        assert top.option_names() == ["top", "# kept"]
        assert not top.exists("; key = x")
        assert ini_file.string_value("s", "a") == "b=c"
        assert ini_file.to_string() == (
            "top : 1\n# kept\n[s]\na : b=c\n"
        )
