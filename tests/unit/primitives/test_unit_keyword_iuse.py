# tests/unit/primitives/test_unit_keyword_iuse.py — v1
"""Tests for primitives/keyword.py, primitives/iuse.py and primitives/flags.py."""

from __future__ import annotations

import pytest

from ebuildmeta.core.errors import InvalidFlagNameError, InvalidIUseError, InvalidKeywordError
from ebuildmeta.primitives.flags import check_flag_name, is_valid_flag_name
from ebuildmeta.primitives.iuse import IUseDefault, parse_iuse, parse_iuse_entry
from ebuildmeta.primitives.keyword import Stability, parse_keyword, parse_keywords


class TestFlagNames:
    @pytest.mark.parametrize("name", ["ssl", "python_targets_python3_11", "c++", "l10n_en-US", "a@b", "2d"])
    def test_valid(self, name):
        assert is_valid_flag_name(name)
        assert check_flag_name(name) == name

    @pytest.mark.parametrize("name", ["", "-ssl", "+ssl", "_x", "a.b", "a?", "!a"])
    def test_invalid(self, name):
        assert not is_valid_flag_name(name)
        with pytest.raises(InvalidFlagNameError, match="invalid USE flag name"):
            check_flag_name(name)

    def test_position_reported(self):
        with pytest.raises(InvalidFlagNameError, match="token 4") as exc_info:
            check_flag_name("-x", position=4)
        assert exc_info.value.position == 4


class TestKeyword:
    def test_stable(self):
        kw = parse_keyword("amd64")
        assert kw.arch == "amd64"
        assert kw.stability is Stability.STABLE

    def test_testing(self):
        kw = parse_keyword("~arm64")
        assert kw.stability is Stability.TESTING
        assert str(kw) == "~arm64"

    def test_masked_wildcard(self):
        kw = parse_keyword("-*")
        assert kw.stability is Stability.MASKED
        assert kw.is_wildcard

    def test_prefix_arch(self):
        assert parse_keyword("~amd64-linux").arch == "amd64-linux"

    @pytest.mark.parametrize("token", ["", "~", "~~amd64", "am.d64", "+amd64"])
    def test_invalid(self, token):
        with pytest.raises(InvalidKeywordError) as exc_info:
            parse_keyword(token)
        assert exc_info.value.field == "KEYWORDS"

    def test_list_preserves_order(self):
        kws = parse_keywords("~amd64  x86\t-sparc")
        assert [str(k) for k in kws] == ["~amd64", "x86", "-sparc"]


class TestIUse:
    def test_plain(self):
        flag = parse_iuse_entry("debug")
        assert flag.default is IUseDefault.NONE
        assert not flag.has_default_marker

    def test_enabled(self):
        flag = parse_iuse_entry("+ssl")
        assert flag.name == "ssl"
        assert flag.default is IUseDefault.ENABLED
        assert str(flag) == "+ssl"

    def test_disabled(self):
        flag = parse_iuse_entry("-doc")
        assert flag.default is IUseDefault.DISABLED
        assert flag.has_default_marker

    def test_empty(self):
        with pytest.raises(InvalidIUseError):
            parse_iuse_entry("")

    @pytest.mark.parametrize("token", ["+", "++ssl", "-", "+-x", "a.b"])
    def test_invalid_name(self, token):
        with pytest.raises(InvalidFlagNameError) as exc_info:
            parse_iuse_entry(token)
        assert exc_info.value.field == "IUSE"

    def test_list(self):
        flags = parse_iuse("test +python -doc")
        assert [f.name for f in flags] == ["test", "python", "doc"]
