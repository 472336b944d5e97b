# tests/unit/cache/test_codec.py — v1
"""Tests for cache/codec.py — record splitting, parsing and serialization."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from ebuildmeta.cache.codec import (
    CacheCodec,
    parse_eclasses,
    split_record,
)
from ebuildmeta.cache.models import CacheEntry, EclassEntry
from ebuildmeta.config.settings import Settings
from ebuildmeta.core.errors import (
    DuplicateKeyError,
    InvalidChecksumFormatError,
    InvalidDescriptionError,
    MalformedEclassListError,
    MalformedLineError,
    MetadataValidationError,
    UnrecognizedLevelError,
)
from ebuildmeta.core.models import ViolationKind
from ebuildmeta.grammar.nodes import AnyOf
from ebuildmeta.grammar.walk import sole_child
from ebuildmeta.metadata.models import EbuildMetadata
from ebuildmeta.primitives.keyword import Stability


class TestSplitRecord:
    def test_splits_at_first_equals(self):
        recognized, extra = split_record("DESCRIPTION=a=b c\n")
        assert recognized == {"DESCRIPTION": "a=b c"}
        assert extra == {}

    def test_crlf_and_blank_lines(self):
        recognized, _ = split_record("EAPI=7\r\n\r\n   \nSLOT=0\r\n")
        assert recognized == {"EAPI": "7", "SLOT": "0"}

    def test_no_trailing_newline(self):
        recognized, _ = split_record("SLOT=0")
        assert recognized == {"SLOT": "0"}

    def test_keys_are_case_sensitive(self):
        recognized, extra = split_record("slot=0\n")
        assert recognized == {}
        assert extra == {"slot": "0"}

    @pytest.mark.parametrize("line", ["no separator", "=value"])
    def test_malformed_line(self, line):
        with pytest.raises(MalformedLineError, match="line 2") as exc_info:
            split_record(f"EAPI=7\n{line}\n")
        assert exc_info.value.line_number == 2
        assert exc_info.value.line == line

    def test_duplicate_last_wins(self, caplog):
        with caplog.at_level(logging.WARNING):
            recognized, _ = split_record("SLOT=0\nSLOT=1\n")
        assert recognized["SLOT"] == "1"
        assert "Duplicate key SLOT" in caplog.text

    def test_duplicate_reject(self):
        with pytest.raises(DuplicateKeyError, match="line 2") as exc_info:
            split_record("SLOT=0\nSLOT=1\n", "reject")
        assert exc_info.value.key == "SLOT"
        assert exc_info.value.kind == "DuplicateKey"

    def test_empty_value_kept(self):
        recognized, _ = split_record("RDEPEND=\n")
        assert recognized == {"RDEPEND": ""}


class TestEclasses:
    def test_pairs(self):
        assert parse_eclasses("llvm.org\t4e92abc\tmultibuild\t40fe1234") == (
            EclassEntry(name="llvm.org", checksum="4e92abc"),
            EclassEntry(name="multibuild", checksum="40fe1234"),
        )

    def test_empty(self):
        assert parse_eclasses("") == ()

    def test_odd_count(self):
        with pytest.raises(MalformedEclassListError, match="3 tokens") as exc_info:
            parse_eclasses("llvm.org\tabc123\torphan")
        assert exc_info.value.field == "_eclasses_"

    def test_empty_token(self):
        with pytest.raises(MalformedEclassListError):
            parse_eclasses("a\t\tb\tc")

    def test_spaces_are_not_separators(self):
        assert len(parse_eclasses("a b\tc")) == 1


class TestParse:
    def test_example_record(self, codec, example_cache):
        result = codec.parse(example_cache)
        assert result.is_valid
        assert result.issues == ()
        entry = result.entry
        md = entry.metadata
        assert str(md.eapi) == "7"
        assert md.description == "Python bindings for sys-devel/clang"
        assert md.keywords_with(Stability.TESTING) == ["amd64", "x86"]
        assert len(md.iuse) == 3
        assert not any(flag.has_default_marker for flag in md.iuse)
        any_of = sole_child(md.required_use)
        assert isinstance(any_of, AnyOf)
        assert len(any_of.children) == 2
        assert entry.eclass_names == ["llvm.org", "multibuild"]
        assert entry.md5 == "4539d849d3cea8ac84debad9b3154143"
        assert md.bdepend is None
        assert entry.extra == ()

    def test_minimal_record(self, codec, minimal_cache):
        entry = codec.parse(minimal_cache).raise_for_issues()
        assert entry.md5 is None
        assert entry.eclasses == ()

    @pytest.mark.parametrize(
        "md5",
        [
            "4539d849d3cea8ac84debad9b315414",
            "4539d849d3cea8ac84debad9b31541433",
            "4539D849D3CEA8AC84DEBAD9B3154143",
        ],
    )
    def test_bad_checksum(self, codec, minimal_cache, md5):
        with pytest.raises(InvalidChecksumFormatError):
            codec.parse(f"{minimal_cache}_md5_={md5}\n")

    def test_unknown_keys_preserved(self, codec, minimal_cache):
        entry = codec.parse(f"X_CUSTOM=a b  c\n{minimal_cache}").entry
        assert entry.extra == (("X_CUSTOM", "a b  c"),)
        assert entry.extra_fields == {"X_CUSTOM": "a b  c"}

    def test_unknown_keys_read_only(self, codec, minimal_cache):
        entry = codec.parse(f"X_CUSTOM=1\n{minimal_cache}").entry
        with pytest.raises(ValidationError):
            entry.extra = ()
        entry.extra_fields["X_CUSTOM"] = "2"
        assert entry.extra == (("X_CUSTOM", "1"),)

    def test_description_with_carriage_return(self, codec):
        with pytest.raises(InvalidDescriptionError) as exc_info:
            codec.parse("EAPI=7\nDESCRIPTION=a\rb\nSLOT=0\n")
        assert exc_info.value.field == "DESCRIPTION"

    def test_duplicate_policy_from_settings(self, minimal_cache):
        codec = CacheCodec(Settings(_env_file=None, duplicate_key_policy="reject"))
        with pytest.raises(DuplicateKeyError):
            codec.parse(minimal_cache + "SLOT=1\n")

    def test_keyword_overrides_settings(self):
        codec = CacheCodec(Settings(_env_file=None), duplicate_policy="reject")
        assert codec.duplicate_policy == "reject"

    def test_strict_codec_rejects_unknown_eapi(self, strict_codec):
        with pytest.raises(UnrecognizedLevelError):
            strict_codec.parse("EAPI=9\nDESCRIPTION=x\nSLOT=0\n")

    def test_future_eapi_is_warning(self, codec):
        result = codec.parse("EAPI=9\nDESCRIPTION=x\nSLOT=0\n")
        assert result.is_valid
        assert [w.kind for w in result.warnings] == [ViolationKind.UNRECOGNIZED_LEVEL]

    def test_gating_errors_collected(self, codec):
        result = codec.parse("EAPI=6\nDESCRIPTION=x\nSLOT=0\nBDEPEND=dev-util/cmake\n")
        assert not result.is_valid
        assert result.entry.metadata.bdepend is not None
        with pytest.raises(MetadataValidationError, match="BDEPEND"):
            result.raise_for_issues()

    def test_missing_fields_collected(self, codec):
        result = codec.parse("EAPI=7\nSLOT=0\n")
        assert [e.field for e in result.errors] == ["DESCRIPTION"]

    def test_custom_atom_parser(self, settings):
        codec = CacheCodec(settings, atom_parser=str)
        entry = codec.parse("EAPI=8\nDESCRIPTION=x\nSLOT=0\nDEPEND=not-an-atom\n").entry
        assert entry.metadata.depend.children[0].value == "not-an-atom"


class TestSerialize:
    def test_example_round_trip_is_exact(self, codec, example_cache):
        entry = codec.parse(example_cache).entry
        assert codec.serialize(entry) == example_cache

    def test_keys_sorted_and_trailing_newline(self, codec):
        text = codec.serialize(codec.parse("SLOT=0\nZZZ=1\nEAPI=5\nDESCRIPTION=x\nAAA=2\n").entry)
        keys = [line.split("=", 1)[0] for line in text.splitlines()]
        assert keys == sorted(keys)
        assert keys == ["AAA", "DESCRIPTION", "EAPI", "SLOT", "ZZZ"]
        assert text.endswith("\n")

    def test_empty_fields_omitted(self, codec):
        text = codec.serialize(codec.parse("EAPI=7\nDESCRIPTION=x\nSLOT=0\nRDEPEND=\nIUSE=\n").entry)
        assert "RDEPEND" not in text
        assert "IUSE" not in text

    def test_phase_sentinel_written(self, codec):
        text = codec.serialize(codec.parse("EAPI=7\nDESCRIPTION=x\nSLOT=0\nDEFINED_PHASES=-\n").entry)
        assert "DEFINED_PHASES=-\n" in text

    def test_whitespace_normalized(self, codec):
        text = codec.serialize(
            codec.parse("EAPI=7\nDESCRIPTION=x\nSLOT=0\nRDEPEND=  ||  (\ta/b   c/d )\n").entry
        )
        assert "RDEPEND=|| ( a/b c/d )\n" in text

    def test_future_eapi_token_kept(self, codec):
        text = codec.serialize(codec.parse("EAPI=9-rc\nDESCRIPTION=x\nSLOT=0\n").entry)
        assert "EAPI=9-rc\n" in text

    def test_constructed_entry(self, codec):
        entry = CacheEntry(
            metadata=EbuildMetadata(description="Built by hand"),
            eclasses=(EclassEntry(name="toolchain-funcs", checksum="abc"),),
        )
        assert codec.serialize(entry) == (
            "DESCRIPTION=Built by hand\n_eclasses_=toolchain-funcs\tabc\n"
        )
