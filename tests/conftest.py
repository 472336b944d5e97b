# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides sample cache records, a codec isolated from the environment,
and temp cache trees. No external dependencies; all I/O uses tmp_path.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ebuildmeta.cache.codec import CacheCodec
from ebuildmeta.config.settings import Settings

# Keys are already in lexical order, so a round trip reproduces the text exactly.
EXAMPLE_CACHE = (
    "DEFINED_PHASES=install test unpack\n"
    "DEPEND=>=sys-devel/clang-10.0.0_rc1:* dev-python/setuptools\n"
    "DESCRIPTION=Python bindings for sys-devel/clang\n"
    "EAPI=7\n"
    "HOMEPAGE=https://llvm.org/\n"
    "IUSE=test python_targets_python3_6 python_targets_python3_7\n"
    "KEYWORDS=~amd64 ~x86\n"
    "LICENSE=Apache-2.0-with-LLVM-exceptions UoI-NCSA\n"
    "RDEPEND=>=sys-devel/clang-10.0.0_rc1:*\n"
    "REQUIRED_USE=|| ( python_targets_python3_6 python_targets_python3_7 )\n"
    "RESTRICT=!test? ( test )\n"
    "SLOT=0\n"
    "SRC_URI=https://github.com/llvm/llvm-project/archive/llvmorg-10.0.0-rc1.tar.gz\n"
    "_eclasses_=llvm.org\t4e92abc\tmultibuild\t40fe1234\n"
    "_md5_=4539d849d3cea8ac84debad9b3154143\n"
)

MINIMAL_CACHE = "DESCRIPTION=Minimal\nEAPI=0\nSLOT=0\n"


# === FIXTURES: Sample data ===


@pytest.fixture
def example_cache() -> str:
    """Realistic EAPI 7 record with every common key."""
    return EXAMPLE_CACHE


@pytest.fixture
def minimal_cache() -> str:
    """Smallest record with only the mandatory keys."""
    return MINIMAL_CACHE


# === FIXTURES: Codec ===


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env file in the working directory."""
    return Settings(_env_file=None)


@pytest.fixture
def codec(settings: Settings) -> CacheCodec:
    return CacheCodec(settings)


@pytest.fixture
def strict_codec(settings: Settings) -> CacheCodec:
    """Codec that rejects duplicate keys and unknown EAPIs."""
    return CacheCodec(settings, duplicate_policy="reject", strict_eapi=True)


# === FIXTURES: Temp directories ===


@pytest.fixture
def tmp_cache_root(tmp_path: Path) -> Path:
    """Temporary md5-cache tree holding two records."""
    root = tmp_path / "md5-cache"
    (root / "dev-python").mkdir(parents=True)
    (root / "app-misc").mkdir()
    (root / "dev-python" / "clang-python-10.0.0_rc1").write_text(EXAMPLE_CACHE, encoding="utf-8")
    (root / "app-misc" / "minimal-1.0").write_text(MINIMAL_CACHE, encoding="utf-8")
    return root
