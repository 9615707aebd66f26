"""
tests/cdnlookup/test_api.py - Package-level API tests

The default engine is replaced so nothing touches the network or ~/.
"""

import pytest

import cdnlookup
from cdnlookup.exceptions import ProviderNotFoundError
from cdnlookup.registry import ProviderRegistry


@pytest.fixture
def default_engine(monkeypatch, make_provider, make_engine):
    engine = make_engine(
        make_provider("cloudflare", ranges=["104.16.0.0/13"]),
        make_provider("fastly", ranges=["151.101.0.0/16"]),
    )
    monkeypatch.setattr(cdnlookup, "_default_engine", engine)
    return engine


class TestModuleFunctions:
    """lookup / get / fetch / warm_all delegate to the default engine"""

    def test_lookup(self, default_engine):
        assert cdnlookup.lookup("151.101.1.1") == "fastly"
        assert cdnlookup.lookup("198.51.100.1") is None
        assert cdnlookup.lookup("garbage") is None

    def test_get(self, default_engine):
        assert cdnlookup.get("cloudflare").name == "cloudflare"
        with pytest.raises(ProviderNotFoundError):
            cdnlookup.get("nope")

    def test_fetch(self, default_engine):
        assert cdnlookup.fetch("cloudflare") == ["104.16.0.0/13"]
        assert cdnlookup.fetch(default_engine.get("fastly")) == ["151.101.0.0/16"]

    def test_warm_all(self, default_engine):
        result = cdnlookup.warm_all()

        assert result.success == ["cloudflare", "fastly"]
        assert result.counts == {"cloudflare": 1, "fastly": 1}


class TestDefaultEngine:
    """Lazy default engine construction"""

    def test_built_once(self, monkeypatch):
        calls = []

        def fake_registry():
            calls.append(1)
            return ProviderRegistry().freeze()

        monkeypatch.setattr(cdnlookup, "_default_engine", None)
        monkeypatch.setattr(cdnlookup, "build_default_registry", fake_registry)

        first = cdnlookup.get_default_engine()
        second = cdnlookup.get_default_engine()

        assert first is second
        assert len(calls) == 1

    def test_exports(self):
        for name in cdnlookup.__all__:
            assert hasattr(cdnlookup, name)
