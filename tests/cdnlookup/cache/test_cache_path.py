"""
tests/cdnlookup/cache/test_cache_path.py

캐시 경로 테스트
- 이름 기반 결정적 경로
- 설정값 기본 디렉토리
- 잘못된 이름 거부
"""

import os

import pytest

from cdnlookup.cache.path import get_cache_dir, get_cache_path


class TestCachePath:
    """캐시 경로 테스트"""

    def test_get_cache_path(self, tmp_path):
        """프로바이더 이름으로 파일 경로 생성"""
        path = get_cache_path("cloudflare", str(tmp_path))

        assert path == os.path.join(str(tmp_path), ".cloudflare.cdn.ip.range")

    def test_path_is_deterministic(self, tmp_path):
        assert get_cache_path("fastly", str(tmp_path)) == get_cache_path("fastly", str(tmp_path))

    def test_does_not_create_directory(self, tmp_path):
        """경로 계산만 하고 디렉토리는 만들지 않음"""
        target = tmp_path / "nested" / "dir"

        get_cache_path("x", str(target))

        assert not target.exists()

    def test_expands_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_cache_dir("~/cdn") == os.path.join(str(tmp_path), "cdn")

    def test_defaults_to_settings(self, monkeypatch, tmp_path):
        """base_dir 생략 시 settings.CACHE_DIR 사용"""
        import cdnlookup.config as config

        monkeypatch.setattr(config, "settings", config.load_settings(CACHE_DIR=str(tmp_path)))

        assert get_cache_dir() == str(tmp_path)

    @pytest.mark.parametrize("name", ["", "   ", "../etc", "a/b", "a\\b", "..", "nul\x00"])
    def test_rejects_unsafe_names(self, tmp_path, name):
        with pytest.raises(ValueError):
            get_cache_path(name, str(tmp_path))

    def test_name_is_lowercased(self, tmp_path):
        """대소문자만 다른 이름은 같은 파일"""
        path = get_cache_path("CloudFlare", str(tmp_path))

        assert path == os.path.join(str(tmp_path), ".cloudflare.cdn.ip.range")
        assert get_cache_path("X", str(tmp_path)) == get_cache_path("x", str(tmp_path))
