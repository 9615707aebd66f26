# tests/cli/test_console_helpers.py
"""
cdnlookup/cli/console 헬퍼 함수 단위 테스트

print_success, print_error, print_warning, print_info, print_table,
enable_verbose_logging.
"""

import logging

import pytest
from rich.logging import RichHandler

# =============================================================================
# 메시지 출력 테스트
# =============================================================================


class TestPrintMessages:
    """상태 메시지 출력 테스트"""

    @pytest.mark.parametrize(
        "func_name, symbol",
        [
            ("print_success", "✓"),
            ("print_error", "✗"),
            ("print_warning", "!"),
            ("print_info", "•"),
        ],
    )
    def test_symbol_and_text(self, capsys, func_name, symbol):
        from cdnlookup.cli import console

        getattr(console, func_name)("done")

        out = capsys.readouterr().out
        assert f"{symbol} done" in out


# =============================================================================
# print_table 테스트
# =============================================================================


class TestPrintTable:
    """print_table 테스트"""

    def test_basic_table(self, capsys):
        from cdnlookup.cli.console import print_table

        print_table("Providers", ["Name", "Source"], [["fastly", "api"], ["bunny", "plain"]])

        out = capsys.readouterr().out
        assert "Providers" in out
        assert "fastly" in out
        assert "bunny" in out

    def test_without_title(self, capsys):
        from cdnlookup.cli.console import print_table

        print_table(None, ["IP"], [["10.0.0.1"]])

        assert "10.0.0.1" in capsys.readouterr().out

    def test_empty_rows(self, capsys):
        """빈 행 목록도 헤더는 출력"""
        from cdnlookup.cli.console import print_table

        print_table(None, ["Provider"], [])

        assert "Provider" in capsys.readouterr().out


# =============================================================================
# enable_verbose_logging 테스트
# =============================================================================


class TestVerboseLogging:
    """enable_verbose_logging 테스트"""

    @pytest.fixture
    def root_logger(self):
        """루트 logger 상태 복원"""
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        yield root
        root.handlers = handlers
        root.setLevel(level)

    def test_adds_single_rich_handler(self, root_logger):
        from cdnlookup.cli.console import enable_verbose_logging

        enable_verbose_logging()
        enable_verbose_logging()

        rich_handlers = [h for h in root_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert root_logger.level == logging.DEBUG

    def test_custom_level(self, root_logger):
        from cdnlookup.cli.console import enable_verbose_logging

        enable_verbose_logging(logging.INFO)

        assert root_logger.level == logging.INFO

    def test_replaces_plain_stream_handler(self, root_logger):
        """basicConfig가 붙인 StreamHandler는 Rich 핸들러로 교체"""
        from cdnlookup.cli.console import enable_verbose_logging

        plain = logging.StreamHandler()
        root_logger.addHandler(plain)

        enable_verbose_logging()

        assert plain not in root_logger.handlers
        assert not [h for h in root_logger.handlers if type(h) is logging.StreamHandler]
        assert any(isinstance(h, RichHandler) for h in root_logger.handlers)
