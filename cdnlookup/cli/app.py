"""
cdnlookup/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    cdnlookup lookup IP [IP...]        # IP별 CDN 프로바이더 조회
    cdnlookup fetch NAME [--live]      # 프로바이더 IP 대역 출력
    cdnlookup providers                # 등록된 프로바이더 목록
    cdnlookup warm [--force]           # 전체 캐시 사전 로드
    cdnlookup cache status             # 캐시 상태
    cdnlookup cache clear [NAME...]    # 캐시 삭제
    cdnlookup --version

Usage:
    $ cdnlookup lookup 104.16.1.1 151.101.1.1
    $ cdnlookup -v fetch cloudflare
"""

import json
import logging
import sys

import click

from cdnlookup.cli.console import (
    console,
    enable_verbose_logging,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
)
from cdnlookup.config import get_version
from cdnlookup.engine import QueryEngine
from cdnlookup.exceptions import FetchError, InvalidIPError, ProviderNotFoundError
from cdnlookup.ranges import parse_ip

# WARNING 레벨로 설정하여 INFO 로그가 도구 출력에 섞이지 않도록 함
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _get_engine(ctx: click.Context) -> QueryEngine:
    """컨텍스트에 주입된 엔진 또는 기본 엔진 반환"""
    obj = ctx.ensure_object(dict)
    engine = obj.get("engine")
    if engine is None:
        from cdnlookup import get_default_engine

        engine = get_default_engine()
        obj["engine"] = engine
    return engine


def _validate_ips(ctx: click.Context, param: click.Parameter, values: tuple) -> list:
    """IP 인자 검증 (잘못된 값은 usage 에러)"""
    parsed = []
    for value in values:
        try:
            parsed.append(parse_ip(value))
        except InvalidIPError as e:
            raise click.BadParameter(e.message, ctx=ctx, param=param) from e
    return parsed


@click.group()
@click.version_option(get_version(), "--version", prog_name="cdnlookup")
@click.option("-v", "--verbose", is_flag=True, help="DEBUG 로그 출력")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """CDN IP range lookup (Akamai, Cloudflare, CloudFront, Fastly, ...)."""
    ctx.ensure_object(dict)
    if verbose:
        enable_verbose_logging()


@cli.command()
@click.argument("ips", nargs=-1, required=True, callback=_validate_ips)
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
@click.pass_context
def lookup(ctx: click.Context, ips: list, as_json: bool) -> None:
    """IP 주소를 소유한 CDN 프로바이더 조회"""
    engine = _get_engine(ctx)
    results = [(str(ip), engine.locate(ip)) for ip in ips]

    if as_json:
        click.echo(json.dumps([{"ip": ip, "provider": provider} for ip, provider in results], indent=2))
        return

    print_table(None, ["IP", "Provider"], [[ip, provider or "-"] for ip, provider in results])

    if engine.errors.has_errors:
        print_warning(f"Provider errors: {engine.errors.get_summary()} (use -v for details)")


@cli.command()
@click.argument("name")
@click.option("--live", is_flag=True, help="캐시를 무시하고 네트워크에서 직접 조회")
@click.pass_context
def fetch(ctx: click.Context, name: str, live: bool) -> None:
    """프로바이더 IP 대역 출력"""
    engine = _get_engine(ctx)
    try:
        provider = engine.get(name)
        ranges = provider.fetch_live() if live else engine.fetch(provider)
    except ProviderNotFoundError as e:
        print_error(str(e))
        print_info(f"Available: {', '.join(engine.registry.names())}")
        sys.exit(1)
    except FetchError as e:
        print_error(str(e))
        sys.exit(1)

    for entry in ranges:
        click.echo(entry)


@cli.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """등록된 프로바이더 목록"""
    engine = _get_engine(ctx)
    rows = []
    for name, provider in engine.registry.all().items():
        rows.append([name, getattr(provider.adapter, "url", type(provider.adapter).__name__)])
    print_table("CDN Providers", ["Name", "Source"], rows)


@cli.command()
@click.option("--force", is_flag=True, help="기존 캐시를 삭제하고 다시 다운로드")
@click.pass_context
def warm(ctx: click.Context, force: bool) -> None:
    """전체 프로바이더 캐시 사전 로드"""
    engine = _get_engine(ctx)
    with console.status("Downloading IP ranges..."):
        result = engine.warm_all(force=force)

    for name in result.success:
        print_success(f"{name}: {result.counts[name]} ranges")
    for name in result.failed:
        print_error(f"{name}: failed")

    if result.failed:
        print_warning(f"{len(result.failed)} of {len(result.success) + len(result.failed)} providers failed")


@cli.group()
def cache() -> None:
    """캐시 관리"""


@cache.command("status")
@click.pass_context
def cache_status(ctx: click.Context) -> None:
    """프로바이더별 캐시 상태"""
    engine = _get_engine(ctx)
    rows = []
    for name, provider in engine.registry.all().items():
        status = provider.store.status()
        if not status.cached:
            rows.append([name, "-", "-", "0", "[dim]not cached[/dim]"])
            continue
        state = "[green]valid[/green]" if status.valid else f"[yellow]{status.error}[/yellow]"
        age = f"{status.age_seconds / 3600:.1f}h" if status.age_seconds is not None else "-"
        rows.append([name, status.fetched_time or "-", age, str(status.count), state])
    print_table("Cache Status", ["Provider", "Fetched", "Age", "Ranges", "State"], rows)


@cache.command("clear")
@click.argument("names", nargs=-1)
@click.pass_context
def cache_clear(ctx: click.Context, names: tuple) -> None:
    """캐시 삭제 (이름 생략 시 전체)"""
    engine = _get_engine(ctx)
    try:
        targets = [engine.get(n) for n in names] if names else list(engine.registry.all().values())
    except ProviderNotFoundError as e:
        print_error(str(e))
        sys.exit(1)

    deleted = sum(1 for provider in targets if provider.store.clear())
    print_success(f"Deleted {deleted} cache file(s)")


if __name__ == "__main__":
    cli()
