"""
konabuild — CLI entrypoint.

Usage:
    python -m konabuild.main --help
    python -m konabuild.main tests select --json
    python -m konabuild.main -D ks.path=release.p12 release --publish
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from konabuild import __version__
from konabuild.core.observability.logging_config import resolve_level, setup_from_env


def _load_config(ctx: click.Context):
    """Load BuildConfig from the global options, exiting on error."""
    from konabuild.core.config.loader import ConfigError, load_config, parse_overrides

    try:
        overrides = parse_overrides(ctx.obj.get("properties", ()))
        return load_config(ctx.obj.get("config_path"), overrides=overrides)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="konabuild")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to kona-build.yml (default: auto-detect).",
)
@click.option(
    "-D",
    "properties",
    multiple=True,
    metavar="KEY=VALUE",
    help="Runtime property override (e.g. -D ks.path=release.p12).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    properties: tuple[str, ...],
) -> None:
    """konabuild — test selection and release policy for Kona modules."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["properties"] = properties

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


# ── Config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the resolved configuration (secrets masked)."""
    cfg = _load_config(ctx)
    click.echo(json.dumps(cfg.model_dump(mode="json"), indent=2))


# ── Probe ───────────────────────────────────────────────────────


@cli.command()
@click.option("--tool", default=None, help="Interop tool path (default: test.babassl.path).")
@click.option("--timeout", type=float, default=None, help="Seconds to wait (default: 3).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def probe(ctx: click.Context, tool: str | None, timeout: float | None, as_json: bool) -> None:
    """Check whether the BabaSSL interop tool is available."""
    from konabuild.core.services.interop_probe import PROBE_TIMEOUT_SECONDS
    from konabuild.core.services.interop_probe import probe as run_probe

    executable = tool or _load_config(ctx).interop_tool_path
    result = run_probe(executable, timeout=PROBE_TIMEOUT_SECONDS if timeout is None else timeout)

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json") | {"available": result.available}, indent=2))
        return

    if result.available:
        click.secho(f"✅ BabaSSL available: {result.resolved_path}", fg="green")
    else:
        click.secho(f"⚠️  BabaSSL unavailable ({result.status}): {result.cause}", fg="yellow")


# ── Tests ───────────────────────────────────────────────────────


@cli.group()
def tests() -> None:
    """Test selection and reporting."""


@tests.command("select")
@click.option(
    "--platform",
    "platform_name",
    type=click.Choice(["windows", "other"]),
    default=None,
    help="Override host platform detection.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--properties",
    "as_properties",
    is_flag=True,
    help="Print only runtime properties as -Dkey=value lines.",
)
@click.pass_context
def tests_select(
    ctx: click.Context,
    platform_name: str | None,
    as_json: bool,
    as_properties: bool,
) -> None:
    """Compute include/exclude patterns for this host."""
    from konabuild.core.models.platform import HostPlatform
    from konabuild.core.use_cases.test_policy import compute_test_policy

    cfg = _load_config(ctx)
    platform = HostPlatform(platform_name) if platform_name else None
    result = compute_test_policy(cfg, platform=platform)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if as_properties:
        for key, value in result.filter.system_properties.items():
            click.echo(f"-D{key}={value}")
        return

    click.secho(f"\n🧪 Test policy ({result.platform})", fg="cyan", bold=True)
    for pattern in result.filter.includes:
        click.secho(f"   + {pattern}", fg="green")
    for pattern in result.filter.excludes:
        click.secho(f"   - {pattern}", fg="red")
    for key, value in result.filter.system_properties.items():
        click.echo(f"   {key} = {value}")
    if not result.probe.available:
        click.secho(f"   BabaSSL unavailable: {result.probe.cause}", fg="yellow")
    click.echo()


@tests.command("filter")
@click.argument("names", nargs=-1)
@click.option(
    "--platform",
    "platform_name",
    type=click.Choice(["windows", "other"]),
    default=None,
    help="Override host platform detection.",
)
@click.pass_context
def tests_filter(ctx: click.Context, names: tuple[str, ...], platform_name: str | None) -> None:
    """Print the test class names that would run.

    Names come from arguments, or one per line on stdin.
    """
    from konabuild.core.models.platform import HostPlatform
    from konabuild.core.use_cases.test_policy import compute_test_policy

    candidates = list(names) or [
        line.strip() for line in click.get_text_stream("stdin") if line.strip()
    ]
    cfg = _load_config(ctx)
    platform = HostPlatform(platform_name) if platform_name else None
    result = compute_test_policy(cfg, platform=platform)

    for name in result.filter.select(candidates):
        click.echo(name)


@tests.command("summary")
@click.option(
    "--dir",
    "reports_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="JUnit XML report directory (default: reports_dir from config).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def tests_summary(ctx: click.Context, reports_dir: str | None, as_json: bool) -> None:
    """Summarize JUnit XML test reports."""
    from konabuild.core.services.test_report import ReportError, summarize_reports

    if reports_dir is None:
        cfg = _load_config(ctx)
        directory = Path(cfg.root) / cfg.reports_dir
    else:
        directory = Path(reports_dir)

    try:
        summary = summarize_reports(directory)
    except ReportError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        click.echo(summary.line())
        for name in summary.failures:
            click.secho(f"   ✗ {name}", fg="red")

    if not summary.ok:
        sys.exit(1)


# ── Release ─────────────────────────────────────────────────────


@cli.command()
@click.argument("modules", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def metadata(modules: tuple[str, ...], as_json: bool) -> None:
    """Show publish metadata for module names."""
    from konabuild.core.models.release import ModuleIdentity
    from konabuild.core.services.module_metadata import resolve

    resolved = {name: resolve(ModuleIdentity(name=name)) for name in modules}

    if as_json:
        click.echo(json.dumps({k: v.model_dump(mode="json") for k, v in resolved.items()}, indent=2))
        return

    for name, meta in resolved.items():
        click.secho(f"📦 {name}", fg="cyan", bold=True)
        click.echo(f"   {meta.title}")
        click.echo(f"   {meta.description}")
        click.echo(f"   {meta.source_url}")
        click.echo(f"   {meta.license_name}")


@cli.command("publish-target")
@click.argument("version", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def publish_target(ctx: click.Context, version: str | None, as_json: bool) -> None:
    """Show the repository a version publishes to (default: project version)."""
    from konabuild.core.models.release import VersionString
    from konabuild.core.services.publish_target import resolve_target

    cfg = _load_config(ctx)
    target = resolve_target(VersionString(raw=version or cfg.project.version), cfg.repositories)

    if as_json:
        click.echo(json.dumps(target.model_dump(mode="json"), indent=2))
        return
    click.echo(f"{target.kind}: {target.url}")


@cli.command()
@click.argument("artifact", type=click.Path())
@click.option("--signer", default=None, help="jarsigner executable (default: from JAVA_HOME).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sign(ctx: click.Context, artifact: str, signer: str | None, as_json: bool) -> None:
    """Sign a jar with the configured keystore (ks.* properties)."""
    from konabuild.core.services.signing import default_signer
    from konabuild.core.services.signing import sign as run_sign

    cfg = _load_config(ctx)
    result = run_sign(artifact, cfg.signing, signer=signer or default_signer(cfg.java_home))

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    elif result.status == "signed":
        click.secho(f"✅ Signed {artifact}", fg="green")
    elif result.status == "skipped":
        click.secho(f"⏭️  Signing skipped: {result.cause}", fg="yellow")
    else:
        click.secho(f"❌ Signing failed: {result.cause}", fg="red")

    if result.failed:
        sys.exit(1)


@cli.command()
@click.option("--module", "-m", "modules", multiple=True, help="Target specific modules.")
@click.option("--publish", is_flag=True, help="Require credentials and write publication descriptors.")
@click.option(
    "--require-signature",
    is_flag=True,
    help="Withhold modules whose signing failed.",
)
@click.option("--signer", default=None, help="jarsigner executable (default: from JAVA_HOME).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def release(
    ctx: click.Context,
    modules: tuple[str, ...],
    publish: bool,
    require_signature: bool,
    signer: str | None,
    as_json: bool,
) -> None:
    """Resolve metadata, sign, and pick the destination for each module."""
    from konabuild.core.use_cases.release import PublishError, run_release

    cfg = _load_config(ctx)
    try:
        result = run_release(
            cfg,
            list(modules) or None,
            publish=publish,
            require_signature=require_signature,
            signer=signer,
        )
    except PublishError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.target:
        click.secho(f"\n🚀 {result.version} → {result.target.kind} ({result.target.url})", fg="cyan", bold=True)
    status_color = {"signed": "green", "skipped": "yellow", "failed": "red"}
    for mod in result.modules:
        click.echo(f"   • {mod.module} — {mod.metadata.title} — signature: ", nl=False)
        click.secho(mod.signature.status, fg=status_color[mod.signature.status])
        if mod.descriptor:
            click.echo(f"     descriptor: {mod.descriptor}")

    if result.errors:
        click.echo()
        click.secho("❌ Errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
