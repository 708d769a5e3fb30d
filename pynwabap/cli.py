"""CLI interface for deploying files to a SAP NetWeaver ABAP file store."""

import logging
from typing import Any, Optional

import click

from . import __version__
from .api import FileStoreClient
from .config import UploadOptions, load_options, validate_options
from .exceptions import FileStoreConfigError, LocalFilesError
from .local_files import find_files, git_changed_files
from .output import OutputFormatter
from .sync import SyncEngine

logger = logging.getLogger(__name__)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: Any, quiet: bool, json_output: bool, verbose: bool) -> None:
    """PyNWABAP - Deploy local files into a SAP NetWeaver ABAP BSP container."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json_output, quiet=quiet)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pynwabap").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.pass_context
def version(ctx: Any) -> None:
    """Show the current version."""
    out: OutputFormatter = ctx.obj["out"]
    if out.json_output:
        out.output_json({"version": __version__})
    else:
        click.echo(f"pynwabap {__version__}")


@main.command()
@click.option("--conn_server", envvar="NWABAP_SERVER", help="SAP host")
@click.option("--conn_user", envvar="NWABAP_USER", help="SAP user")
@click.option("--conn_password", envvar="NWABAP_PASSWORD", help="SAP password")
@click.option(
    "--conn_client",
    help="Client, transferred as sap-client URL parameter "
    "(default client of the system if not specified)",
)
@click.option(
    "--conn_usestrictssl",
    help="Verify TLS certificates (default: true). Set to false for "
    "self-signed certificates.",
)
@click.option("--base", help="Base dir")
@click.option("--files", help="Files to upload, relative to the base dir (default: **)")
@click.option("--abap_transport", help="ABAP transport no.")
@click.option("--abap_package", help="ABAP package name")
@click.option("--abap_bsp", help="ABAP BSP container ID")
@click.option("--abap_bsp_text", help="ABAP BSP container name")
@click.option("--abap_language", help="ABAP language (default: EN)")
@click.option("--calcappindex", help="Re-calculate application index")
@click.option(
    "--git_diff_commit",
    help="Git commit, branch or reference to compare the current state with. "
    "Only files changed since then (added, modified or deleted) are uploaded.",
)
@click.option(
    "--git_diff_unstaged",
    is_flag=True,
    help="Include unstaged files in git diff.",
)
@click.option(
    "--preserve_unselected",
    is_flag=True,
    help="Don't delete files from the BSP container that were not selected "
    "to upload. Useful with --git_diff_commit to keep unchanged files.",
)
@click.option("--nwabaprc", help="Path of the .nwabaprc file to use")
@click.option(
    "--dry-run", is_flag=True, help="Show what would be synced without syncing"
)
@click.pass_context
def upload(
    ctx: Any,
    conn_server: Optional[str],
    conn_user: Optional[str],
    conn_password: Optional[str],
    conn_client: Optional[str],
    conn_usestrictssl: Optional[str],
    base: Optional[str],
    files: Optional[str],
    abap_transport: Optional[str],
    abap_package: Optional[str],
    abap_bsp: Optional[str],
    abap_bsp_text: Optional[str],
    abap_language: Optional[str],
    calcappindex: Optional[str],
    git_diff_commit: Optional[str],
    git_diff_unstaged: bool,
    preserve_unselected: bool,
    nwabaprc: Optional[str],
    dry_run: bool,
) -> None:
    """Upload files to a BSP container.

    The container is made to match the selected files: new files and
    folders are created, existing ones updated and everything else in the
    container deleted (unless --preserve_unselected is given).

    Options can also be kept in a JSON file named .nwabaprc in the working
    directory, using the option names as keys.

    Examples:
        pynwabap upload --base dist --abap_package ZPKG --abap_bsp ZAPP \\
            --abap_bsp_text "My app" --abap_transport DEVK900001
        pynwabap upload --git_diff_commit main --preserve_unselected
        pynwabap upload --dry-run
    """
    out: OutputFormatter = ctx.obj["out"]

    overrides = {
        "conn_server": conn_server,
        "conn_user": conn_user,
        "conn_password": conn_password,
        "conn_client": conn_client,
        "conn_usestrictssl": conn_usestrictssl,
        "base": base,
        "files": files,
        "abap_transport": abap_transport,
        "abap_package": abap_package,
        "abap_bsp": abap_bsp,
        "abap_bsp_text": abap_bsp_text,
        "abap_language": abap_language,
        "calcappindex": calcappindex,
        "git_diff_commit": git_diff_commit,
        # Flags only override the rc file when given
        "git_diff_unstaged": git_diff_unstaged or None,
        "preserve_unselected": preserve_unselected or None,
    }

    try:
        options, rc_file = load_options(overrides, rc_path=nwabaprc)
    except FileStoreConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if rc_file is not None and nwabaprc:
        out.info(f"Using file {rc_file}")

    report = validate_options(options)
    for message in report.warnings:
        out.warning(message)
    for message in report.errors:
        out.error(message)
    if not report.ok:
        ctx.exit(1)
    for message in report.information:
        out.info(message)

    try:
        selected = _select_files(options)
    except LocalFilesError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if not selected:
        out.warning("No files found. Stopping...")
        ctx.exit(1)

    out.info(f"Found {len(selected)} files. Starting upload...")

    client = FileStoreClient(
        server=options.conn_server,
        user=options.conn_user,
        password=options.conn_password,
        sap_client=options.conn_client or None,
        language=options.abap_language,
        strict_ssl=options.strict_ssl,
    )

    try:
        with client:
            engine = SyncEngine(client, out)
            result = engine.sync_files(
                selected, options.to_sync_target(), dry_run=dry_run
            )
    except KeyboardInterrupt:
        out.warning("\nUpload cancelled by user")
        ctx.exit(130)
        return
    except ValueError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    out.output_json(result.to_dict())

    if result.index_error is not None:
        out.warning(f"Application index was not calculated: {result.index_error}")

    if result.error is not None:
        out.error(str(result.error))
        if result.completed:
            out.warning(
                f"{len(result.completed)} change(s) were applied before the "
                f"failure, {len(result.remaining)} were not applied."
            )
        ctx.exit(1)


def _select_files(options: UploadOptions) -> list[str]:
    """Select the files to deploy, from git changes or the glob pattern."""
    if options.git_diff_commit:
        return git_changed_files(
            options.base_dir,
            options.files,
            options.git_diff_commit,
            include_unstaged=bool(options.git_diff_unstaged),
        )
    return find_files(
        options.base_dir,
        options.files,
        include_dot_files=bool(options.files_start_with_dot),
    )
