"""Upload options: defaults, rc file loading and validation."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import FileStoreConfigError
from .sync.target import SyncTarget

logger = logging.getLogger(__name__)

RC_FILE_NAME = ".nwabaprc"

# Longest allowed BSP container name, not counting a /NAMESPACE/ prefix
MAX_CONTAINER_NAME_LENGTH = 15


def is_truthy(value: Any) -> bool:
    """Interpret an option given as bool or as ``"true"``/``"1"`` string."""
    return value is True or value in ("true", "1")


@dataclass
class UploadOptions:
    """All options of an upload run, named as in the rc file."""

    conn_server: str = ""
    conn_user: str = ""
    conn_password: str = ""
    conn_client: str = ""
    conn_usestrictssl: Union[bool, str] = True
    base: str = ""
    files: str = "**"
    abap_transport: str = ""
    abap_package: str = ""
    abap_bsp: str = ""
    abap_bsp_text: str = ""
    abap_language: str = "EN"
    calcappindex: Union[bool, str] = False
    git_diff_commit: str = ""
    git_diff_unstaged: bool = False
    preserve_unselected: bool = False
    files_start_with_dot: bool = False

    def update(self, values: Mapping[str, Any]) -> None:
        """Override options; ``None`` values leave the current value."""
        known = {f.name for f in fields(self)}
        for key, value in values.items():
            if value is None:
                continue
            if key not in known:
                logger.debug("Ignoring unknown option %s", key)
                continue
            setattr(self, key, value)

    @property
    def strict_ssl(self) -> bool:
        return is_truthy(self.conn_usestrictssl)

    @property
    def calc_app_index(self) -> bool:
        return is_truthy(self.calcappindex)

    @property
    def base_dir(self) -> Path:
        base = self.base
        if base.endswith(("/", "\\")):
            base = base[:-1]
        return Path(base)

    def to_sync_target(self) -> SyncTarget:
        return SyncTarget(
            base_dir=self.base_dir,
            container=self.abap_bsp,
            package=self.abap_package,
            container_description=self.abap_bsp_text,
            transport=self.abap_transport or None,
            preserve_unselected=bool(self.preserve_unselected),
            calc_app_index=self.calc_app_index,
        )


@dataclass
class ValidationReport:
    """Messages produced by validate_options."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    information: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def load_rc_file(path: Path) -> dict[str, Any]:
    """Read options from a JSON rc file.

    Raises:
        FileStoreConfigError: If the file cannot be read or is not a JSON object
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise FileStoreConfigError(f"Cannot read options from {path}: {e}") from e

    if not isinstance(data, dict):
        raise FileStoreConfigError(f"Options in {path} must be a JSON object")
    return data


def load_options(
    overrides: Mapping[str, Any], rc_path: Optional[str] = None
) -> tuple[UploadOptions, Optional[Path]]:
    """Build the options of a run.

    Defaults are overlaid with the rc file (``rc_path`` when it exists,
    otherwise ``.nwabaprc`` in the working directory) and then with
    ``overrides``.

    Args:
        overrides: Options given on the command line (``None`` = not given)
        rc_path: Optional path of the rc file to use

    Returns:
        Tuple of (options, rc file used or None)
    """
    options = UploadOptions()
    rc_file: Optional[Path] = None

    if rc_path and Path(rc_path).exists():
        rc_file = Path(rc_path)
    elif Path(RC_FILE_NAME).exists():
        rc_file = Path(RC_FILE_NAME)

    if rc_file is not None:
        logger.debug("Loading options from %s", rc_file)
        options.update(load_rc_file(rc_file))

    options.update(overrides)
    return options, rc_file


def validate_options(options: UploadOptions) -> ValidationReport:
    """Check that the options are complete and consistent."""
    report = ValidationReport()

    if not options.conn_server:
        report.errors.append("Define the SAP host.")

    if not options.base or not options.files:
        report.errors.append("Define both the base dir and files.")

    if not options.conn_user or not options.conn_password:
        report.errors.append("Define both a username and password.")

    if not options.abap_package or not options.abap_bsp or not options.abap_bsp_text:
        report.errors.append(
            "ABAP options not fully specified "
            "(check package, BSP container, BSP container text information)."
        )

    container_name = options.abap_bsp.rpartition("/")[2]
    if len(container_name) > MAX_CONTAINER_NAME_LENGTH:
        report.errors.append(
            f"BSP name must not be longer than {MAX_CONTAINER_NAME_LENGTH} characters."
        )

    if not options.abap_package.startswith(("$", "T")) and not options.abap_transport:
        report.errors.append("You should supply a transport.")

    if options.strict_ssl:
        report.information.append("If HTTPS is used, strict SSL enabled!")

    return report
