"""
HVSC Configuration
==================

Location of the High Voltage SID Collection and of the documents inside it.
Configuration can come from:
- Default values (defined here)
- Environment variables (HVSC_BASE, HVSC_ENCODING)
- Explicit arguments (the CLI's --root option)

The configuration is a plain value passed to the functions that need it;
nothing in the package keeps paths in module state.

Catalog Keys
------------
STIL.txt, BUGlist.txt and Songlengths.md5 refer to SID files by their path
inside the collection, with forward slashes and a leading slash:

    /home/user/C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid
    -> /MUSICIANS/H/Hubbard_Rob/Commando.sid

path_to_key() performs that conversion.
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Union
import logging
import os

from hvsc_tools.textfile import DEFAULT_ENCODING

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class HVSCConfig:
    """
    Paths of an HVSC installation.

    Attributes:
        root: HVSC root directory (the directory holding DOCUMENTS/)
        stil_file: STIL.txt location, relative to root
        sldb_file: Songlengths.md5 location, relative to root
        bugs_file: BUGlist.txt location, relative to root
        encoding: Text encoding of the documents (default: latin-1)
    """

    root: Path = field(default_factory=Path.cwd)
    stil_file: Path = Path("DOCUMENTS/STIL.txt")
    sldb_file: Path = Path("DOCUMENTS/Songlengths.md5")
    bugs_file: Path = Path("DOCUMENTS/BUGlist.txt")
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "HVSCConfig":
        """
        Create HVSCConfig from environment variables.

        Environment variables (all optional):
            HVSC_BASE: HVSC root directory
            HVSC_ENCODING: Text encoding of the documents

        Returns:
            HVSCConfig with values from environment variables
        """
        config = cls()

        if root := os.environ.get("HVSC_BASE"):
            config.root = Path(root)

        if encoding := os.environ.get("HVSC_ENCODING"):
            config.encoding = encoding

        logger.debug(f"Configuration from environment: root={config.root}")
        return config

    # ═══════════════════════════════════════════════════════════════════════════
    # DOCUMENT PATHS
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def stil_path(self) -> Path:
        """Absolute path of STIL.txt."""
        return self.root / self.stil_file

    @property
    def sldb_path(self) -> Path:
        """Absolute path of Songlengths.md5."""
        return self.root / self.sldb_file

    @property
    def bugs_path(self) -> Path:
        """Absolute path of BUGlist.txt."""
        return self.root / self.bugs_file

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def path_to_key(self, path: Union[str, Path]) -> str:
        """
        Convert a SID file path into its catalog key.

        Args:
            path: Path to a SID file, absolute or relative to the working
                directory

        Returns:
            The path relative to root with a leading '/', or the path itself
            (with forward slashes) if it lies outside root. A key passed in
            is returned unchanged.
        """
        text = str(path).replace("\\", "/")
        try:
            relative = Path(path).resolve().relative_to(self.root.resolve())
        except ValueError:
            logger.debug(f"{path} is outside {self.root}, using it as key")
            return text

        return "/" + PurePosixPath(*relative.parts).as_posix()
