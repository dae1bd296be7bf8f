import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Keeps the bridge-issued username in a one-line text file,
    by default ~/.huelink/username.
    """

    def __init__(self, directory: Union[str, Path], filename: str = "username"):
        self.directory = Path(directory).expanduser()
        self.filename = filename

    @property
    def path(self) -> Path:
        return self.directory / self.filename

    def read(self) -> str:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                return fh.readline().strip()
        except FileNotFoundError:
            return ""
        except OSError as e:
            logger.warning("Could not read credential file %s: %s", self.path, e)
            return ""

    def write(self, username: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            fh.write(f"{username}\n")
        logger.debug("Stored username in %s", self.path)

    def clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
