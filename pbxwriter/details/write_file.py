import logging
from pathlib import Path

from pbxwriter.errors import WriteFailure

logger = logging.getLogger(__name__)


# Writes |content| to |path| unless the file already holds exactly that
# content, leaving its timestamp untouched. Returns True if the file was
# written.
def write_file_if_changed(path: Path, content: str) -> bool:
    path = Path(path)
    data = content.encode("utf-8")
    try:
        if path.is_file() and path.read_bytes() == data:
            logger.debug("%s is unchanged, not rewriting", path)
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as err:
        raise WriteFailure(str(path), err.strerror or str(err)) from err
    logger.debug("wrote %s", path)
    return True
