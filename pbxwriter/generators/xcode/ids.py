import hashlib
import logging
import struct
from typing import Set

from pbxwriter.generators.xcode.model import PBXObject, PBXProject

logger = logging.getLogger(__name__)


# Object identifier, printed unquoted in the project file
class XcodeID(str):
    pass


def compute_id(seed: str, name: str, counter: int) -> XcodeID:
    """
    Compute the 96 bits identifier of an object.

    The SHA1 digest of "<seed> <name> <counter>" is split in 32 bits words
    which are folded by XOR into three words, the result is printed as 24
    upper case hexadecimal digits.
    """
    digest = hashlib.sha1(f"{seed} {name} {counter}".encode("utf-8")).digest()
    words = [0, 0, 0]
    for index, (word,) in enumerate(struct.iter_unpack("<I", digest)):
        words[index % 3] ^= word
    return XcodeID(struct.pack("<3I", *words).hex().upper())


class IdAssigner:
    """
    Assigns an identifier to every object reachable from a project, in the
    project visitation order. The counter is shared by the whole traversal so
    two objects with the same display name still get distinct ids; on the
    (unlikely) event of a collision the counter is bumped until the id is
    fresh.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self.counter = 0
        self.issued: Set[str] = set()

    def __call__(self, obj: PBXObject) -> None:
        while True:
            candidate = compute_id(self.seed, obj.display_name(), self.counter)
            self.counter += 1
            if candidate not in self.issued:
                break
            logger.warning(
                "id collision for %s %s, retrying", obj.isa.name, obj.display_name()
            )
        self.issued.add(candidate)
        obj.set_id(candidate)


def assign_ids(project: PBXProject) -> None:
    project.visit(IdAssigner(project.display_name()))
