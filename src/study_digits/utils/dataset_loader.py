"""
Line-delimited numeric record files: ``label,v0,v1,...,v783``.

Loading fails fast on the first malformed line. Writing goes through a
temporary file in the destination directory that replaces the target in one
step, so readers never see a partial file.
"""

import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

import numpy as np

from ..errors import MalformedRecordError
from ..models import VECTOR_DIMENSION, LabeledVector
from .logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def parse_record(
    line: str,
    *,
    dimension: int = VECTOR_DIMENSION,
    path: Optional[str] = None,
    line_number: Optional[int] = None,
) -> LabeledVector:
    """
    Parse one comma-separated record into a LabeledVector.

    Args:
        line: Record text (surrounding whitespace is ignored)
        dimension: Expected vector length
        path: Source file, used in error messages
        line_number: 1-based line number, used in error messages

    Raises:
        MalformedRecordError: On a wrong field count or a non-integer field
    """
    fields = line.strip().split(",")
    if len(fields) != dimension + 1:
        raise MalformedRecordError(
            f"expected {dimension + 1} fields, got {len(fields)}",
            path=path,
            line_number=line_number,
        )
    try:
        values = [int(f) for f in fields]
    except ValueError as e:
        raise MalformedRecordError(str(e), path=path, line_number=line_number) from e

    return LabeledVector(label=values[0], vector=np.array(values[1:], dtype=np.int64))


def format_record(item: LabeledVector) -> str:
    """
    Serialize a LabeledVector back into the record layout.

    Raises:
        ValueError: If a component is not a whole number, since such a
            record could not be loaded again
    """
    fields = [str(item.label)]
    for v in item.vector:
        if not float(v).is_integer():
            raise ValueError(
                f"Cannot write record with label {item.label}: component {v!r} is not an integer"
            )
        fields.append(str(int(v)))
    return ",".join(fields)


def load_labeled_vectors(
    path: PathLike,
    *,
    dimension: int = VECTOR_DIMENSION,
    limit: Optional[int] = None,
) -> List[LabeledVector]:
    """
    Load every record of *path* in file order.

    Blank lines are skipped.

    Args:
        path: Record file
        dimension: Expected vector length
        limit: Stop after this many records

    Raises:
        FileNotFoundError: If *path* does not exist
        MalformedRecordError: On the first malformed line
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    records: List[LabeledVector] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if limit is not None and len(records) >= limit:
                break
            if not line.strip():
                continue
            records.append(
                parse_record(line, dimension=dimension, path=str(path), line_number=line_number)
            )

    logger.info("Loaded %d records from %s", len(records), path)
    return records


def _target_mode(path: Path) -> int:
    """Permission bits for *path*: the existing file's, else 0o666 less the umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask



def write_labeled_vectors(path: PathLike, vectors: Iterable[LabeledVector]) -> Path:
    """
    Write *vectors* to *path*, one record per line, replacing it atomically.

    Returns:
        The destination path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    count = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for item in vectors:
                f.write(format_record(item))
                f.write("\n")
                count += 1
        # mkstemp creates the file 0600; keep the permissions a plain write would give.
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise

    logger.info("Wrote %d records to %s", count, path)
    return path
