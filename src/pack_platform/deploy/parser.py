"""Parser for the table printed by `nomad-pack status`.

The tool prints a header line, a separator line and then one row per
matching deployment:

    PACK NAME | REGISTRY NAME | DEPLOYMENT NAME | JOB NAME | STATUS
    ----------+---------------+-----------------+----------+-------
    redis     | r1            | d1              | redis    | running

Only the first data row is read. This is the single place that knows the
table layout; a machine-readable output mode would replace this class.
"""

from typing import List, Optional, Union

from pack_platform.core.exceptions import OutputShapeError
from pack_platform.core.models import PackStatusRecord

# A row with this many fields or fewer means no deployment matched
NO_MATCH_MAX_FIELDS = 3
RECORD_FIELDS = 5


class StatusTableParser:
    """Reads the pack row out of status output."""

    def __init__(self, row_index: int = 2, delimiter: str = "|"):
        if row_index < 0:
            raise ValueError("row_index must be >= 0")
        if not delimiter:
            raise ValueError("delimiter cannot be empty")
        self.row_index = row_index
        self.delimiter = delimiter

    def fields(self, raw: Union[bytes, str]) -> List[str]:
        """Split the data row into fields.

        Raises:
            OutputShapeError: if the output has no line at `row_index`.
        """
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        lines = text.split("\n")
        if len(lines) <= self.row_index:
            raise OutputShapeError(
                f"expected at least {self.row_index + 1} lines of status output, got {len(lines)}"
            )
        return lines[self.row_index].split(self.delimiter)

    def parse(self, raw: Union[bytes, str]) -> Optional[PackStatusRecord]:
        """Parse status output into a record, or None when nothing matched."""
        fields = self.fields(raw)
        if len(fields) <= NO_MATCH_MAX_FIELDS:
            return None
        if len(fields) < RECORD_FIELDS:
            raise OutputShapeError(
                f"status row has {len(fields)} fields, expected {RECORD_FIELDS}"
            )
        return PackStatusRecord(
            pack_name=fields[0],
            registry_name=fields[1],
            deployment_name=fields[2],
            job_name=fields[3],
            status=fields[4],
        )

    def find_job_name(self, raw: Union[bytes, str]) -> Optional[str]:
        fields = self.fields(raw)
        if len(fields) <= NO_MATCH_MAX_FIELDS:
            return None
        return fields[3]

    def has_match(self, raw: Union[bytes, str]) -> bool:
        return len(self.fields(raw)) > NO_MATCH_MAX_FIELDS
