"""
Raw dataset model.

One source's full export as held by the storage collaborator.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RawDataset:
    """
    Opaque (id, name, csv_text) triple.
    The pipeline reads it and hands back new csv text, never edits it in place.
    """
    id: str
    name: str
    csv_text: str = ""

    def with_csv(self, csv_text: str) -> "RawDataset":
        return replace(self, csv_text=csv_text)

    def to_dict(self) -> dict:
        """Payload shape used by request handlers."""
        return {"id": self.id, "name": self.name, "csvContent": self.csv_text}


# Design Rationale and Trade-offs:
#
# 1. Why store csv text instead of parsed reviews?
#    - First imports are kept verbatim, including unknown columns
#    - Unparsable stored data can be preserved as-is by the merge
#    - Trade-off: Each read parses the text again
#
# 2. Why "csvContent" in to_dict?
#    - Matches the field name request handlers already exchange
#    - Trade-off: Two spellings of the same field
