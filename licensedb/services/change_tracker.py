"""Field-level diffing of obligations for the audit trail."""

from dataclasses import dataclass
from typing import Any, Optional

from licensedb.database.models import Obligation


@dataclass(frozen=True)
class ObligationSnapshot:
    """Detached copy of the tracked obligation fields.

    ORM instances are updated in place, so the state before an update has
    to be copied out before any attribute is touched.
    """

    topic: str
    type: str
    text: str
    classification: str
    modifications: bool
    comment: Optional[str]
    active: bool
    text_updatable: bool

    @classmethod
    def from_model(cls, obligation: Obligation) -> "ObligationSnapshot":
        return cls(
            topic=obligation.topic,
            type=obligation.type,
            text=obligation.text,
            classification=obligation.classification,
            modifications=obligation.modifications,
            comment=obligation.comment,
            active=obligation.active,
            text_updatable=obligation.text_updatable,
        )


@dataclass(frozen=True)
class ChangeLogEntry:
    """A field whose value differs between two snapshots."""

    field: str
    old_value: Optional[str]
    updated_value: Optional[str]


# (log name, attribute) in the order entries must appear in an audit
TRACKED_FIELDS: tuple[tuple[str, str], ...] = (
    ("Topic", "topic"),
    ("Type", "type"),
    ("Text", "text"),
    ("Classification", "classification"),
    ("Modifications", "modifications"),
    ("Comment", "comment"),
    ("Active", "active"),
    ("TextUpdatable", "text_updatable"),
)


def render_value(value: Any) -> Optional[str]:
    """Render a field value the way it is stored in a change log."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def diff_obligations(
    before: ObligationSnapshot, after: ObligationSnapshot
) -> list[ChangeLogEntry]:
    """Compare two snapshots field by field.

    Args:
        before: State read before the update
        after: State after the update was applied

    Returns:
        One entry per differing field, in ``TRACKED_FIELDS`` order; empty
        when nothing changed
    """
    changes = []
    for name, attribute in TRACKED_FIELDS:
        old = getattr(before, attribute)
        new = getattr(after, attribute)
        if old != new:
            changes.append(
                ChangeLogEntry(
                    field=name,
                    old_value=render_value(old),
                    updated_value=render_value(new),
                )
            )
    return changes
