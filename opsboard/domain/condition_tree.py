"""
Condition tree - nested AND/OR/subgroup filter expressions for rules and presets.

Kinds:
  first    - leading condition of a sibling list (rendered as "Where")
  and      - joined with AND
  or       - joined with OR
  subgroup - nested list of conditions, no field/operator/value of its own

Every sibling list (root or subgroup) is non-empty, and index 0 is the only
`first` node in it. The mutation helpers below keep that true, so callers never
have to relabel by hand.

Wire format (backend records):
  leaf     {"type": "where"|"and"|"or", "column", "operator", "value", "value2"}
  subgroup {"type": "subgroup", "conditions": [...]}

Inbound records are normalised rather than rejected: validation belongs to the
backend, the editor must always get a usable tree.
"""
from dataclasses import dataclass, field as dc_field
from typing import Any


KIND_FIRST = "first"
KIND_AND = "and"
KIND_OR = "or"
KIND_SUBGROUP = "subgroup"
VALID_KINDS = frozenset({KIND_FIRST, KIND_AND, KIND_OR, KIND_SUBGROUP})

WIRE_WHERE = "where"
WIRE_SUBGROUP = "subgroup"

_KIND_TO_WIRE = {KIND_FIRST: WIRE_WHERE, KIND_AND: "and", KIND_OR: "or"}

LABEL_WHERE = "Where"
LABEL_AND = "AND"
LABEL_OR = "OR"


@dataclass
class Condition:
    kind: str = KIND_AND
    field: Any = ""  # raw column id or an autocomplete option
    operator: Any = ""  # raw operator id or an autocomplete option
    value: Any = ""
    value2: Any = None  # only meaningful for range operators (between)
    children: list["Condition"] | None = dc_field(default=None)

    @property
    def is_subgroup(self) -> bool:
        return self.kind == KIND_SUBGROUP


# ---------------------------------------------------------------------------
# Construction / mutation
# ---------------------------------------------------------------------------

def create_root() -> list[Condition]:
    return [Condition(kind=KIND_FIRST)]


def append_condition(sequence: list[Condition]) -> Condition:
    node = Condition(kind=KIND_AND)
    sequence.append(node)
    return node


def append_subgroup(sequence: list[Condition]) -> Condition:
    node = Condition(kind=KIND_SUBGROUP, children=create_root())
    sequence.append(node)
    return node


def append_to_subgroup(node: Condition) -> Condition | None:
    """Append a blank AND condition inside a subgroup. No-op for leaf nodes."""
    if not node.is_subgroup:
        return None
    if node.children is None:
        node.children = []
    return append_condition(node.children)


def remove_at(sequence: list[Condition], index: int) -> None:
    """
    Remove the node at `index` and relabel so that index 0 is `first`.

    Out-of-range indexes are ignored. Removing the last remaining node leaves a
    blank `first` node in its place, since a sibling list is never empty. A
    subgroup left on its own is dissolved: its children move up into `sequence`.
    """
    if index < 0 or index >= len(sequence):
        return
    if len(sequence) == 1:
        sequence[0] = Condition(kind=KIND_FIRST)
        return
    del sequence[index]
    while len(sequence) == 1 and sequence[0].is_subgroup:
        sequence[:] = sequence[0].children or create_root()
    _relabel(sequence)


def remove_from_subgroup(node: Condition, index: int) -> None:
    if node.is_subgroup and node.children:
        remove_at(node.children, index)


def _relabel(sequence: list[Condition]) -> None:
    for i, node in enumerate(sequence):
        if node.is_subgroup:
            continue
        if i == 0:
            node.kind = KIND_FIRST
        elif node.kind == KIND_FIRST:
            node.kind = KIND_AND


def normalize(sequence: list[Condition]) -> list[Condition]:
    """Apply the first-node rule at every level (in place). Idempotent."""
    if not sequence:
        sequence.extend(create_root())
        return sequence
    _relabel(sequence)
    for node in sequence:
        if node.is_subgroup:
            if not node.children:
                node.children = create_root()
            normalize(node.children)
    return sequence


def condition_label(node: Condition, index: int) -> str:
    if index == 0 and node.kind == KIND_FIRST:
        return LABEL_WHERE
    if node.kind == KIND_OR:
        return LABEL_OR
    return LABEL_AND


def label_tree(sequence: list[Condition]) -> list[dict[str, Any]]:
    """Labels for every node, nested the same way as the tree (for renderers)."""
    out: list[dict[str, Any]] = []
    for i, node in enumerate(sequence):
        out.append({
            "label": condition_label(node, i),
            "children": label_tree(node.children) if node.is_subgroup and node.children else None,
        })
    return out


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------

def unwrap_option(value: Any) -> Any:
    """
    Autocomplete widgets bind whole option objects ({"label", "value"});
    the backend only wants the identifier.
    """
    if isinstance(value, dict):
        unwrapped = value.get("value", "")
        return "" if unwrapped is None else unwrapped
    if value is not None and not isinstance(value, str) and hasattr(value, "value"):
        return "" if value.value is None else value.value
    return value


def to_payload(sequence: list[Condition]) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for node in sequence:
        if node.is_subgroup:
            records.append({
                "type": WIRE_SUBGROUP,
                "conditions": to_payload(node.children or []),
            })
            continue
        records.append({
            "type": _KIND_TO_WIRE.get(node.kind, "and"),
            "column": unwrap_option(node.field),
            "operator": unwrap_option(node.operator),
            "value": node.value,
            "value2": node.value2,
        })
    return records


def from_payload(records: Any) -> list[Condition]:
    if not isinstance(records, list) or not records:
        return create_root()

    out: list[Condition] = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            record = {}
        nested = record.get("conditions")
        if record.get("type") == WIRE_SUBGROUP and isinstance(nested, list) and nested:
            out.append(Condition(kind=KIND_SUBGROUP, children=from_payload(nested)))
            continue

        if i == 0:
            kind = KIND_FIRST
        elif record.get("type") == "or":
            kind = KIND_OR
        else:
            kind = KIND_AND

        column = record.get("column")
        if column is None:
            column = record.get("field")
        out.append(Condition(
            kind=kind,
            field="" if column is None else column,
            operator="" if record.get("operator") is None else record.get("operator"),
            value="" if record.get("value") is None else record.get("value"),
            value2=record.get("value2"),
        ))
    return out
