from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from ..models.catalog import ID_PLACEHOLDER, WILDCARD, ResourceOption, ResourceType
from ..errors import UnknownResourceType


# ------------------------------------------------------------------------------
# URN convention
#   urn:<namespace>:<service>::<type>/<id>
#   e.g. urn:revet:documents::document/42, urn:revet:iam::group/*
# Principals (attachment targets) are the iam user/group types.
# ------------------------------------------------------------------------------
PRINCIPAL_KINDS = ("user", "group")

_DEFAULT_TYPES: List[Tuple[str, str, str, str]] = [
    # (id, label, service, description)
    ("document", "Document", "documents", "Document resources"),
    ("organization", "Organization", "documents", "Organization resources"),
    ("project", "Project", "documents", "Project resources"),
    ("bucket", "Storage Bucket", "documents", "Storage bucket resources"),
    ("user", "User", "iam", "User resources"),
    ("group", "Group", "iam", "Group resources"),
]


def urn_pattern(namespace: str, service: str, type_id: str) -> str:
    return f"urn:{namespace}:{service}::{type_id}/{ID_PLACEHOLDER}"


def default_resource_types(namespace: str = "revet") -> Tuple[ResourceType, ...]:
    return tuple(
        ResourceType(id=tid, label=label, description=desc, urn_pattern=urn_pattern(namespace, svc, tid))
        for (tid, label, svc, desc) in _DEFAULT_TYPES
    )


def _split_pattern(pattern: str) -> Tuple[str, str]:
    prefix, _, suffix = pattern.partition(ID_PLACEHOLDER)
    return prefix, suffix


def _compile(pattern: str) -> Pattern[str]:
    prefix, suffix = _split_pattern(pattern)
    return re.compile(re.escape(prefix) + "(?P<id>.*)" + re.escape(suffix), re.DOTALL)


def patterns_overlap(a: str, b: str) -> bool:
    """
    True when some URN matches both patterns.

    With a match-anything placeholder, p1{id}s1 and p2{id}s2 share a match iff
    one prefix starts the other and one suffix ends the other.
    """
    pa, sa = _split_pattern(a)
    pb, sb = _split_pattern(b)
    prefixes_agree = pa.startswith(pb) or pb.startswith(pa)
    suffixes_agree = sa.endswith(sb) or sb.endswith(sa)
    return prefixes_agree and suffixes_agree


class ResourceCatalog:
    """
    Registered resource types, in registration order.

    Construction rejects patterns that could claim the same URN, so
    reverse_match never depends on registration order for the types it holds.
    Registration order is still the tie-break should that check be relaxed.
    """

    def __init__(self, types: Iterable[ResourceType]):
        self._types: Tuple[ResourceType, ...] = tuple(types)
        self._by_id: Dict[str, ResourceType] = {}
        self._matchers: List[Tuple[ResourceType, Pattern[str]]] = []
        self._compiled: Dict[str, Pattern[str]] = {}

        for t in self._types:
            if t.urn_pattern.count(ID_PLACEHOLDER) != 1:
                raise ValueError(f"urn_pattern for {t.id} must contain exactly one {ID_PLACEHOLDER}: {t.urn_pattern}")
            if t.id in self._by_id:
                raise ValueError(f"Duplicate resource type: {t.id}")
            for other in self._by_id.values():
                if patterns_overlap(t.urn_pattern, other.urn_pattern):
                    raise ValueError(
                        f"Ambiguous resource types {other.id!r} and {t.id!r}: "
                        f"{other.urn_pattern} / {t.urn_pattern}"
                    )
            self._by_id[t.id] = t
            self._compiled[t.id] = _compile(t.urn_pattern)
            self._matchers.append((t, self._compiled[t.id]))

    def types(self) -> Tuple[ResourceType, ...]:
        return self._types

    def get(self, resource_type_id: str) -> Optional[ResourceType]:
        return self._by_id.get(resource_type_id)

    # ---------------------------------------------------------------- forward

    def resolve(self, resource_type_id: str, identifier: str) -> str:
        t = self._by_id.get(resource_type_id)
        if t is None:
            raise UnknownResourceType(resource_type_id)
        if not identifier:
            raise ValueError("identifier must be non-empty (use '*' for all)")
        return t.urn_pattern.replace(ID_PLACEHOLDER, identifier)

    # --------------------------------------------------------------- backward

    def reverse_match(self, urn: str) -> Optional[ResourceType]:
        for t, rx in self._matchers:
            if rx.fullmatch(urn):
                return t
        return None

    def label(self, urn: str) -> str:
        """
        "<Type label>: <last path segment>", or "All <Type label>s" when that
        segment is the wildcard. Unknown URNs label as themselves.
        """
        if urn == WILDCARD:
            return "All Resources"
        t = self.reverse_match(urn)
        if t is None:
            return urn
        identifier = urn.rsplit("/", 1)[-1]
        if identifier == WILDCARD:
            return f"All {t.label}s"
        return f"{t.label}: {identifier}"

    # ------------------------------------------------------------- principals

    def principal_urn(self, kind: str, principal_id: str) -> str:
        if kind not in PRINCIPAL_KINDS:
            raise UnknownResourceType(kind)
        return self.resolve(kind, principal_id)

    def parse_principal(self, urn: str) -> Optional[Tuple[str, str]]:
        """(kind, id) for a concrete user/group URN, else None. Wildcards are not principals."""
        for kind in PRINCIPAL_KINDS:
            rx = self._compiled.get(kind)
            if rx is None:
                continue
            m = rx.fullmatch(urn)
            if m and m.group("id") and m.group("id") != WILDCARD:
                return kind, m.group("id")
        return None

    def principal_label(self, urn: str) -> str:
        parsed = self.parse_principal(urn)
        if parsed is None:
            return "Unknown"
        return self._by_id[parsed[0]].label

    # ----------------------------------------------------------------- picker

    def options(
        self,
        resource_type_id: str,
        entries: Sequence[Tuple[str, str]],
        query: str = "",
    ) -> List[ResourceOption]:
        """
        Picker choices for one resource type: the type wildcard first, then one
        option per (id, label) entry whose label or id contains query.
        """
        t = self._by_id.get(resource_type_id)
        if t is None:
            raise UnknownResourceType(resource_type_id)

        q = query.lower()
        out = [ResourceOption(id=WILDCARD, label=f"All {t.label}s", urn=t.placeholder)]
        for eid, elabel in entries:
            if q and q not in elabel.lower() and q not in eid.lower():
                continue
            out.append(ResourceOption(id=eid, label=elabel, urn=t.urn_pattern.replace(ID_PLACEHOLDER, eid)))
        return out
