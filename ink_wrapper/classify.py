"""
Message and constructor classification.

Messages are split by their label: ``transfer`` is an inherent message of the
contract, ``PSP22::transfer`` belongs to the ``PSP22`` namespace (an ink!
trait implementation). Namespaced messages are generated as an interface plus
the instance's implementation of it, so equally-named messages in different
namespaces never collide.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .errors import NestedNamespaceError
from .model import EntryPoint

__all__ = ["group_messages", "split_readers"]


def group_messages(
    messages: Sequence[EntryPoint],
) -> Tuple[List[EntryPoint], Dict[str, List[EntryPoint]]]:
    """
    Partition messages into the inherent list and a namespace -> messages map.

    Both keep declaration order; namespaces appear in order of first use. A
    label with more than one ``::`` raises `NestedNamespaceError`.
    """
    inherent: List[EntryPoint] = []
    grouped: Dict[str, List[EntryPoint]] = {}
    for message in messages:
        parts = message.label.split("::")
        if len(parts) == 1:
            inherent.append(message)
        elif len(parts) == 2:
            grouped.setdefault(parts[0], []).append(message)
        else:
            raise NestedNamespaceError(message.label)
    return inherent, grouped


def split_readers(messages: Sequence[EntryPoint]) -> Tuple[List[EntryPoint], List[EntryPoint]]:
    """Split messages into (readers, mutators) by their ``mutates`` flag."""
    readers = [m for m in messages if not m.mutates]
    mutators = [m for m in messages if m.mutates]
    return readers, mutators
