"""
Chart-of-accounts hierarchy as an explicit forest.

Accounts are loaded once into an arena keyed by id, with a children index per
node. Depth and ancestry are computed by walking parent links with cycle
detection, so bad data (a parent pointing back into its own subtree) is
reported instead of recursing forever.
"""

import logging
from typing import Dict, Iterable, List, Optional

from exceptions import InvalidHierarchy

logger = logging.getLogger(__name__)


class AccountForest:

    def __init__(self, accounts: Iterable):
        self.nodes: Dict[int, object] = {}
        self.children: Dict[int, List[int]] = {}
        self.roots: List[int] = []

        for account in accounts:
            self.nodes[account.id] = account
            self.children.setdefault(account.id, [])

        for account in self.nodes.values():
            parent_id = account.parent_id
            if parent_id is None:
                self.roots.append(account.id)
            elif parent_id in self.nodes:
                self.children[parent_id].append(account.id)
            else:
                # Parent is outside this tenant's chart; show the account at the top level.
                logger.warning(f"Account {account.id} references unknown parent {parent_id}; treating as root")
                self.roots.append(account.id)

        self.roots.sort(key=self._code)
        for child_ids in self.children.values():
            child_ids.sort(key=self._code)

    def _code(self, account_id: int) -> str:
        return self.nodes[account_id].account_code

    def __contains__(self, account_id: int) -> bool:
        return account_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def ancestors(self, account_id: int) -> List[int]:
        """Ids from the direct parent up to the root."""
        chain = []
        seen = {account_id}
        parent_id = self.nodes[account_id].parent_id
        while parent_id is not None and parent_id in self.nodes:
            if parent_id in seen:
                raise InvalidHierarchy(f"Cycle detected in account hierarchy at account {parent_id}")
            seen.add(parent_id)
            chain.append(parent_id)
            parent_id = self.nodes[parent_id].parent_id
        return chain

    def depth(self, account_id: int) -> int:
        """Root accounts have depth 1."""
        return len(self.ancestors(account_id)) + 1

    def subtree_height(self, account_id: int) -> int:
        height = 1
        stack = [(account_id, 1)]
        seen = set()
        while stack:
            node_id, level = stack.pop()
            if node_id in seen:
                raise InvalidHierarchy(f"Cycle detected in account hierarchy at account {node_id}")
            seen.add(node_id)
            height = max(height, level)
            stack.extend((child_id, level + 1) for child_id in self.children[node_id])
        return height

    def to_nested(self, account_id: Optional[int] = None) -> List[dict]:
        """Roots (or the children of `account_id`) with children nested, ordered by code."""
        ids = self.roots if account_id is None else self.children[account_id]
        return [self._node_dict(node_id, set()) for node_id in ids]

    def _node_dict(self, account_id: int, path: set) -> dict:
        if account_id in path:
            raise InvalidHierarchy(f"Cycle detected in account hierarchy at account {account_id}")
        path = path | {account_id}
        account = self.nodes[account_id]
        return {
            "id": account.id,
            "parent_id": account.parent_id,
            "account_code": account.account_code,
            "account_name": account.account_name,
            "account_type": account.account_type,
            "sub_type": account.sub_type,
            "balance": account.balance,
            "is_system": account.is_system,
            "is_active": account.is_active,
            "children": [self._node_dict(child_id, path) for child_id in self.children[account_id]],
        }
