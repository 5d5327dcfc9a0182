from .exceptions import EmptyTreeError, LeafIndexError
from .types import Val, Hash, add_hash


Path = list[tuple[Val, bool]]  # (sibling, sibling is on the left) for each level, leaves first


def pad(level: list[Val]) -> list[Val]:
    # Levels of odd length duplicate their last node.
    return level + level[-1:] if len(level) % 2 else level


def parents(level: list[Val], hash: Hash) -> list[Val]:
    # level must already be padded
    return [hash(level[i], level[i + 1]) for i in range(0, len(level), 2)]


def compute_root(leaves: list[Val], hash: Hash) -> Val:
    if not leaves:
        raise EmptyTreeError()
    level = list(leaves)
    while len(level) > 1:
        level = parents(pad(level), hash)
    return level[0]


def fold_path(leaf: Val, path: Path, hash: Hash) -> Val:
    node = leaf
    for sibling, is_left in path:
        node = hash(sibling, node) if is_left else hash(node, sibling)
    return node


def verify_path(leaf: Val, path: Path, root: Val, hash: Hash) -> bool:
    return fold_path(leaf, path, hash) == root


class MerkleTree:
    # A binary Merkle tree over integer leaves, with the root fixed at construction.

    leaves: list[Val]
    root: Val
    hash: Hash

    def __init__(self, leaves: list[Val], hash: Hash | None = None) -> None:
        self.hash = add_hash if hash is None else hash
        self.leaves = list(leaves)
        self.root = compute_root(self.leaves, self.hash)

    def path(self, index: int) -> Path:
        if not 0 <= index < len(self.leaves):
            raise LeafIndexError(index, len(self.leaves))
        path = []
        level = self.leaves
        while len(level) > 1:
            level = pad(level)
            # odd index: the sibling precedes it, even index: the sibling follows it
            is_left = index % 2 == 1
            path.append((level[index - 1] if is_left else level[index + 1], is_left))
            index //= 2
            level = parents(level, self.hash)
        return path

    def verify(self, index: int, path: Path) -> bool:
        if not 0 <= index < len(self.leaves):
            raise LeafIndexError(index, len(self.leaves))
        return verify_path(self.leaves[index], path, self.root, self.hash)
