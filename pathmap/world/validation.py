# pathmap/world/validation.py
import structlog

log = structlog.get_logger()


class GenerationRejected(RuntimeError):
    """A generation attempt produced an unusable board.

    Recoverable: the caller throws the whole attempt away and rebuilds from a
    fresh seed.
    """

    def __init__(self, reason: str, edge_count: int = 0):
        super().__init__(reason)
        self.reason = reason
        self.edge_count = edge_count


def is_connected_enough(edge_count: int, map_length: int) -> bool:
    """A board needs strictly more connections than it has floors."""
    return edge_count > map_length


def check_connectivity(edge_count: int, map_length: int) -> None:
    """Raise :class:`GenerationRejected` for near single-path boards."""
    if not is_connected_enough(edge_count, map_length):
        log.debug(
            "Connectivity check failed", connections=edge_count, map_length=map_length
        )
        raise GenerationRejected(
            f"only {edge_count} connections for {map_length} floors",
            edge_count=edge_count,
        )
