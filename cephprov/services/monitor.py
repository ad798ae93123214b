"""Monitor node selection."""

import logging
import random
import uuid
from typing import Iterable, List, Union

from cephprov.core.exceptions import NoMonitorsAvailable
from cephprov.models.topology import Node

logger = logging.getLogger(__name__)


def cluster_monitors(nodes: Iterable[Node], cluster_id: uuid.UUID) -> List[Node]:
    """Nodes of ``cluster_id`` flagged as monitors."""
    return [n for n in nodes if n.cluster_id == cluster_id and n.is_monitor]


def select_monitor(
    nodes: Iterable[Node],
    cluster_id: uuid.UUID,
    rng: Union[random.Random, None] = None,
) -> Node:
    """Pick the monitor to send control API calls to.

    The choice is uniform over eligible monitors and is not remembered
    between calls.

    Args:
        nodes: Nodes of the cluster
        cluster_id: Cluster the request targets
        rng: Random source, defaults to the module-level generator

    Returns:
        The selected monitor node

    Raises:
        NoMonitorsAvailable: If no node of the cluster is a monitor
    """
    mons = cluster_monitors(nodes, cluster_id)
    if not mons:
        raise NoMonitorsAvailable(str(cluster_id))

    if len(mons) == 1:
        return mons[0]

    chooser = rng or random
    mon = chooser.choice(mons)
    logger.debug(f"Selected monitor {mon.hostname} out of {len(mons)} for cluster {cluster_id}")
    return mon
