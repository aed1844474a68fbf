"""Traversal planner: orders connection evaluations for one target layer.

The network is explored depth first from the target. Each layer reached is
resolved before the connection that led to it is allowed to contribute, so the
emitted candidates form a valid evaluation order: replaying them front to back
only ever reads values of layers that are already final.

For a feed-forward pass the calculated layers hold the input; for pushing an
error signal backwards they hold the output. Restricted Boltzmann machines and
autoencoders reuse the same plan with yet other starting points.

Cycles are pruned per edge: a connection leading back into a layer that is
still being resolved is skipped. A layer whose every connection was pruned has
nothing to compute from and is tagged ``UNRESOLVED``; connections leading to it
are skipped too.
"""

from __future__ import annotations

from collections.abc import MutableSet
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from ..architecture import connections_of, opposite_layer
from .candidates import CalculationCandidate, LayerState, TraversalState

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ..architecture import Connection, Layer, NeuralNetwork

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    layer: Layer
    connections: Iterator[Connection]
    # Connection whose opposite layer is being resolved one frame up the stack
    pending: Connection | None = None
    emitted: int = 0


def order(
    network: NeuralNetwork,
    start_layer: Layer,
    state: TraversalState,
    candidates: list[CalculationCandidate],
) -> bool:
    """Append the evaluation order needed to resolve ``start_layer`` to ``candidates``.

    ``state`` is updated in place: every layer resolved on the way is tagged
    ``CALCULATED`` (or ``UNRESOLVED`` when nothing could feed it) and will not
    be visited again by later calls sharing the same state.

    Returns:
        True when ``start_layer`` has (or will have, once ``candidates`` is
        executed) a value; False when it is in progress (a cycle) or unresolvable.

    """
    tag = state[start_layer]
    if tag is LayerState.CALCULATED:
        return True
    if tag is not LayerState.UNVISITED:
        return False

    state[start_layer] = LayerState.IN_PROGRESS
    stack = [_Frame(start_layer, iter(connections_of(network, start_layer)))]
    resolved = False

    # Iterative depth-first search; emits exactly what the recursive form would
    while stack:
        frame = stack[-1]
        if frame.pending is not None:
            if resolved:
                _emit(frame, frame.pending, candidates)
            frame.pending = None

        for connection in frame.connections:
            opposite = opposite_layer(connection, frame.layer)
            tag = state[opposite]
            if tag is LayerState.CALCULATED:
                _emit(frame, connection, candidates)
            elif tag is LayerState.UNVISITED:
                state[opposite] = LayerState.IN_PROGRESS
                frame.pending = connection
                stack.append(_Frame(opposite, iter(connections_of(network, opposite))))
                break
            else:
                logger.debug("Pruning %r while resolving %r: %r is %s", connection, frame.layer, opposite, tag.value)
        else:
            stack.pop()
            resolved = frame.emitted > 0
            state[frame.layer] = LayerState.CALCULATED if resolved else LayerState.UNRESOLVED
            if not resolved:
                logger.debug("Layer %r has no calculable inputs", frame.layer)

    return resolved


def _emit(frame: _Frame, connection: Connection, candidates: list[CalculationCandidate]) -> None:
    candidates.append(CalculationCandidate(connection, frame.layer))
    frame.emitted += 1


def plan(
    network: NeuralNetwork,
    target_layer: Layer,
    calculated_layers: MutableSet[Layer] | Iterable[Layer],
) -> list[CalculationCandidate]:
    """Return the candidate sequence that resolves ``target_layer``.

    When ``calculated_layers`` is a mutable set it is extended with every layer
    the plan resolves, mirroring the in-place contract of :func:`order`.
    """
    seed = list(calculated_layers)
    state = TraversalState(network, seed)
    candidates: list[CalculationCandidate] = []
    order(network, target_layer, state, candidates)
    if isinstance(calculated_layers, MutableSet):
        calculated_layers |= state.calculated_layers
    logger.debug("Planned %d connection(s) to resolve %r", len(candidates), target_layer)
    return candidates


__all__ = ["order", "plan"]
