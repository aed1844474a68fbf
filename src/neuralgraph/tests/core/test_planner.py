import torch

from neuralgraph.core import (
    CalculationCandidate,
    FullyConnected,
    Layer,
    LayerState,
    NeuralNetwork,
    TraversalState,
    order,
    plan,
)


def _fc(a: Layer, b: Layer) -> FullyConnected:
    return FullyConnected(a, b, torch.ones(b.units, a.units))


def _diamond() -> tuple[NeuralNetwork, dict[str, Layer], dict[str, FullyConnected]]:
    layers = {name: Layer(name, 2) for name in "ABCD"}
    conns = {
        "AB": _fc(layers["A"], layers["B"]),
        "AC": _fc(layers["A"], layers["C"]),
        "BD": _fc(layers["B"], layers["D"]),
        "CD": _fc(layers["C"], layers["D"]),
    }
    return NeuralNetwork(layers.values(), conns.values()), layers, conns


def test_feedforward_plan_matches_layer_order(three_layer_net: NeuralNetwork) -> None:
    net = three_layer_net
    inp, hidden, out = net.layers
    w_ih, w_ho = net.connections

    calculated = {inp}
    candidates = plan(net, out, calculated)

    assert candidates == [CalculationCandidate(w_ih, hidden), CalculationCandidate(w_ho, out)]
    assert calculated == {inp, hidden, out}


def test_reverse_plan_walks_the_same_graph_backwards(three_layer_net: NeuralNetwork) -> None:
    net = three_layer_net
    inp, hidden, out = net.layers
    w_ih, w_ho = net.connections

    candidates = plan(net, inp, {out})

    assert candidates == [CalculationCandidate(w_ho, hidden), CalculationCandidate(w_ih, inp)]
    assert [c.source for c in candidates] == [out, hidden]


def test_diamond_resolves_both_branches_before_their_last_use() -> None:
    net, layers, conns = _diamond()

    candidates = plan(net, layers["D"], {layers["A"]})

    assert candidates == [
        CalculationCandidate(conns["AB"], layers["B"]),
        CalculationCandidate(conns["BD"], layers["D"]),
        CalculationCandidate(conns["AC"], layers["C"]),
        CalculationCandidate(conns["CD"], layers["D"]),
    ]
    position = {c: i for i, c in enumerate(candidates)}
    # every source is finished before any candidate reads it
    for candidate in candidates:
        producers = [i for c, i in position.items() if c.target is candidate.source]
        assert all(i < position[candidate] for i in producers)


def test_order_is_idempotent_for_identical_state() -> None:
    net, layers, _ = _diamond()
    state = TraversalState(net, [layers["A"]])

    first: list[CalculationCandidate] = []
    second: list[CalculationCandidate] = []
    assert order(net, layers["D"], state.copy(), first)
    assert order(net, layers["D"], state.copy(), second)

    assert first == second
    assert len(first) == 4


def test_order_returns_immediately_for_calculated_layer() -> None:
    net, layers, _ = _diamond()
    state = TraversalState(net, [layers["A"]])
    candidates: list[CalculationCandidate] = []

    assert order(net, layers["A"], state, candidates) is True
    assert candidates == []
    assert state[layers["B"]] is LayerState.UNVISITED


def test_order_refuses_layer_in_progress() -> None:
    net, layers, _ = _diamond()
    state = TraversalState(net, [layers["A"]])
    state[layers["D"]] = LayerState.IN_PROGRESS
    candidates: list[CalculationCandidate] = []

    assert order(net, layers["D"], state, candidates) is False
    assert candidates == []


def test_order_tags_every_visited_layer() -> None:
    net, layers, _ = _diamond()
    state = TraversalState(net, [layers["A"]])

    order(net, layers["D"], state, [])

    assert state.calculated_layers == set(layers.values())
    assert state.in_progress_layers == set()


def test_self_loop_leaves_layer_unresolved() -> None:
    seed = Layer("seed", 1)
    a = Layer("a", 2)
    net = NeuralNetwork([seed, a], [_fc(a, a)])

    calculated = {seed}
    candidates = plan(net, a, calculated)

    assert candidates == []
    assert a not in calculated


def test_closed_loop_without_base_case_is_unresolved() -> None:
    seed = Layer("seed", 1)
    a = Layer("a", 2)
    b = Layer("b", 2)
    net = NeuralNetwork([seed, a, b], [_fc(a, b), _fc(b, a)])

    state = TraversalState(net, [seed])
    candidates: list[CalculationCandidate] = []

    assert order(net, a, state, candidates) is False
    assert candidates == []
    assert state[a] is LayerState.UNRESOLVED
    assert state[b] is LayerState.UNRESOLVED


def test_cycle_through_calculated_layer_is_pruned_per_edge() -> None:
    a, b, c, d = (Layer(name, 2) for name in "abcd")
    ab, bc, ac, cd = _fc(a, b), _fc(b, c), _fc(a, c), _fc(c, d)
    net = NeuralNetwork([a, b, c, d], [ab, bc, ac, cd])

    candidates = plan(net, d, {a})

    assert candidates == [
        CalculationCandidate(ab, b),
        CalculationCandidate(bc, c),
        CalculationCandidate(ac, c),
        CalculationCandidate(cd, d),
    ]


def test_unseeded_leaf_is_dropped_from_the_plan() -> None:
    inp = Layer("input", 2)
    out = Layer("output", 2)
    stray = Layer("stray", 2)
    main = _fc(inp, out)
    dangling = _fc(stray, out)
    net = NeuralNetwork([inp, out, stray], [main, dangling])

    calculated = {inp}
    candidates = plan(net, out, calculated)

    assert candidates == [CalculationCandidate(main, out)]
    assert stray not in calculated


def test_traversal_state_reset_restores_seed() -> None:
    net, layers, _ = _diamond()
    state = TraversalState(net, [layers["A"]])
    order(net, layers["D"], state, [])

    state.reset([layers["A"]])

    assert state.calculated_layers == {layers["A"]}
    assert state[layers["D"]] is LayerState.UNVISITED
