"""
Validation rules for tikzsketch.

Structural checks on a built DiagramGraph. Failures never stop the
pipeline; they are reported alongside the emitted TikZ.
"""

import networkx as nx

from tikzsketch.models import CheckResult, Severity, ValidationReport
from tikzsketch.tracer import get_tracer, trace


def build_connection_graph(graph):
    """
    Connection view of a diagram as a networkx MultiGraph.

    Nodes are the TikZ node ids of dots and morphisms plus one node per
    free wire endpoint; each routed edge becomes one graph edge.
    """
    g = nx.MultiGraph()

    for dot in graph.dots:
        g.add_node(dot.node_id, kind="dot")
    for morphism in graph.morphisms:
        g.add_node(morphism.node_id, kind="morphism")

    for edge in graph.edges:
        ends = []
        for label, connection in (("begin", edge.begin), ("end", edge.end)):
            if connection.kind == "free":
                node = f"w{edge.wire_index}.{label}"
                g.add_node(node, kind="free")
            else:
                node = connection.node_id
            ends.append(node)
        g.add_edge(ends[0], ends[1], key=edge.wire_index)

    return g


@trace(label="run_validation")
def run_validation(graph):
    """
    Run all validation checks on the diagram.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = [
        check_connections_resolve(graph),
        check_wire_endpoints_preserved(graph),
        check_dangling_wires(graph),
        check_isolated_nodes(graph),
    ]

    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def check_connections_resolve(graph):
    """
    Check that every connection refers to a node of this diagram.
    """
    dot_indices = {d.index for d in graph.dots}
    morphism_indices = {m.index for m in graph.morphisms}

    unresolved = []
    for annotated in graph.wires:
        for label, connection in (("begin", annotated.begin), ("end", annotated.end)):
            if connection.kind == "dot" and connection.index not in dot_indices:
                unresolved.append(f"wire {annotated.wire.index} {label} -> {connection.node_id}")
            elif connection.kind == "morphism" and connection.index not in morphism_indices:
                unresolved.append(f"wire {annotated.wire.index} {label} -> {connection.node_id}")

    if unresolved:
        return CheckResult(
            rule_id="connections_resolve",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(unresolved)} connections refer to missing nodes",
            evidence={"unresolved": unresolved},
        )

    return CheckResult(
        rule_id="connections_resolve",
        severity=Severity.ERROR,
        passed=True,
        message="All connections refer to existing nodes",
    )


def check_wire_endpoints_preserved(graph):
    """
    Check that every simplified route keeps its wire's endpoints.
    """
    wires_by_index = {a.wire.index: a.wire for a in graph.wires}

    broken = []
    for edge in graph.edges:
        wire = wires_by_index.get(edge.wire_index)
        points = edge.route.points
        if (
            wire is None
            or len(points) < 2
            or points[0].point != wire.path[0]
            or points[-1].point != wire.path[-1]
        ):
            broken.append(edge.wire_index)

    if broken:
        return CheckResult(
            rule_id="wire_endpoints_preserved",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(broken)} routes lost an endpoint",
            evidence={"wire_indices": broken},
        )

    return CheckResult(
        rule_id="wire_endpoints_preserved",
        severity=Severity.ERROR,
        passed=True,
        message="All routes keep their wire endpoints",
    )


def check_dangling_wires(graph):
    """
    Warn about wire endpoints that attach to nothing.
    """
    dangling = []
    for annotated in graph.wires:
        if annotated.begin.kind == "free" or annotated.end.kind == "free":
            dangling.append(annotated.wire.index)

    if dangling:
        return CheckResult(
            rule_id="dangling_wires",
            severity=Severity.WARN,
            passed=False,
            message=f"{len(dangling)} wires have a free endpoint",
            evidence={"wire_indices": dangling},
        )

    return CheckResult(
        rule_id="dangling_wires",
        severity=Severity.WARN,
        passed=True,
        message="Every wire is attached at both ends",
    )


def check_isolated_nodes(graph):
    """
    Report dots and morphisms that no wire touches.
    """
    g = build_connection_graph(graph)
    isolated = sorted(nx.isolates(g))
    get_tracer().event(f"{len(isolated)} isolated nodes", level="DEBUG", graph=g)

    if isolated:
        return CheckResult(
            rule_id="isolated_nodes",
            severity=Severity.INFO,
            passed=False,
            message=f"{len(isolated)} nodes have no wires",
            evidence={"nodes": isolated},
        )

    return CheckResult(
        rule_id="isolated_nodes",
        severity=Severity.INFO,
        passed=True,
        message="Every node has at least one wire",
    )
