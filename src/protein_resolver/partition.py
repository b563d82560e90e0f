"""
ISD and MSD group construction.

ISD groups are the connected components of the protein-peptide graph over
all edges. MSD groups are the components inside one ISD group when only
edges to experimental peptides are followed. Groups are numbered in the
order their seed node is met while scanning the node lists.
"""

from __future__ import annotations

from loguru import logger

from protein_resolver.graph import ProteinGraph
from protein_resolver.models import IsdGroup, MsdGroup

PROTEIN = 0
PEPTIDE = 1


def _traverse(
    graph: ProteinGraph,
    seed: tuple[int, int],
    visited: tuple[set[int], set[int]],
    observed_only: bool,
) -> tuple[list[int], list[int]]:
    """Depth-first traversal from ``seed``; returns (proteins, peptides) in visit order.

    ``visited`` holds (protein indices, peptide indices) and is checked before
    a node is pushed, so every node enters the stack at most once.
    """
    visited_proteins, visited_peptides = visited
    proteins: list[int] = []
    peptides: list[int] = []

    kind, idx = seed
    (visited_proteins if kind == PROTEIN else visited_peptides).add(idx)
    stack = [seed]
    while stack:
        kind, idx = stack.pop()
        if kind == PROTEIN:
            proteins.append(idx)
            for pep_idx in sorted(graph.proteins[idx].peptides, reverse=True):
                if pep_idx in visited_peptides:
                    continue
                if observed_only and not graph.peptides[pep_idx].experimental:
                    continue
                visited_peptides.add(pep_idx)
                stack.append((PEPTIDE, pep_idx))
        else:
            peptides.append(idx)
            for prot_idx in sorted(graph.peptides[idx].proteins, reverse=True):
                if prot_idx in visited_proteins:
                    continue
                visited_proteins.add(prot_idx)
                stack.append((PROTEIN, prot_idx))
    return proteins, peptides


def build_isd_groups(graph: ProteinGraph) -> list[IsdGroup]:
    """Partition every node into ISD groups over theoretical and observed edges."""
    visited: tuple[set[int], set[int]] = (set(), set())
    seeds = [(PROTEIN, i) for i in range(len(graph.proteins))]
    seeds += [(PEPTIDE, i) for i in range(len(graph.peptides))]

    isd_groups = []
    for seed in seeds:
        kind, idx = seed
        if idx in visited[kind]:
            continue
        proteins, peptides = _traverse(graph, seed, visited, observed_only=False)
        group = IsdGroup(index=len(isd_groups), proteins=proteins, peptides=peptides)
        for prot_idx in proteins:
            graph.proteins[prot_idx].isd_group = group.index
        for pep_idx in peptides:
            graph.peptides[pep_idx].isd_group = group.index
        isd_groups.append(group)

    logger.debug(f"Built {len(isd_groups)} ISD groups from {len(graph)} nodes")
    return isd_groups


def build_msd_groups(graph: ProteinGraph, isd_groups: list[IsdGroup]) -> list[MsdGroup]:
    """Partition the observed part of every ISD group into MSD groups.

    Seeds are the experimental peptides of each ISD group; proteins and
    peptides never reached this way keep ``msd_group = None``.
    """
    visited: tuple[set[int], set[int]] = (set(), set())

    msd_groups = []
    for isd in isd_groups:
        for pep_idx in isd.peptides:
            if pep_idx in visited[PEPTIDE] or not graph.peptides[pep_idx].experimental:
                continue
            proteins, peptides = _traverse(graph, (PEPTIDE, pep_idx), visited, observed_only=True)
            group = MsdGroup(
                index=len(msd_groups),
                isd_group=isd.index,
                proteins=proteins,
                peptides=peptides,
            )
            for prot_idx in proteins:
                graph.proteins[prot_idx].msd_group = group.index
            for idx in peptides:
                graph.peptides[idx].msd_group = group.index
            isd.msd_groups.append(group.index)
            msd_groups.append(group)

    logger.debug(f"Built {len(msd_groups)} MSD groups in {len(isd_groups)} ISD groups")
    return msd_groups
