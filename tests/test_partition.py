"""Tests for ISD/MSD partitioning and reindexing."""

import numpy as np

from protein_resolver import PeptideEntry
from protein_resolver.graph import Observation, ProteinGraph, include_evidence
from protein_resolver.partition import build_isd_groups, build_msd_groups
from protein_resolver.reindex import reindex_nodes
from conftest import make_entries


def _observe(graph, *sequences):
    include_evidence(graph, [Observation(seq, identification=i, hit=0) for i, seq in enumerate(sequences)])


def _accessions(graph, indices):
    return {graph.proteins[i].accession for i in indices}


def _sequences(graph, indices):
    return {graph.peptides[i].sequence for i in indices}


class TestIsdGroups:
    """Test coarse partitioning over all edges."""

    def test_disconnected_components(self):
        """Should put unconnected proteins in separate groups."""
        graph = ProteinGraph.from_theoretical(
            make_entries({"A": {"P1"}, "B": {"P2"}, "C": {"P1", "P3"}})
        )
        isd_groups = build_isd_groups(graph)

        assert len(isd_groups) == 2
        assert _accessions(graph, isd_groups[0].proteins) == {"A", "C"}
        assert _sequences(graph, isd_groups[0].peptides) == {"P1", "P3"}
        assert _accessions(graph, isd_groups[1].proteins) == {"B"}
        assert graph.proteins[1].isd_group == 1

    def test_numbered_by_first_seed(self):
        """Should number groups in seed order."""
        graph = ProteinGraph.from_theoretical(
            make_entries({"X": {"P9"}, "Y": {"P1"}, "Z": {"P9", "P5"}})
        )
        isd_groups = build_isd_groups(graph)
        assert isd_groups[0].proteins[0] == 0
        assert _accessions(graph, isd_groups[0].proteins) == {"X", "Z"}
        assert _accessions(graph, isd_groups[1].proteins) == {"Y"}

    def test_cycle_visits_each_node_once(self):
        """Should visit every node of a cycle once."""
        graph = ProteinGraph.from_theoretical(
            make_entries({"A": {"P1", "P2"}, "B": {"P2", "P3"}, "C": {"P3", "P1"}})
        )
        isd_groups = build_isd_groups(graph)
        assert len(isd_groups) == 1
        assert sorted(isd_groups[0].proteins) == [0, 1, 2]
        assert sorted(isd_groups[0].peptides) == [0, 1, 2]

    def test_orphan_peptide_gets_own_group(self):
        """Should give a peptide without proteins its own group."""
        graph = ProteinGraph([], [PeptideEntry("LONELY")])
        isd_groups = build_isd_groups(graph)
        assert len(isd_groups) == 1
        assert isd_groups[0].peptides == [0]
        assert graph.peptides[0].isd_group == 0


class TestMsdGroups:
    """Test fine partitioning over observed edges."""

    def test_theoretical_bridge_is_not_followed(self):
        """Should not join MSD groups through unobserved peptides."""
        # A and C only connect through the unobserved P2
        graph = ProteinGraph.from_theoretical(
            make_entries({"A": {"P1", "P2"}, "C": {"P2", "P3"}})
        )
        _observe(graph, "P1", "P3")
        isd_groups = build_isd_groups(graph)
        msd_groups = build_msd_groups(graph, isd_groups)

        assert len(isd_groups) == 1
        assert len(msd_groups) == 2
        assert [g.isd_group for g in msd_groups] == [0, 0]
        assert isd_groups[0].msd_groups == [0, 1]
        assert graph.peptides[graph.find_peptide("P2")].msd_group is None

    def test_unobserved_protein_has_no_msd_group(self):
        """Should leave proteins without observed peptides out of MSD groups."""
        graph = ProteinGraph.from_theoretical(
            make_entries({"A": {"P1"}, "B": {"P2"}, "C": {"P1", "P3"}})
        )
        _observe(graph, "P3")
        isd_groups = build_isd_groups(graph)
        msd_groups = build_msd_groups(graph, isd_groups)

        assert len(msd_groups) == 1
        assert _accessions(graph, msd_groups[0].proteins) == {"C"}
        assert _sequences(graph, msd_groups[0].peptides) == {"P3"}
        assert graph.proteins[0].msd_group is None
        assert graph.proteins[1].msd_group is None

    def test_shared_observed_peptide_joins_proteins(self):
        """Should join proteins sharing an observed peptide."""
        graph = ProteinGraph.from_theoretical(
            make_entries({"A": {"P1", "P2"}, "B": {"P2", "P3"}})
        )
        _observe(graph, "P2")
        msd_groups = build_msd_groups(graph, build_isd_groups(graph))
        assert len(msd_groups) == 1
        assert _accessions(graph, msd_groups[0].proteins) == {"A", "B"}
        assert _sequences(graph, msd_groups[0].peptides) == {"P2"}

    def test_no_observations(self):
        """Should build no MSD groups when nothing is observed."""
        graph = ProteinGraph.from_theoretical(make_entries({"A": {"P1"}}))
        isd_groups = build_isd_groups(graph)
        assert build_msd_groups(graph, isd_groups) == []
        assert isd_groups[0].msd_groups == []


class TestReindexing:
    """Test compact reindexing."""

    def test_sentinel_for_excluded_nodes(self):
        """Should map excluded nodes to the sentinel."""
        graph = ProteinGraph.from_theoretical(
            make_entries({"A": {"P1"}, "B": {"P2"}, "C": {"P1", "P3"}})
        )
        _observe(graph, "P3", "P2")
        msd_groups = build_msd_groups(graph, build_isd_groups(graph))
        reindexing = reindex_nodes(graph, msd_groups)

        assert reindexing.protein_sentinel == 2
        assert reindexing.proteins[0] == reindexing.protein_sentinel  # A
        assert not reindexing.is_reachable_protein(0)
        assert reindexing.is_reachable_protein(1)
        assert reindexing.is_reachable_protein(2)
        assert reindexing.peptides[graph.find_peptide("P1")] == reindexing.peptide_sentinel

    def test_compact_order_follows_msd_groups(self):
        """Should order compact indices by MSD group."""
        graph = ProteinGraph.from_theoretical(make_entries({"A": {"P1"}, "B": {"P2"}}))
        _observe(graph, "P2", "P1")
        msd_groups = build_msd_groups(graph, build_isd_groups(graph))
        reindexing = reindex_nodes(graph, msd_groups)

        assert reindexing.compact_proteins == [p for g in msd_groups for p in g.proteins]
        for new, old in enumerate(reindexing.compact_proteins):
            assert reindexing.proteins[old] == new
        np.testing.assert_array_equal(np.sort(reindexing.peptides), [0, 1])

    def test_empty(self):
        """Should handle an empty graph."""
        reindexing = reindex_nodes(ProteinGraph([], []), [])
        assert len(reindexing.proteins) == 0
        assert reindexing.protein_sentinel == 0
