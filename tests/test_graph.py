"""Tests for weighted extraction, depth calculation and graph assembly."""

import unittest

from coursegraph.handlers.assembler import GraphAssembler, assemble, node_size
from coursegraph.handlers.depth import compute_depths, depth_of
from coursegraph.handlers.extractor import extract_weighted, round_link_value
from coursegraph.models.course import CourseRecord, ParsedCourseRequirements
from coursegraph.models.requirements import (
    CGPARequirement,
    CourseRequirement,
    CreditCountRequirement,
    GroupLogic,
    HSCourseRequirement,
    RequirementGroup,
)


def c(course_id):
    department, number = course_id.split(" ")
    return CourseRequirement(department=department, number=number)


def group(logic, *children):
    return RequirementGroup(logic=GroupLogic[logic], children=list(children))


def record(course_id, prerequisite=None, corequisite=None, title=""):
    department, number = course_id.split(" ")
    return CourseRecord(
        department=department,
        number=number,
        prerequisite=prerequisite,
        corequisite=corequisite,
        original_title=title,
    )


class TestExtractWeighted(unittest.TestCase):

    def test_single_course(self):
        self.assertEqual(extract_weighted(c("CMPT 120")), [("CMPT 120", 1.0)])

    def test_one_of_splits_value(self):
        pairs = extract_weighted(group("ONE_OF", c("MATH 150"), c("MATH 151")))
        self.assertEqual(pairs, [("MATH 150", 0.5), ("MATH 151", 0.5)])

    def test_two_of_three(self):
        pairs = extract_weighted(group("TWO_OF", c("BPK 201"), c("BPK 205"), c("BPK 207")))
        self.assertEqual([round_link_value(v) for _, v in pairs], [0.67, 0.67, 0.67])

    def test_nested_all_of_keeps_parent_value(self):
        tree = group("ALL_OF", group("ONE_OF", c("MATH 150"), c("MATH 151")), c("CMPT 125"))
        self.assertEqual(extract_weighted(tree), [("MATH 150", 0.5), ("MATH 151", 0.5), ("CMPT 125", 1.0)])

    def test_high_school_and_non_course_leaves(self):
        tree = group(
            "ALL_OF",
            HSCourseRequirement(course="Pre-Calculus 12"),
            CreditCountRequirement(credits=60),
            CGPARequirement(min_cgpa=2.5),
        )
        self.assertEqual(extract_weighted(tree), [("HS Pre-Calculus 12", 1.0)])

    def test_round_half_up(self):
        self.assertEqual(round_link_value(1 / 3), 0.33)
        self.assertEqual(round_link_value(2 / 3), 0.67)
        self.assertEqual(round_link_value(0.125), 0.13)


class TestDepth(unittest.TestCase):

    def test_bare_course_is_depth_one(self):
        self.assertEqual(depth_of(c("CMPT 120"), {}), 1)

    def test_high_school_is_depth_one(self):
        self.assertEqual(depth_of(HSCourseRequirement(course="Math 12"), {"HS Math 12": 7}), 1)

    def test_group_logic(self):
        known = {"A 1": 1, "B 1": 4, "C 1": 7}
        self.assertEqual(depth_of(group("ONE_OF", c("A 1"), c("B 1")), known), 2)
        self.assertEqual(depth_of(group("ALL_OF", c("A 1"), c("B 1")), known), 5)
        self.assertEqual(depth_of(group("TWO_OF", c("A 1"), c("B 1"), c("C 1")), known), 5)

    def test_two_of_with_one_remaining_depth(self):
        tree = group("TWO_OF", c("A 1"), CGPARequirement(min_cgpa=2.0))
        self.assertEqual(depth_of(tree, {"A 1": 2}), 3)

    def test_non_course_tree_has_no_depth(self):
        self.assertEqual(depth_of(group("ALL_OF", CreditCountRequirement(credits=30)), {}), 0)

    def test_chain_in_listing_order(self):
        records = [
            record("CMPT 120"),
            record("CMPT 125", prerequisite=c("CMPT 120")),
            record("CMPT 225", prerequisite=c("CMPT 125")),
        ]
        self.assertEqual(compute_depths(records), {"CMPT 120": 0, "CMPT 125": 1, "CMPT 225": 2})

    def test_forward_reference_reads_as_zero(self):
        # CMPT 225 is listed before the course it depends on
        records = [
            record("CMPT 225", prerequisite=c("CMPT 125")),
            record("CMPT 125", prerequisite=c("CMPT 120")),
        ]
        depths = compute_depths(records)
        self.assertEqual(depths["CMPT 225"], 1)
        self.assertEqual(depths["CMPT 125"], 1)

    def test_cycle_terminates(self):
        records = [
            record("A 1", prerequisite=c("B 1")),
            record("B 1", prerequisite=c("A 1")),
        ]
        self.assertEqual(compute_depths(records), {"A 1": 1, "B 1": 2})

    def test_corequisite_counts_toward_depth(self):
        depths = compute_depths([
            record("A 1"),
            record("B 1", prerequisite=c("A 1")),
            record("C 1", prerequisite=c("A 1"), corequisite=c("B 1")),
        ])
        self.assertEqual(depths["C 1"], 2)


class TestNodeSize(unittest.TestCase):

    def test_leaf_is_minimum(self):
        self.assertEqual(node_size(0, 10), 1.0)

    def test_hub_is_maximum(self):
        self.assertEqual(node_size(10, 10), 3.0)

    def test_intermediate_rounds_to_step(self):
        self.assertAlmostEqual(node_size(1, 3), 2.0)
        size = node_size(2, 10)
        self.assertTrue(1.0 <= size <= 3.0)
        self.assertAlmostEqual(round(size / 0.2) * 0.2, size)


class TestAssembler(unittest.TestCase):

    def test_links_nodes_and_titles(self):
        graph = assemble([
            record("CMPT 120", title="Intro"),
            record("CMPT 125", prerequisite=c("CMPT 120"), title="Intro II"),
        ])
        self.assertEqual([link.to_dict() for link in graph.links],
                         [{"source": "CMPT 120", "target": "CMPT 125", "value": 1.0}])
        self.assertEqual(graph.node("CMPT 120").title, "Intro")
        self.assertEqual(graph.node("CMPT 125").depth, 1)

    def test_duplicate_links_keep_highest_value(self):
        tree = group("ALL_OF", group("ONE_OF", c("MATH 150"), c("MATH 151")), c("MATH 150"))
        graph = assemble([record("MATH 152", prerequisite=tree)])
        values = {(link.source, link.target): link.value for link in graph.links}
        self.assertEqual(values, {("MATH 150", "MATH 152"): 1.0, ("MATH 151", "MATH 152"): 0.5})

    def test_shared_prerequisite_across_records_keeps_one_link_per_target(self):
        graph = assemble([
            record("MATH 232", prerequisite=group("ONE_OF", c("MATH 150"), c("MATH 151"), c("MATH 154"))),
            record("MATH 251", prerequisite=group("ALL_OF", c("MATH 150"), c("MATH 232")),
                   corequisite=group("ONE_OF", c("MATH 150"), c("MATH 152"))),
        ])
        from_math_150 = [(link.target, link.value) for link in graph.links if link.source == "MATH 150"]
        self.assertEqual(sorted(from_math_150), [("MATH 232", 0.33), ("MATH 251", 1.0)])
        self.assertEqual(len(graph.links), len({(link.source, link.target) for link in graph.links}))

    def test_prerequisite_and_corequisite_edges_merge(self):
        graph = assemble([record("A 1", prerequisite=group("ONE_OF", c("B 1"), c("C 1")),
                                 corequisite=c("B 1"))])
        values = {link.source: link.value for link in graph.links}
        self.assertEqual(values, {"B 1": 1.0, "C 1": 0.5})

    def test_isolated_nodes_are_pruned(self):
        graph = assemble([
            record("CMPT 105", title="Lonely"),
            record("CMPT 125", prerequisite=c("CMPT 120")),
        ])
        self.assertEqual(sorted(node.id for node in graph.nodes), ["CMPT 120", "CMPT 125"])

    def test_pruning_can_be_disabled(self):
        graph = GraphAssembler(prune=False).assemble([record("CMPT 105")])
        self.assertEqual([node.id for node in graph.nodes], ["CMPT 105"])

    def test_unknown_referenced_node_defaults(self):
        graph = assemble([record("CMPT 125", prerequisite=HSCourseRequirement(course="Pre-Calculus 12"))])
        node = graph.node("HS Pre-Calculus 12")
        self.assertEqual(node.group, "HS")
        self.assertEqual(node.title, "HS Pre-Calculus 12")
        self.assertEqual(node.depth, 0)

    def test_hub_gets_largest_size(self):
        records = [record(f"CMPT {n}", prerequisite=c("CMPT 120")) for n in (125, 127, 130)]
        records.append(record("CMPT 225", prerequisite=c("CMPT 125")))
        graph = assemble(records)
        self.assertEqual(graph.node("CMPT 120").size, 3.0)
        self.assertEqual(graph.node("CMPT 225").size, 1.0)
        self.assertEqual(graph.out_degrees()["CMPT 120"], 3)

    def test_record_without_original_title_uses_id(self):
        parsed = ParsedCourseRequirements(department="A", number="2", prerequisite=c("A 1"))
        graph = assemble([parsed])
        self.assertEqual(graph.node("A 2").title, "A 2")

    def test_summary_helpers(self):
        graph = assemble([
            record("A 1"),
            record("A 2", prerequisite=c("A 1")),
            record("B 3", prerequisite=c("A 2")),
        ])
        self.assertEqual(graph.department_counts(), {"A": 2, "B": 1})
        self.assertEqual(graph.depth_distribution(), {0: 1, 1: 1, 2: 1})
        self.assertEqual([node.id for node in graph.deepest(1)], ["B 3"])
        with self.assertRaises(KeyError):
            graph.node("Z 9")


if __name__ == '__main__':
    unittest.main()
