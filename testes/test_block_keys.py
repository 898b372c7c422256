import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import unittest
from sanity_migration_tool.parsers.block_schema import block, link_def, span, validate_blocks


class TestBlockKeyGeneration(unittest.TestCase):

    def test_key_in_block_node(self):
        """A block carries a non-empty _key."""
        node = block([span("My paragraph.")])
        self.assertIn("_key", node)
        self.assertTrue(isinstance(node["_key"], str))
        self.assertEqual(len(node["_key"]), 12)

    def test_key_in_span_and_link(self):
        self.assertTrue(span("text")["_key"])
        self.assertTrue(link_def("https://ex.com")["_key"])

    def test_keys_are_unique(self):
        """Generated keys differ between nodes."""
        node1 = block([span("First")])
        node2 = block([span("Second")])
        self.assertNotEqual(node1["_key"], node2["_key"])

    def test_unknown_style_falls_back_to_normal(self):
        self.assertEqual(block([span("x")], style="h9")["style"], "normal")

    def test_list_block_has_level(self):
        node = block([span("x")], list_item="number", level=0)
        self.assertEqual(node["listItem"], "number")
        self.assertEqual(node["level"], 1)


class TestValidateBlocks(unittest.TestCase):

    def test_non_list_becomes_empty_body(self):
        self.assertEqual(validate_blocks(None), [])
        self.assertEqual(validate_blocks({"_type": "block"}), [])

    def test_stray_span_is_wrapped(self):
        fixed = validate_blocks([span("loose")])
        self.assertEqual(len(fixed), 1)
        self.assertEqual(fixed[0]["_type"], "block")
        self.assertEqual(fixed[0]["children"][0]["text"], "loose")

    def test_invalid_entries_are_dropped_and_styles_fixed(self):
        fixed = validate_blocks(["junk", {"_type": "image"}, {"_type": "block", "style": "bogus", "listItem": "star", "level": 0}])
        self.assertEqual(len(fixed), 1)
        self.assertEqual(fixed[0]["style"], "normal")
        self.assertEqual(fixed[0]["listItem"], "bullet")
        self.assertEqual(fixed[0]["level"], 1)
        self.assertEqual(fixed[0]["markDefs"], [])
        self.assertIn("_key", fixed[0])


if __name__ == '__main__':
    unittest.main()
