import unittest

from drivetree.models import TreeNode
from drivetree.util.mime import FOLDER_MIME


class TestTreeNode(unittest.TestCase):
    def test_defaults(self) -> None:
        node = TreeNode(id="F1", title="report.pdf", mime_type="application/pdf")
        self.assertIsNone(node.alternate_link)
        self.assertIsNone(node.parent_id)
        self.assertEqual(node.children, [])
        self.assertFalse(node.is_folder)

    def test_folder(self) -> None:
        node = TreeNode(id="D1", title="docs", mime_type=FOLDER_MIME)
        self.assertTrue(node.is_folder)

    def test_children_not_shared(self) -> None:
        a = TreeNode(id="a", title="a", mime_type=FOLDER_MIME)
        b = TreeNode(id="b", title="b", mime_type=FOLDER_MIME)
        a.children.append("x")
        self.assertEqual(b.children, [])


if __name__ == "__main__":
    unittest.main()
