"""Unit tests for change ordering."""

from pynwabap.models import ArtifactKind
from pynwabap.sync.comparator import ChangeItem, Disposition
from pynwabap.sync.planner import order_changes

FILE = ArtifactKind.FILE
FOLDER = ArtifactKind.FOLDER


def item(kind, artifact_id, disposition):
    return ChangeItem(kind, artifact_id, disposition)


class TestOrderChanges:
    """Tests for order_changes."""

    def test_bucket_order(self):
        changes = [
            item(FILE, "/u.txt", Disposition.UPDATE),
            item(FILE, "/n.txt", Disposition.CREATE),
            item(FOLDER, "/kept", Disposition.UPDATE),
            item(FOLDER, "/new", Disposition.CREATE),
            item(FOLDER, "/old", Disposition.DELETE),
            item(FILE, "/d.txt", Disposition.DELETE),
        ]

        plan = order_changes(changes)

        assert [(i.kind, i.disposition) for i in plan] == [
            (FILE, Disposition.DELETE),
            (FOLDER, Disposition.DELETE),
            (FOLDER, Disposition.CREATE),
            (FOLDER, Disposition.UPDATE),
            (FILE, Disposition.CREATE),
            (FILE, Disposition.UPDATE),
        ]

    def test_fresh_container_scenario(self):
        """Folder creation precedes the files it contains."""
        changes = [
            item(FILE, "/a.txt", Disposition.CREATE),
            item(FOLDER, "/sub", Disposition.CREATE),
            item(FILE, "/sub/b.txt", Disposition.CREATE),
        ]

        plan = order_changes(changes)

        assert [i.id for i in plan] == ["/sub", "/a.txt", "/sub/b.txt"]

    def test_mixed_scenario(self):
        changes = [
            item(FILE, "/a.txt", Disposition.UPDATE),
            item(FILE, "/old.txt", Disposition.DELETE),
            item(FOLDER, "/oldDir", Disposition.DELETE),
            item(FILE, "/oldDir/x.txt", Disposition.DELETE),
            item(FOLDER, "/sub", Disposition.CREATE),
            item(FILE, "/sub/b.txt", Disposition.CREATE),
        ]

        plan = order_changes(changes)

        assert [(i.id, i.disposition) for i in plan] == [
            ("/old.txt", Disposition.DELETE),
            ("/oldDir/x.txt", Disposition.DELETE),
            ("/oldDir", Disposition.DELETE),
            ("/sub", Disposition.CREATE),
            ("/sub/b.txt", Disposition.CREATE),
            ("/a.txt", Disposition.UPDATE),
        ]

    def test_folder_creations_shallowest_first(self):
        changes = [
            item(FOLDER, "/a/b/c", Disposition.CREATE),
            item(FOLDER, "/a", Disposition.CREATE),
            item(FOLDER, "/a/b", Disposition.CREATE),
        ]

        plan = order_changes(changes)

        assert [i.id for i in plan] == ["/a", "/a/b", "/a/b/c"]

    def test_folder_deletions_deepest_first(self):
        changes = [
            item(FOLDER, "/a", Disposition.DELETE),
            item(FOLDER, "/a/b/c", Disposition.DELETE),
            item(FOLDER, "/a/b", Disposition.DELETE),
        ]

        plan = order_changes(changes)

        assert [i.id for i in plan] == ["/a/b/c", "/a/b", "/a"]

    def test_equal_depth_keeps_incoming_order(self):
        changes = [
            item(FOLDER, "/z", Disposition.CREATE),
            item(FOLDER, "/a", Disposition.CREATE),
            item(FOLDER, "/m", Disposition.CREATE),
        ]

        plan = order_changes(changes)

        assert [i.id for i in plan] == ["/z", "/a", "/m"]

    def test_plan_is_a_permutation(self):
        changes = [
            item(FILE, "/a", Disposition.CREATE),
            item(FILE, "/b", Disposition.DELETE),
            item(FOLDER, "/c", Disposition.UPDATE),
        ]
        assert sorted(order_changes(changes), key=lambda i: i.id) == changes

    def test_unknown_items_appended_last(self):
        changes = [
            item("link", "/b", Disposition.CREATE),
            item(FILE, "/a", Disposition.CREATE),
            item(FOLDER, "/c", "move"),
        ]
        assert [i.id for i in order_changes(changes)] == ["/a", "/b", "/c"]

    def test_empty(self):
        assert order_changes([]) == []
