"""Unit tests for artifact comparison."""

import pytest

from pynwabap.models import Artifact, ArtifactKind
from pynwabap.sync.comparator import ArtifactComparator, ChangeItem, Disposition


def file(artifact_id):
    return Artifact(ArtifactKind.FILE, artifact_id)


def folder(artifact_id):
    return Artifact(ArtifactKind.FOLDER, artifact_id)


def as_tuples(changes):
    return [(c.kind, c.id, c.disposition) for c in changes]


class TestDisposition:
    """Tests for Disposition."""

    @pytest.mark.parametrize(
        "disposition,expected",
        [
            (Disposition.CREATE, "created"),
            (Disposition.UPDATE, "updated"),
            (Disposition.DELETE, "deleted"),
        ],
    )
    def test_past_tense(self, disposition, expected):
        assert disposition.past_tense == expected


class TestChangeItem:
    """Tests for ChangeItem."""

    def test_depth(self):
        assert ChangeItem(ArtifactKind.FILE, "/a.txt", Disposition.CREATE).depth == 1
        assert ChangeItem(ArtifactKind.FILE, "/x/y/z", Disposition.CREATE).depth == 3

    def test_to_dict(self):
        item = ChangeItem(ArtifactKind.FOLDER, "/sub", Disposition.DELETE)
        assert item.to_dict() == {
            "kind": "folder",
            "id": "/sub",
            "disposition": "delete",
        }


class TestArtifactComparator:
    """Tests for ArtifactComparator."""

    def test_local_only_is_created(self):
        changes = ArtifactComparator().compare({file("/a.txt")}, set())
        assert as_tuples(changes) == [
            (ArtifactKind.FILE, "/a.txt", Disposition.CREATE)
        ]

    def test_both_is_updated(self):
        changes = ArtifactComparator().compare({file("/a.txt")}, {file("/a.txt")})
        assert as_tuples(changes) == [
            (ArtifactKind.FILE, "/a.txt", Disposition.UPDATE)
        ]

    def test_remote_only_is_deleted(self):
        changes = ArtifactComparator().compare(set(), {file("/old.txt")})
        assert as_tuples(changes) == [
            (ArtifactKind.FILE, "/old.txt", Disposition.DELETE)
        ]

    def test_remote_only_preserved(self):
        comparator = ArtifactComparator(preserve_unselected=True)
        changes = comparator.compare({file("/a.txt")}, {file("/old.txt")})
        assert as_tuples(changes) == [
            (ArtifactKind.FILE, "/a.txt", Disposition.CREATE)
        ]

    def test_every_artifact_classified_once(self):
        local = {folder("/sub"), file("/sub/b.txt"), file("/a.txt")}
        remote = {folder("/sub"), file("/a.txt"), file("/c.txt")}

        changes = ArtifactComparator().compare(local, remote)

        ids = [(c.kind, c.id) for c in changes]
        assert len(ids) == len(set(ids)) == len(local | remote)

    def test_kind_mismatch_is_not_a_match(self):
        """A local file and a remote folder with the same id are unrelated."""
        changes = ArtifactComparator().compare({file("/x")}, {folder("/x")})
        assert set(as_tuples(changes)) == {
            (ArtifactKind.FILE, "/x", Disposition.CREATE),
            (ArtifactKind.FOLDER, "/x", Disposition.DELETE),
        }

    def test_empty_sets(self):
        assert ArtifactComparator().compare(set(), set()) == []

    def test_sorted_by_id(self):
        local = {file("/c"), file("/a"), file("/b")}
        changes = ArtifactComparator().compare(local, set())
        assert [c.id for c in changes] == ["/a", "/b", "/c"]


class TestRemovedArtifacts:
    """Tests for artifacts selected but missing on disk."""

    def test_removed_and_remote_is_deleted(self):
        changes = ArtifactComparator().compare(
            set(), {file("/gone.txt")}, removed={file("/gone.txt")}
        )
        assert as_tuples(changes) == [
            (ArtifactKind.FILE, "/gone.txt", Disposition.DELETE)
        ]

    def test_removed_deleted_even_when_preserving(self):
        comparator = ArtifactComparator(preserve_unselected=True)
        changes = comparator.compare(
            set(), {file("/gone.txt"), file("/keep.txt")}, removed={file("/gone.txt")}
        )
        assert as_tuples(changes) == [
            (ArtifactKind.FILE, "/gone.txt", Disposition.DELETE)
        ]

    def test_removed_not_on_server_is_ignored(self):
        changes = ArtifactComparator().compare(
            set(), set(), removed={file("/gone.txt")}
        )
        assert changes == []
