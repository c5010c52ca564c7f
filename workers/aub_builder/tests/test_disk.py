"""
test_disk — on-disk size of build outputs.
"""
from aub_builder.core.disk import calculate_dir_size, resolve_total_size


class TestCalculateDirSize:

    def test_sums_nested_files(self, tmp_path):
        (tmp_path / "a.bin").write_bytes(b"x" * 10)
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.bin").write_bytes(b"x" * 20)
        (tmp_path / "sub" / "deeper").mkdir()
        (tmp_path / "sub" / "deeper" / "c.bin").write_bytes(b"x" * 30)

        assert calculate_dir_size(tmp_path) == 60

    def test_missing_path_is_zero(self, tmp_path):
        assert calculate_dir_size(tmp_path / "nope") == 0

    def test_single_file_is_its_length(self, tmp_path):
        artifact = tmp_path / "game.apk"
        artifact.write_bytes(b"x" * 1234)

        assert calculate_dir_size(artifact) == 1234

    def test_unreadable_entry_counts_as_zero(self, tmp_path):
        (tmp_path / "data.bin").write_bytes(b"x" * 10)
        (tmp_path / "dangling").symlink_to(tmp_path / "gone")

        assert calculate_dir_size(tmp_path) == 10

    def test_empty_directory_is_zero(self, tmp_path):
        assert calculate_dir_size(tmp_path) == 0


class TestResolveTotalSize:

    def test_disk_preferred_when_nonzero(self):
        assert resolve_total_size(60, 12345) == 60

    def test_reported_used_when_disk_is_zero(self):
        assert resolve_total_size(0, 12345) == 12345

    def test_never_negative(self):
        assert resolve_total_size(0, -1) == 0
