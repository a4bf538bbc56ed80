import os

import pytest

from errors import ErrorKind, UploadServiceError
from utils.path_resolver import resolve_within


def test_folder_resolves_inside_root(tmp_path):
    target = resolve_within(tmp_path, "album1")
    assert str(target).startswith(str(tmp_path.resolve()) + os.sep)
    assert target.name == "album1"


def test_root_itself_is_allowed_for_folders(tmp_path):
    assert resolve_within(tmp_path, ".") == tmp_path.resolve()


def test_root_itself_is_rejected_for_files(tmp_path):
    with pytest.raises(UploadServiceError) as exc:
        resolve_within(tmp_path, ".", allow_root=False)
    assert exc.value.kind == ErrorKind.INVALID_PATH


@pytest.mark.parametrize("name", ["../escape", "../../etc/passwd", "a/../../b"])
def test_traversal_is_blocked(tmp_path, name):
    root = tmp_path / "root"
    root.mkdir()
    with pytest.raises(UploadServiceError) as exc:
        resolve_within(root, name)
    assert exc.value.kind == ErrorKind.INVALID_PATH
    assert exc.value.status_code == 400


def test_sibling_with_shared_prefix_is_blocked(tmp_path):
    root = tmp_path / "uploads"
    root.mkdir()
    (tmp_path / "uploads-evil").mkdir()
    with pytest.raises(UploadServiceError):
        resolve_within(root, "../uploads-evil")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlink_out_of_root_is_blocked(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    outside = tmp_path / "outside"
    outside.mkdir()
    (root / "link").symlink_to(outside, target_is_directory=True)
    with pytest.raises(UploadServiceError):
        resolve_within(root, "link")


def test_file_resolves_strictly_inside_folder(tmp_path):
    folder = resolve_within(tmp_path, "album1")
    target = resolve_within(folder, "photo.png", allow_root=False)
    assert target.parent == folder
