from scenegen.files import find_files, project_relative_paths, reset_output_folder


def _touch(root, name):
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


def test_find_files_walks_project_in_sorted_order(tmp_path):
    for name in ["zeta.tscn", "levels/b.tscn", "levels/a.escn", "main.tscn", "script.gd"]:
        _touch(tmp_path, name)

    found = find_files(tmp_path)

    assert project_relative_paths(tmp_path, found) == [
        "levels/a.escn",
        "levels/b.tscn",
        "main.tscn",
        "zeta.tscn",
    ]


def test_find_files_skips_hidden_and_ignored_directories(tmp_path):
    _touch(tmp_path, ".godot/imported/cache.tscn")
    _touch(tmp_path, ".hidden.tscn")
    _touch(tmp_path, "addons/tool/.gdignore")
    _touch(tmp_path, "addons/tool/panel.tscn")
    _touch(tmp_path, "addons/tool/nested/deep.tscn")
    _touch(tmp_path, "addons/other/dock.tscn")

    found = find_files(tmp_path)

    assert project_relative_paths(tmp_path, found) == ["addons/other/dock.tscn"]


def test_find_files_honors_extensions_and_marker(tmp_path):
    _touch(tmp_path, "a.TSCN")
    _touch(tmp_path, "b.tres")
    _touch(tmp_path, "skip/.skipme")
    _touch(tmp_path, "skip/c.tres")

    found = find_files(tmp_path, [".tres", "tscn"], ignore_marker=".skipme")

    assert project_relative_paths(tmp_path, found) == ["a.TSCN", "b.tres"]


def test_reset_output_folder_clears_previous_output(tmp_path):
    output = tmp_path / "out"
    _touch(output, "Old+SceneInterface.swift")
    _touch(output, "nested/stale.swift")

    assert reset_output_folder(output) == output
    assert output.is_dir()
    assert list(output.iterdir()) == []


def test_reset_output_folder_creates_missing_folder(tmp_path):
    output = tmp_path / "gen" / "swift"

    reset_output_folder(output)

    assert output.is_dir()
