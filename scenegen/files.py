import shutil
from pathlib import Path
from typing import Iterable, List

DEFAULT_SCENE_EXTENSIONS = ("tscn", "escn")
DEFAULT_IGNORE_MARKER = ".gdignore"


def find_files(
    root: "str | Path",
    extensions: Iterable[str] = DEFAULT_SCENE_EXTENSIONS,
    *,
    ignore_marker: str = DEFAULT_IGNORE_MARKER,
) -> List[Path]:
    """Recursively find files with the given extensions below ``root``.

    Hidden files and directories are skipped, as are directories holding an
    ``ignore_marker`` file, together with everything below them. Results are
    sorted by their path relative to ``root``.
    """
    root = Path(root)
    wanted = {ext.lower().lstrip(".") for ext in extensions}
    found: List[Path] = []

    def walk(directory: Path) -> None:
        for entry in directory.iterdir():
            if entry.name.startswith("."):
                continue
            if entry.is_dir():
                if ignore_marker and (entry / ignore_marker).exists():
                    continue
                walk(entry)
            elif entry.suffix.lower().lstrip(".") in wanted:
                found.append(entry)

    walk(root)
    found.sort(key=lambda path: path.relative_to(root).as_posix())
    return found


def project_relative_paths(root: "str | Path", files: Iterable[Path]) -> List[str]:
    root = Path(root)
    return [path.relative_to(root).as_posix() for path in files]


def reset_output_folder(output_dir: "str | Path") -> Path:
    """Remove ``output_dir`` if present and recreate it empty."""
    output_dir = Path(output_dir)
    if output_dir.exists():
        if output_dir.is_dir():
            shutil.rmtree(output_dir)
        else:
            output_dir.unlink()
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
