from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    repo_root: Path
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path


def default_userdata_dir(repo_root: Path) -> Path:
    # A source checkout keeps userdata beside pyproject.toml; an installed copy
    # lives in site-packages, so it writes under the working directory instead.
    if (repo_root / "pyproject.toml").is_file():
        return repo_root / "userdata"
    return Path.cwd() / "userdata"


def get_paths(userdata_dir: Path | None = None) -> Paths:
    # src/owaspcards/paths.py -> parents: [owaspcards, src, repo_root]
    package_dir = Path(__file__).resolve().parent
    repo_root = package_dir.parents[1]
    data_dir = package_dir / "data"
    schema_dir = data_dir / "schemas"
    return Paths(
        repo_root=repo_root,
        data_dir=data_dir,
        schema_dir=schema_dir,
        userdata_dir=userdata_dir or default_userdata_dir(repo_root),
    )
