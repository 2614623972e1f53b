"""Pair files of the same shot by folder and base name."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Iterable

from ..models import PhotoBundle, PhotoFile


def bundle_files(files: Iterable[PhotoFile]) -> list[PhotoBundle]:
    """Group `P1.ORF`, `P1.JPG` and `P1.ORF.xmp` of one folder into one bundle.

    Bundles and their members come back sorted by path so the result does not
    depend on discovery order.
    """
    buckets: dict[tuple[Path, str], list[PhotoFile]] = defaultdict(list)
    for photo_file in files:
        buckets[(photo_file.path.parent, photo_file.base_name)].append(photo_file)

    bundles = [
        PhotoBundle(
            folder=folder,
            base_name=base_name,
            members=tuple(sorted(members, key=lambda item: item.path.name)),
        )
        for (folder, base_name), members in buckets.items()
    ]
    bundles.sort(key=lambda bundle: bundle.key)
    return bundles
