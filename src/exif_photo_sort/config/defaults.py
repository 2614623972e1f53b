"""Default configuration values."""

DEFAULT_CONFIG = {
    "metadata": {
        "backend": "exiftool",
        "exiftool_path": "exiftool",
        "parallel_workers": 0,
        "batch_size": 256,
    },
    "date": {
        "min_year": 1990,
        "max_year": 2050,
    },
    "sequence": {
        "hdr_keyword_sets": [
            ["AE Auto Bracketing", "Electronic shutter"],
        ],
        "hdr_shot_pattern": r"Shot\s+(\d+)",
        "burst_sequence_pattern": r"Sequence:\s*(\d+)",
    },
    "file_extensions": {
        "raw": [".cr2", ".cr3", ".nef", ".arw", ".dng", ".raw", ".orf", ".rw2", ".raf"],
        "jpeg": [".jpg", ".jpeg"],
    },
    "scan": {
        "exclude_patterns": [".DS_Store", "Thumbs.db", "._*", "desktop.ini"],
    },
    "retry": {
        "max_retries": 3,
        "backoff_base_sec": 0.5,
        "backoff_cap_sec": 10.0,
    },
}
