"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import re
import time

_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]

# Longest suffixes first so "KB" is not read as "K" + "B"
_SUFFIXES = {
    'PB': 1024 ** 5, 'P': 1024 ** 5,
    'TB': 1024 ** 4, 'T': 1024 ** 4,
    'GB': 1024 ** 3, 'G': 1024 ** 3,
    'MB': 1024 ** 2, 'M': 1024 ** 2,
    'KB': 1024, 'K': 1024,
    'KIB': 1024, 'MIB': 1024 ** 2, 'GIB': 1024 ** 3, 'TIB': 1024 ** 4,
    'B': 1,
}

_SIZE_PATTERN = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*([A-Z]*)\s*$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Binary-unit size string: 512 → "512 B", 1536 → "1.5 KB", 10485760 → "10.0 MB".
        """
        if size_bytes < 0:
            raise ValueError(f"Negative size: {size_bytes}")

        if size_bytes < 1024:
            return f"{size_bytes} B"

        value = float(size_bytes)
        for unit in _UNITS[1:]:
            value /= 1024
            if value < 1024 or unit == _UNITS[-1]:
                return f"{value:.1f} {unit}"
        return f"{value:.1f} {_UNITS[-1]}"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parses '1.5GB', '2048KB', '10M', '1KiB' or a bare byte count.
        Raises ValueError for negative sizes or invalid formats.
        """
        text = size_str.strip().upper()
        if text.startswith("-"):
            raise ValueError(f"Negative size not allowed: '{size_str}'")

        match = _SIZE_PATTERN.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 10M, etc."
            )

        number, suffix = match.groups()
        multiplier = _SUFFIXES.get(suffix or 'B')
        if multiplier is None:
            raise ValueError(f"Unknown size unit '{suffix}' in '{size_str}'")
        return int(float(number) * multiplier)

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        try:
            ConvertUtils.human_to_bytes(size_str)
            return True
        except ValueError:
            return False

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M") -> str:
        """Local-time rendering of a POSIX timestamp."""
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "unknown"

    @staticmethod
    def percentage(part: int, total: int) -> str:
        if total <= 0:
            return "0.0%"
        return f"{part / total * 100:.1f}%"
