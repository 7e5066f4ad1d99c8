"""
Display helpers for scanned files.
"""

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

FILE_TYPES = {
    ".pdf": "PDF Document",
    ".jpg": "JPEG Image",
    ".jpeg": "JPEG Image",
    ".png": "PNG Image",
    ".tif": "TIFF Image",
    ".tiff": "TIFF Image",
    ".bmp": "Bitmap Image",
}


def format_file_size(num_bytes: int) -> str:
    """Human readable size with up to two decimals, e.g. 1536 -> '1.5 KB'."""
    size = float(num_bytes)
    order = 0
    while size >= 1024 and order < len(SIZE_UNITS) - 1:
        order += 1
        size /= 1024
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[order]}"


def describe_file_type(extension: str) -> str:
    if not extension:
        return "Unknown"
    ext = extension.lower()
    if not ext.startswith("."):
        ext = "." + ext
    return FILE_TYPES.get(ext, "Unknown")
