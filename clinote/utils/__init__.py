from clinote.utils.file_operations import (
    ensure_directory,
    output_name,
    read_text,
    save_batch_report,
    write_text,
)

__all__ = [
    "ensure_directory",
    "output_name",
    "read_text",
    "save_batch_report",
    "write_text",
]
